from typing import Dict, List, Tuple

import httpx
import pytest

BASE = "https://www.inspq.qc.ca"
ROOT_PATH = "/mieux-vivre/consultez-le-guide"


def section_card(title: str, href: str) -> str:
    return f'<div class="carte-lien-mv"><a href="{href}"><img src="/img.png"><span>{title}</span></a></div>'


def section_menu(items: List[Tuple[str, str, List[Tuple[str, str]]]]) -> str:
    lis = []
    for title, href, nested in items:
        sub = ""
        if nested:
            sub = "<ul>" + "".join(f'<li><a href="{h}">{t}</a></li>' for t, h in nested) + "</ul>"
        lis.append(f'<li><a href="{href}">{title}</a>{sub}</li>')
    return (
        '<html><body><nav id="block-mieuxvivre-post-content-menu">'
        f'<ul class="menu">{"".join(lis)}</ul></nav></body></html>'
    )


def content_page(title: str, body: str) -> str:
    return (
        f"<html><body><h1>{title}</h1>"
        '<div class="two-column-layout"><div class="two-column-layout__left">'
        f'<div class="field__item">{body}</div>'
        "</div></div></body></html>"
    )


class FakeSite:
    """MockTransport handler serving canned pages by path."""

    def __init__(self):
        self.pages: Dict[str, Tuple[int, str]] = {}
        self.requested: List[str] = []

    def add(self, path: str, html: str, status: int = 200) -> "FakeSite":
        self.pages[path] = (status, html)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requested.append(request.url.path)
        status, html = self.pages.get(request.url.path, (404, "not found"))
        return httpx.Response(status, text=html, headers={"content-type": "text/html"})


def two_section_site() -> FakeSite:
    """Two sections, each with one subsection page and one nested page."""
    site = FakeSite()
    site.add(ROOT_PATH, "<html><body>"
             + section_card("Grossesse", "/mieux-vivre/grossesse")
             + section_card("Alimentation", "/mieux-vivre/alimentation")
             + "</body></html>")
    site.add("/mieux-vivre/grossesse", section_menu([
        ("Suivi de grossesse", "/mieux-vivre/grossesse/suivi",
         [("Échographie", "/mieux-vivre/grossesse/suivi/echographie")]),
    ]))
    site.add("/mieux-vivre/alimentation", section_menu([
        ("Allaitement", "/mieux-vivre/alimentation/allaitement",
         [("Positions", "/mieux-vivre/alimentation/allaitement/positions")]),
    ]))
    for path, title in [
        ("/mieux-vivre/grossesse/suivi", "Suivi de grossesse"),
        ("/mieux-vivre/grossesse/suivi/echographie", "Échographie"),
        ("/mieux-vivre/alimentation/allaitement", "Allaitement"),
        ("/mieux-vivre/alimentation/allaitement/positions", "Positions"),
    ]:
        site.add(path, content_page(title, (
            "<h2>Ce qu'il faut savoir</h2>"
            f"<p>{title} : voici un paragraphe assez long pour être conservé.</p>"
            "<ul><li>premier point</li><li>second point</li></ul>"
        )))
    return site


@pytest.fixture
def site() -> FakeSite:
    return two_section_site()
