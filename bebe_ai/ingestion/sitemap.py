"""
Site map discovery
==================
Maps the guide's navigation into a flat list of pages to crawl.

Level 1: the root listing page holds one card per section.
Level 2: each section page holds a navigation menu; every menu item is a
subsection page, and a nested list under an item holds further pages that are
filed under the same section/subsection pair.

Discovery is sequential: the full page list must be known before fan-out.
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from bebe_ai.config import CRAWL, SELECTORS
from bebe_ai.ingestion.base import DiscoveryError, FetchError
from bebe_ai.ingestion.http import get_html
from bebe_ai.ingestion.models import PageDescriptor

logger = logging.getLogger(__name__)


def _direct_child(element: Tag, name: str) -> Optional[Tag]:
    return element.find(name, recursive=False)


def _anchor_link(item: Tag) -> Optional[Tuple[str, str]]:
    """(text, href) of the item's own anchor, if it has one."""
    anchor = _direct_child(item, "a")
    if anchor is None or not anchor.get("href"):
        return None
    return anchor.get_text().strip(), anchor["href"]


class SiteMapDiscoverer:
    def __init__(
        self,
        client: httpx.AsyncClient,
        root_url: str = CRAWL["root_url"],
        base_url: str = CRAWL["base_url"],
    ):
        self.client = client
        self.root_url = root_url
        self.base_url = base_url

    def resolve(self, href: str) -> str:
        return urljoin(self.base_url, href)

    async def _get_soup(self, url: str) -> BeautifulSoup:
        try:
            html = await get_html(self.client, url)
        except FetchError as exc:
            raise DiscoveryError(f"Cannot retrieve {url}: {exc.reason}") from exc
        return BeautifulSoup(html, "html.parser")

    # ------------------------------------------------------------------
    # Level 1: sections
    # ------------------------------------------------------------------

    async def discover_sections(self) -> List[Tuple[str, str]]:
        soup = await self._get_soup(self.root_url)
        cards = soup.select(SELECTORS["section_card"])
        if not cards:
            raise DiscoveryError(
                f"No section card ({SELECTORS['section_card']}) found on {self.root_url}"
            )

        sections = []
        for card in cards:
            anchor = card if card.name == "a" else card.find("a", href=True)
            if anchor is None or not anchor.get("href"):
                raise DiscoveryError(f"Section card without a link on {self.root_url}")
            # The card's first child is its illustration, the second holds the title.
            parts = anchor.find_all(recursive=False)
            title_el = parts[1] if len(parts) > 1 else anchor
            sections.append((title_el.get_text().strip(), anchor["href"]))

        logger.debug("Found sections: %s", sections)
        return sections

    # ------------------------------------------------------------------
    # Level 2: pages of a section
    # ------------------------------------------------------------------

    async def discover_section_pages(self, section_title: str, href: str) -> List[PageDescriptor]:
        url = self.resolve(href)
        logger.info("Crawling %s", url)
        soup = await self._get_soup(url)

        menu = soup.select_one(SELECTORS["section_menu"])
        if menu is None:
            raise DiscoveryError(f"No navigation menu ({SELECTORS['section_menu']}) on {url}")

        pages: List[PageDescriptor] = []
        for item in menu.find_all(recursive=False):
            link = _anchor_link(item)
            if link is None:
                raise DiscoveryError(f"Menu item without a link on {url}")
            subsection_title, sub_href = link
            pages.append(PageDescriptor(
                url=self.resolve(sub_href),
                section=section_title,
                subsection=subsection_title,
            ))

            nested = _direct_child(item, "ul")
            if nested is None:
                continue
            for nested_item in nested.find_all(recursive=False):
                nested_link = _anchor_link(nested_item)
                if nested_link is None:
                    continue
                pages.append(PageDescriptor(
                    url=self.resolve(nested_link[1]),
                    section=section_title,
                    subsection=subsection_title,
                ))
        return pages

    async def discover(self) -> List[PageDescriptor]:
        pages: List[PageDescriptor] = []
        for section_title, href in await self.discover_sections():
            pages.extend(await self.discover_section_pages(section_title, href))

        logger.info("Discovered %d pages", len(pages))
        logger.debug("Found pages: %s", pages)
        return pages
