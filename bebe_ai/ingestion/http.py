import logging

import httpx

from bebe_ai.config import CRAWL
from bebe_ai.ingestion.base import FetchError

logger = logging.getLogger(__name__)


def build_client(**kwargs) -> httpx.AsyncClient:
    """AsyncClient with the crawler's timeout, redirect and UA defaults."""
    kwargs.setdefault("timeout", CRAWL["request_timeout_s"])
    kwargs.setdefault("follow_redirects", True)
    kwargs.setdefault("headers", {"User-Agent": CRAWL["user_agent"]})
    return httpx.AsyncClient(**kwargs)


async def get_html(client: httpx.AsyncClient, url: str) -> str:
    try:
        resp = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc

    if not resp.is_success:
        raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)

    logger.debug("Received %d bytes from %s", len(resp.content), url)
    return resp.text
