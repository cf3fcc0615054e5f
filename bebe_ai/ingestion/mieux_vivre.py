"""
Mieux Vivre Fetcher
===================
Crawls the "Mieux vivre avec notre enfant" guide and chunks every page.

Strategy:
1. Discover every page from the guide's navigation (see sitemap.py)
2. Fetch all pages concurrently, at most `max_concurrency` in flight
3. Segment each page's content container into heading-tagged chunks
4. Drop near-empty chunks (captions, layout leftovers)

A page that fails for any reason is logged and dropped; only a discovery
failure aborts the crawl.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from bebe_ai.config import CRAWL, SELECTORS
from bebe_ai.ingestion.base import BaseFetcher, Chunk, FetchError, ParseError
from bebe_ai.ingestion.http import build_client, get_html
from bebe_ai.ingestion.models import MieuxVivreMetadata, PageDescriptor, PageMetadata
from bebe_ai.ingestion.segmenter import nodes_from_container, segment
from bebe_ai.ingestion.sitemap import SiteMapDiscoverer

logger = logging.getLogger(__name__)

TEXT_MIN_LENGTH = CRAWL["text_min_length"]


# ---------------------------------------------------------------------------
# Single page
# ---------------------------------------------------------------------------

def parse_page(html: str, page: PageDescriptor) -> List[Chunk[MieuxVivreMetadata]]:
    soup = BeautifulSoup(html, "html.parser")

    title = soup.select_one(SELECTORS["title"])
    if title is None:
        raise ParseError(page.url, f"no title ({SELECTORS['title']})")
    content = soup.select_one(SELECTORS["content"])
    if content is None:
        raise ParseError(page.url, f"no content container ({SELECTORS['content']})")

    meta = PageMetadata.for_page(page, title.get_text().strip())
    return segment(nodes_from_container(content), meta)


async def fetch_page(
    client: httpx.AsyncClient,
    page: PageDescriptor,
    semaphore: asyncio.Semaphore,
    delay_s: float = 0.0,
) -> List[Chunk[MieuxVivreMetadata]]:
    async with semaphore:
        if delay_s:
            await asyncio.sleep(delay_s)
        logger.info("Fetching %s", page.url)
        html = await get_html(client, page.url)
    return parse_page(html, page)


@dataclass
class PageResult:
    page: PageDescriptor
    chunks: List[Chunk[MieuxVivreMetadata]] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Whole guide
# ---------------------------------------------------------------------------

class MieuxVivreFetcher(BaseFetcher[MieuxVivreMetadata]):
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_concurrency: int = CRAWL["max_concurrency"],
        text_min_length: int = TEXT_MIN_LENGTH,
        delay_s: float = CRAWL["delay_s"],
        root_url: str = CRAWL["root_url"],
        base_url: str = CRAWL["base_url"],
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.max_concurrency = max_concurrency
        self.text_min_length = text_min_length
        self.delay_s = delay_s
        self.root_url = root_url
        self.base_url = base_url
        self.failed_pages: List[PageResult] = []

    async def fetch(self) -> List[Chunk[MieuxVivreMetadata]]:
        logger.info("Crawling and chunking Mieux Vivre")
        if self.client is not None:
            return await self._run(self.client)
        async with build_client() as client:
            return await self._run(client)

    crawl = fetch

    async def _run(self, client: httpx.AsyncClient) -> List[Chunk[MieuxVivreMetadata]]:
        discoverer = SiteMapDiscoverer(client, root_url=self.root_url, base_url=self.base_url)
        pages = await discoverer.discover()

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [asyncio.create_task(self._crawl_one(client, page, semaphore)) for page in pages]

        self.failed_pages = []
        chunks: List[Chunk[MieuxVivreMetadata]] = []
        for next_done in asyncio.as_completed(tasks):
            result = await next_done
            if not result.ok:
                logger.error("Dropping page %s: %s", result.page.url, result.error)
                self.failed_pages.append(result)
                continue
            chunks.extend(self.keep(result.chunks))

        logger.info(
            "Done! Pages crawled: %d | Failed: %d | Chunks: %d",
            len(pages), len(self.failed_pages), len(chunks),
        )
        return chunks

    async def _crawl_one(
        self, client: httpx.AsyncClient, page: PageDescriptor, semaphore: asyncio.Semaphore
    ) -> PageResult:
        try:
            chunks = await fetch_page(client, page, semaphore, delay_s=self.delay_s)
        except (FetchError, ParseError) as exc:
            return PageResult(page=page, error=exc)
        except Exception as exc:
            # Anything else is still confined to this page.
            logger.warning("Unexpected failure on %s", page.url, exc_info=True)
            return PageResult(page=page, error=exc)
        return PageResult(page=page, chunks=chunks)

    def keep(self, chunks: List[Chunk[MieuxVivreMetadata]]) -> List[Chunk[MieuxVivreMetadata]]:
        """Drop chunks too short to be worth retrieving."""
        return [chunk for chunk in chunks if len(chunk.text) > self.text_min_length]
