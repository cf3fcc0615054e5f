from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

M = TypeVar("M")


@dataclass(frozen=True)
class Chunk(Generic[M]):
    text: str
    metadata: M


class BaseFetcher(ABC, Generic[M]):
    @abstractmethod
    async def fetch(self) -> List[Chunk[M]]:
        """Crawl a source and return its chunks."""
        pass


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class CrawlError(Exception):
    """Base class for every failure raised while crawling a site."""


class DiscoveryError(CrawlError):
    """The page list could not be built. Fatal for the whole crawl."""


class FetchError(CrawlError):
    """A single page could not be downloaded."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class ParseError(CrawlError):
    """A downloaded page is missing the markup the segmenter needs."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
