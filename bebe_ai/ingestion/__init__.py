from bebe_ai.ingestion.base import (
    BaseFetcher,
    Chunk,
    CrawlError,
    DiscoveryError,
    FetchError,
    ParseError,
)
from bebe_ai.ingestion.models import MieuxVivreMetadata, PageDescriptor, PageMetadata
from bebe_ai.ingestion.segmenter import ContentNode, NodeKind, segment
from bebe_ai.ingestion.sitemap import SiteMapDiscoverer
from bebe_ai.ingestion.mieux_vivre import MieuxVivreFetcher, fetch_page

__all__ = [
    "BaseFetcher",
    "Chunk",
    "CrawlError",
    "DiscoveryError",
    "FetchError",
    "ParseError",
    "MieuxVivreMetadata",
    "PageDescriptor",
    "PageMetadata",
    "ContentNode",
    "NodeKind",
    "segment",
    "SiteMapDiscoverer",
    "MieuxVivreFetcher",
    "fetch_page",
]
