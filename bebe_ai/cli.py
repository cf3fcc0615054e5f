import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from bebe_ai.config import CRAWL, RETRIEVAL, STORAGE
from bebe_ai.core.embedder import Embedder
from bebe_ai.core.similarity import find_k_similar
from bebe_ai.ingestion.base import DiscoveryError
from bebe_ai.ingestion.mieux_vivre import MieuxVivreFetcher
from bebe_ai.logging_setup import configure_logging
from bebe_ai.storage import read_chunks, read_embedded, write_chunks, write_embedded

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bebe-ai", description="Mieux Vivre guide crawler and retrieval prep")
    p.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO").upper(),
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="command", required=True)

    crawl = sub.add_parser("crawl", help="Crawl the guide and write chunks to JSON")
    crawl.add_argument("--output", default=STORAGE["chunks_path"])
    crawl.add_argument("--concurrency", type=int, default=CRAWL["max_concurrency"],
                       help="Max simultaneous page fetches")

    embed = sub.add_parser("embed", help="Embed crawled chunks")
    embed.add_argument("--input", default=STORAGE["chunks_path"])
    embed.add_argument("--output", default=STORAGE["embedded_path"])

    search = sub.add_parser("search", help="Print the chunks closest to a query")
    search.add_argument("query")
    search.add_argument("--input", default=STORAGE["embedded_path"])
    search.add_argument("-k", type=int, default=RETRIEVAL["top_k"])
    return p.parse_args(argv)


def run_crawl(args: argparse.Namespace) -> int:
    fetcher = MieuxVivreFetcher(max_concurrency=args.concurrency)
    try:
        chunks = asyncio.run(fetcher.crawl())
    except DiscoveryError as exc:
        logger.error("Crawl aborted, no page list: %s", exc)
        return 1
    write_chunks(args.output, chunks)
    logger.info("Fetched %d chunks, written to %s", len(chunks), args.output)
    return 0


def run_embed(args: argparse.Namespace) -> int:
    chunks = read_chunks(args.input)
    logger.info("Loaded %d chunks", len(chunks))
    embedded = Embedder().embed_chunks(chunks)
    write_embedded(args.output, embedded)
    logger.info("Wrote %d embeddings to %s", len(embedded), args.output)
    return 0


def format_sources(results) -> str:
    lines = []
    for item in results:
        meta = item.chunk.metadata
        line = f"Title: {meta.title}\nSection: {meta.section}\nSubsection: {meta.subsection}\nURL: {meta.url}\n"
        if line not in lines:
            lines.append(line)
    return "\n".join(lines)


def run_search(args: argparse.Namespace) -> int:
    embedded = read_embedded(args.input)
    logger.info("Loaded %d embeddings", len(embedded))
    query_vector = Embedder().embed_query(args.query)
    results = find_k_similar(query_vector, embedded, args.k)

    for rank, item in enumerate(results, start=1):
        heading = item.chunk.metadata.heading or "-"
        print(f"[{rank}] {heading}\n{item.chunk.text.strip()}\n")
    print("Sources:\n")
    print(format_sources(results))
    return 0


COMMANDS = {
    "crawl": run_crawl,
    "embed": run_embed,
    "search": run_search,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
