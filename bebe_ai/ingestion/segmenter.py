"""
Content segmentation
====================
Turns the direct children of a guide page's content container into chunks.

The guide marks sections inside a page with h2/h3/h4 headings. Most of the
content is made of <p> tags; call-out boxes are <div>/<article> wrappers and
are kept as standalone passages. Lists always follow the paragraph that
introduces them, so a <ul>/<ol> is glued onto the previous chunk instead of
standing on its own.
"""

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, NamedTuple, Optional, Tuple

from bs4 import Tag

from bebe_ai.ingestion.base import Chunk
from bebe_ai.ingestion.models import MieuxVivreMetadata, PageMetadata

logger = logging.getLogger(__name__)


class NodeKind(enum.Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BLOCK = "block"
    LIST = "list"
    OTHER = "other"


_KIND_BY_TAG = {
    "h2": NodeKind.HEADING,
    "h3": NodeKind.HEADING,
    "h4": NodeKind.HEADING,
    "p": NodeKind.PARAGRAPH,
    "div": NodeKind.BLOCK,
    "article": NodeKind.BLOCK,
    "ul": NodeKind.LIST,
    "ol": NodeKind.LIST,
}


@dataclass(frozen=True)
class ContentNode:
    kind: NodeKind
    tag: str
    text: str
    element: Optional[Tag] = field(default=None, repr=False, compare=False)

    @property
    def children(self) -> Tuple["ContentNode", ...]:
        """Direct child elements, built on access."""
        if self.element is None:
            return ()
        return tuple(node_from_element(child) for child in self.element.find_all(recursive=False))


def node_from_element(element: Tag) -> ContentNode:
    return ContentNode(
        kind=_KIND_BY_TAG.get(element.name, NodeKind.OTHER),
        tag=element.name,
        text=element.get_text(),
        element=element,
    )


def nodes_from_container(container: Tag) -> List[ContentNode]:
    return [node_from_element(child) for child in container.find_all(recursive=False)]


class SegmentationState(NamedTuple):
    current_heading: Optional[str] = None
    chunks: Tuple[Chunk[MieuxVivreMetadata], ...] = ()


def _emit(state: SegmentationState, node: ContentNode, meta: PageMetadata) -> Tuple[Chunk[MieuxVivreMetadata], ...]:
    chunk = Chunk(text=node.text, metadata=meta.with_heading(state.current_heading))
    return state.chunks + (chunk,)


def step(state: SegmentationState, node: ContentNode, meta: PageMetadata) -> SegmentationState:
    """Advance the segmentation by one content node."""
    if node.kind is NodeKind.HEADING:
        return state._replace(current_heading=node.text)

    if node.kind is NodeKind.PARAGRAPH:
        return state._replace(chunks=_emit(state, node, meta))

    if node.kind is NodeKind.BLOCK:
        state = state._replace(current_heading=None)
        return state._replace(chunks=_emit(state, node, meta))

    if node.kind is NodeKind.LIST:
        if not state.chunks:
            return state._replace(chunks=_emit(state, node, meta))
        last = state.chunks[-1]
        merged = replace(last, text=f"{last.text}\n{node.text}")
        return state._replace(chunks=state.chunks[:-1] + (merged,))

    logger.warning("Unknown element: %s (%s)", node.tag, meta.url)
    return state


def segment(children: Iterable[ContentNode], meta: PageMetadata) -> List[Chunk[MieuxVivreMetadata]]:
    state = SegmentationState()
    for node in children:
        state = step(state, node, meta)
    return list(state.chunks)
