import json
import os
from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from bebe_ai.core.embedder import EmbeddedChunk
from bebe_ai.ingestion.base import Chunk
from bebe_ai.ingestion.models import MieuxVivreMetadata


def _ensure_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _write_json(path: str, data: Any):
    _ensure_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def _read_json_list(path: str) -> List[Dict]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list, got {type(data).__name__}")
    return data


def _chunk_from_dict(record: Dict) -> Chunk[MieuxVivreMetadata]:
    try:
        return Chunk(text=record["text"], metadata=MieuxVivreMetadata(**record["metadata"]))
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed chunk record: {exc}") from exc


def write_chunks(path: str, chunks: Sequence[Chunk[MieuxVivreMetadata]]):
    _write_json(path, [asdict(chunk) for chunk in chunks])


def read_chunks(path: str) -> List[Chunk[MieuxVivreMetadata]]:
    return [_chunk_from_dict(record) for record in _read_json_list(path)]


def write_embedded(path: str, embedded: Sequence[EmbeddedChunk[MieuxVivreMetadata]]):
    _write_json(path, [asdict(item) for item in embedded])


def read_embedded(path: str) -> List[EmbeddedChunk[MieuxVivreMetadata]]:
    items = []
    for record in _read_json_list(path):
        if not isinstance(record, dict) or not isinstance(record.get("embedding"), list):
            raise ValueError("Malformed embedded chunk record: missing embedding")
        items.append(EmbeddedChunk(
            embedding=[float(v) for v in record["embedding"]],
            chunk=_chunk_from_dict(record.get("chunk") or {}),
        ))
    return items
