# anime_vault/io/previews_jsonl.py

"""JSONL persistence for previews, stored as raw AniList documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from anime_vault.domain.errors import MalformedInput
from anime_vault.domain.models import AnimePreview
from anime_vault.io.previews import preview_from_raw, preview_to_raw

logger = logging.getLogger(__name__)


def _decode_document(line: str, line_number: int, source: Path) -> dict[str, Any] | None:
    """Decode one stored line; blank, invalid or non-object lines give None."""
    text = line.strip()
    if not text:
        return None
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Skipping invalid JSON line %d in %s: %s", line_number, source, exc)
        return None
    if not isinstance(obj, dict):
        logger.debug("Skipping non-object line %d in %s.", line_number, source)
        return None
    return obj


def iter_preview_documents(path: str | Path) -> Iterator[dict[str, Any]]:
    """Yield the raw documents stored in ``path``; a missing file yields nothing."""
    source = Path(path)
    if not source.is_file():
        return

    with source.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            doc = _decode_document(line, line_number, source)
            if doc is not None:
                yield doc


def merge_previews(
    existing: Iterable[AnimePreview],
    incoming: Iterable[AnimePreview],
) -> list[AnimePreview]:
    """Ordered union by id. The first instance seen for an id wins."""
    merged: dict[AnimePreview, None] = {}
    for preview in [*existing, *incoming]:
        merged.setdefault(preview, None)
    return list(merged)


def load_previews_from_jsonl(path: str | Path) -> list[AnimePreview]:
    """Load stored documents as previews, deduplicated by id.

    Documents without a valid id are logged and skipped.
    """
    previews: list[AnimePreview] = []
    for raw in iter_preview_documents(path):
        try:
            previews.append(preview_from_raw(raw))
        except MalformedInput as exc:
            logger.warning("Skipping malformed document in %s: %s", path, exc)
    return merge_previews(previews, [])


def save_previews_to_jsonl(previews: Iterable[AnimePreview], path: str | Path) -> None:
    """Write previews to a JSONL file as raw documents, one per line."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        for preview in previews:
            line = json.dumps(preview_to_raw(preview), ensure_ascii=False)
            f.write(line + "\n")
