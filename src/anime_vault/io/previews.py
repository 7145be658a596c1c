# anime_vault/io/previews.py

"""Convert between AniList source documents and AnimePreview records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from anime_vault.domain.errors import MalformedInput
from anime_vault.domain.models import AnimePreview

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown"


def _nested(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Return a nested object, or an empty mapping if it is null or not an object."""
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    if value is not None:
        logger.debug("Ignoring non-object %r field: %r", key, value)
    return {}


def _opt_int(value: Any, name: str) -> int | None:
    # bool is a subclass of int, but never a valid count or score.
    if isinstance(value, bool) or not isinstance(value, int):
        if value is not None:
            logger.debug("Ignoring non-integer %s: %r", name, value)
        return None
    return value


def _opt_str(value: Any, name: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    logger.debug("Ignoring non-string %s: %r", name, value)
    return None


def _resolve_title(romaji: str | None, english: str | None) -> str:
    # Only absence falls through; an empty string is a real title.
    if romaji is not None:
        return romaji
    if english is not None:
        return english
    return UNKNOWN_TITLE


def preview_from_raw(raw: Mapping[str, Any]) -> AnimePreview:
    """Parse an AniList media document into an AnimePreview.

    Expected shape::

        {
          "id": 1,
          "title": {"romaji": "...", "english": "..."},
          "coverImage": {"medium": "...", "large": "..."},
          "startDate": {"year": 2023},
          "averageScore": 85,
          "episodes": 24,
          "format": "TV"
        }

    Everything except ``id`` is optional. Missing, null or wrongly typed
    optional values become None. The title prefers romaji, then English,
    then "Unknown".

    Raises:
        MalformedInput: ``raw`` is not a mapping, or ``id`` is missing or
            not an integer.
    """
    if not isinstance(raw, Mapping):
        msg = f"Expected a mapping, got {type(raw).__name__}."
        raise MalformedInput(msg)

    media_id = raw.get("id")
    if isinstance(media_id, bool) or not isinstance(media_id, int):
        msg = f"Field 'id' must be an integer, got {media_id!r}."
        raise MalformedInput(msg, field="id")

    title = _nested(raw, "title")
    cover = _nested(raw, "coverImage")
    start = _nested(raw, "startDate")

    romaji = _opt_str(title.get("romaji"), "title.romaji")
    english = _opt_str(title.get("english"), "title.english")

    return AnimePreview(
        id=media_id,
        title=_resolve_title(romaji, english),
        title_english=english,
        cover_image_medium=_opt_str(cover.get("medium"), "coverImage.medium"),
        cover_image_large=_opt_str(cover.get("large"), "coverImage.large"),
        average_score=_opt_int(raw.get("averageScore"), "averageScore"),
        start_year=_opt_int(start.get("year"), "startDate.year"),
        episodes=_opt_int(raw.get("episodes"), "episodes"),
        format=_opt_str(raw.get("format"), "format"),
    )


def previews_from_raw(items: Iterable[Mapping[str, Any]]) -> list[AnimePreview]:
    """Map a list response into previews, in order.

    A MalformedInput from any item propagates; nothing is skipped here.
    """
    return [preview_from_raw(item) for item in items]


def preview_to_raw(preview: AnimePreview) -> dict[str, Any]:
    """Convert a preview back into the nested AniList document shape.

    This is what detail views expect. It is not a perfect inverse of
    ``preview_from_raw``: the resolved title is always written to
    ``title.romaji``, so a document that only had an English title (or
    none) comes back with that value in the romaji slot.
    """
    return {
        "id": preview.id,
        "title": {"romaji": preview.title, "english": preview.title_english},
        "coverImage": {
            "medium": preview.cover_image_medium,
            "large": preview.cover_image_large,
        },
        "averageScore": preview.average_score,
        "startDate": {"year": preview.start_year},
        "episodes": preview.episodes,
        "format": preview.format,
    }
