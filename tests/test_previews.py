"""Tests for parsing and serializing AniList preview documents."""

from __future__ import annotations

import pytest

from anime_vault.domain.errors import MalformedInput
from anime_vault.io.previews import preview_from_raw, preview_to_raw, previews_from_raw

FULL_DOC = {
    "id": 1,
    "title": {"romaji": "Shingeki", "english": "Attack on Titan"},
    "coverImage": {"medium": "m.jpg", "large": "l.jpg"},
    "averageScore": 85,
    "startDate": {"year": 2013},
    "episodes": 25,
    "format": "TV",
}


def test_parse_full_document() -> None:
    preview = preview_from_raw(FULL_DOC)
    assert preview.id == 1
    assert preview.title == "Shingeki"
    assert preview.title_english == "Attack on Titan"
    assert preview.cover_image_medium == "m.jpg"
    assert preview.cover_image_large == "l.jpg"
    assert preview.average_score == 85
    assert preview.start_year == 2013
    assert preview.episodes == 25
    assert preview.format == "TV"


def test_round_trip_reproduces_document() -> None:
    assert preview_to_raw(preview_from_raw(FULL_DOC)) == FULL_DOC


def test_title_falls_back_to_english() -> None:
    preview = preview_from_raw({"id": 2, "title": {"romaji": None, "english": "Example"}})
    assert preview.title == "Example"
    assert preview.title_english == "Example"


def test_title_falls_back_to_unknown() -> None:
    assert preview_from_raw({"id": 3}).title == "Unknown"
    assert preview_from_raw({"id": 3, "title": None}).title == "Unknown"
    assert preview_from_raw({"id": 3, "title": {}}).title == "Unknown"


def test_empty_romaji_is_not_missing() -> None:
    preview = preview_from_raw({"id": 4, "title": {"romaji": "", "english": "Example"}})
    assert preview.title == ""


def test_lossy_round_trip_moves_fallback_into_romaji() -> None:
    preview = preview_from_raw({"id": 2, "title": {"english": "Example"}})
    assert preview.title == "Example"

    raw = preview_to_raw(preview)
    assert raw["title"] == {"romaji": "Example", "english": "Example"}


def test_missing_optional_fields_become_none() -> None:
    preview = preview_from_raw(
        {"id": 9, "coverImage": None, "startDate": {"year": None}, "format": None}
    )
    assert preview.cover_image_medium is None
    assert preview.cover_image_large is None
    assert preview.start_year is None
    assert preview.format is None
    assert preview.cover_image == ""


def test_wrongly_typed_optional_fields_are_ignored() -> None:
    preview = preview_from_raw(
        {
            "id": 10,
            "title": "not an object",
            "averageScore": "85",
            "episodes": True,
            "format": 3,
        }
    )
    assert preview.title == "Unknown"
    assert preview.average_score is None
    assert preview.episodes is None
    assert preview.format is None


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"id": None},
        {"id": "1"},
        {"id": 1.0},
        {"id": True},
    ],
)
def test_invalid_id_raises(raw: dict) -> None:
    with pytest.raises(MalformedInput) as excinfo:
        preview_from_raw(raw)
    assert excinfo.value.field == "id"


def test_non_mapping_raises() -> None:
    with pytest.raises(MalformedInput):
        preview_from_raw(["id", 1])  # type: ignore[arg-type]


def test_previews_from_raw_keeps_order() -> None:
    previews = previews_from_raw([{"id": 2}, FULL_DOC, {"id": 3}])
    assert [p.id for p in previews] == [2, 1, 3]


def test_previews_from_raw_propagates_malformed_input() -> None:
    with pytest.raises(MalformedInput):
        previews_from_raw([FULL_DOC, {"title": {"romaji": "no id"}}])
