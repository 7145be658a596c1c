# anime_vault/domain/models.py

"""Core domain models for anime catalog entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class AnimePreview:
    """Lightweight, immutable preview of an AniList entry for list/grid cards.

    Only the fields needed to render a card are kept. Use
    ``anime_vault.io.previews.preview_to_raw`` to get back the nested
    document shape for consumers that still expect raw JSON.

    Equality and hashing look at ``id`` only: two previews with the same id
    compare equal even when their other fields differ, so a set of previews
    keeps whichever instance it saw first.
    """

    id: int
    title: str
    title_english: str | None = None
    cover_image_medium: str | None = None
    cover_image_large: str | None = None
    average_score: int | None = None  # 0-100
    start_year: int | None = None
    episodes: int | None = None
    format: str | None = None  # TV, MOVIE, OVA, ONA, SPECIAL, MUSIC

    # -----------------------------------------------------------------------
    # Display helpers
    # -----------------------------------------------------------------------

    @property
    def cover_image(self) -> str:
        """Best available cover URL: medium, then large, else empty string."""
        if self.cover_image_medium is not None:
            return self.cover_image_medium
        if self.cover_image_large is not None:
            return self.cover_image_large
        return ""

    @property
    def display_title(self) -> str:
        return self.title

    @property
    def score_display(self) -> str:
        """Score as a string (e.g. "85"), or "N/A" if not rated.

        The value is a percentage; callers render it as ``f"{s}%"``.
        """
        return _int_or(self.average_score, "N/A")

    @property
    def year_display(self) -> str:
        return _int_or(self.start_year, "—")

    @property
    def episodes_display(self) -> str:
        return _int_or(self.episodes, "N/A")

    @property
    def format_display(self) -> str:
        return self.format if self.format is not None else "TV"

    # -----------------------------------------------------------------------
    # Object overrides
    # -----------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"AnimePreview(id={self.id}, title={self.title})"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(self.id)


def _int_or(value: int | None, fallback: str) -> str:
    return fallback if value is None else str(value)
