# anime_vault/domain/errors.py

"""Errors raised while mapping catalog documents into domain models."""

from __future__ import annotations


class MalformedInput(ValueError):
    """A source document is missing its identity or is not a mapping."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
