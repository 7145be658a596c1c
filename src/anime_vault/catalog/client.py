# anime_vault/catalog/client.py

from __future__ import annotations

import logging
import random
import time
from typing import Any

import httpx

from anime_vault.config import ANILIST_URL, get_http_timeout
from anime_vault.domain.models import AnimePreview
from anime_vault.io.previews import previews_from_raw

logger = logging.getLogger(__name__)


DEFAULT_MAX_RETRIES = 3
# AniList allows ~90 requests/minute.
DEFAULT_MAX_REQUESTS_PER_SECOND = 1.5
MAX_PER_PAGE = 50
# Upper bound for a server-supplied Retry-After, in seconds.
MAX_RETRY_AFTER = 60.0
BACKOFF_BASE = 0.5
BACKOFF_CAP = 5.0

PREVIEW_QUERY = """
query ($page: Int, $perPage: Int, $search: String) {
  Page(page: $page, perPage: $perPage) {
    media(search: $search, type: ANIME) {
      id
      title { romaji english }
      coverImage { medium large }
      averageScore
      startDate { year }
      episodes
      format
    }
  }
}
"""


class CatalogError(RuntimeError):
    """The catalog API could not be reached or returned an error."""


class RateLimiter:
    """Space out AniList requests by at least ``1 / max_per_second`` seconds.

    The first call never blocks; each later call waits until the slot
    reserved by the previous one has passed.
    """

    def __init__(self, max_per_second: float = DEFAULT_MAX_REQUESTS_PER_SECOND) -> None:
        if max_per_second <= 0:
            msg = "max_per_second must be positive."
            raise ValueError(msg)

        self.interval = 1.0 / max_per_second
        self._next_slot = 0.0

    def wait(self) -> None:
        now = time.monotonic()
        delay = self._next_slot - now
        if delay > 0:
            time.sleep(delay)
        self._next_slot = max(now, self._next_slot) + self.interval


class AniListClient:
    """GraphQL client for fetching anime preview documents from AniList."""

    def __init__(
        self,
        *,
        url: str = ANILIST_URL,
        timeout: float | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: str | None = None,
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        if max_retries < 0:
            msg = "max_retries must be non-negative."
            raise ValueError(msg)

        self._url = url
        self._max_retries = max_retries
        self._rate_limiter = rate_limiter

        if http_client is not None:
            self._client = http_client
            return

        headers = {
            "User-Agent": user_agent or "anime-vault/0.1",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._client = httpx.Client(
            headers=headers,
            timeout=timeout if timeout is not None else get_http_timeout(),
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "AniListClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    def fetch_media_page(
        self,
        search: str | None = None,
        *,
        page: int = 1,
        per_page: int = 20,
    ) -> list[dict[str, Any]]:
        """Fetch one page of raw media documents.

        Raises:
            ValueError: ``page`` < 1 or ``per_page`` outside 1..50.
            CatalogError: GraphQL errors, non-retryable HTTP errors, or
                retries exhausted.
        """
        if page < 1:
            msg = "page must be >= 1."
            raise ValueError(msg)
        if not 1 <= per_page <= MAX_PER_PAGE:
            msg = f"per_page must be between 1 and {MAX_PER_PAGE}."
            raise ValueError(msg)

        variables = {"page": page, "perPage": per_page, "search": search}
        data = self._post({"query": PREVIEW_QUERY, "variables": variables})

        page_obj = data.get("Page")
        media = page_obj.get("media") if isinstance(page_obj, dict) else None
        if not isinstance(media, list):
            media = []
        logger.debug(
            "Fetched %s media (search=%r, page=%s).",
            len(media),
            search,
            page,
        )
        return list(media)

    def search_previews(
        self,
        search: str | None = None,
        *,
        page: int = 1,
        per_page: int = 20,
    ) -> list[AnimePreview]:
        """Fetch one page and map it into previews."""
        media = self.fetch_media_page(search, page=page, per_page=per_page)
        return previews_from_raw(media)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL payload, retrying 429, 5xx and network errors."""
        for attempt in range(1, self._max_retries + 2):
            if self._rate_limiter is not None:
                self._rate_limiter.wait()

            try:
                response = self._client.post(self._url, json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                retryable = status == 429 or 500 <= status < 600
                if retryable and attempt <= self._max_retries:
                    logger.warning(
                        "AniList returned %s (attempt=%s/%s). Retrying...",
                        status,
                        attempt,
                        self._max_retries,
                    )
                    _sleep_backoff(attempt, _retry_after(exc.response))
                    continue

                msg = f"AniList request failed with status {status}."
                raise CatalogError(msg) from exc
            except httpx.RequestError as exc:
                if attempt <= self._max_retries:
                    logger.warning(
                        "Request error (attempt=%s/%s): %s. Retrying...",
                        attempt,
                        self._max_retries,
                        exc,
                    )
                    _sleep_backoff(attempt)
                    continue

                msg = f"AniList request failed after {attempt} attempts: {exc}"
                raise CatalogError(msg) from exc

            return _graphql_data(response)

        msg = f"AniList request failed after {self._max_retries + 1} attempts."
        raise CatalogError(msg)


def _graphql_data(response: httpx.Response) -> dict[str, Any]:
    """Unwrap the ``data`` object of a GraphQL response body.

    Anything that is not a JSON object with an object (or null) ``data``
    member is a CatalogError, as are GraphQL ``errors``.
    """
    try:
        body = response.json()
    except ValueError as exc:
        msg = f"AniList returned a non-JSON body (status {response.status_code})."
        raise CatalogError(msg) from exc

    if not isinstance(body, dict):
        msg = f"AniList returned unexpected JSON: {type(body).__name__}."
        raise CatalogError(msg)

    errors = body.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) else errors
        message = first.get("message") if isinstance(first, dict) else None
        msg = f"AniList GraphQL error: {message or first!r}"
        raise CatalogError(msg)

    data = body.get("data")
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"AniList 'data' is not an object: {type(data).__name__}."
        raise CatalogError(msg)
    return data


def _retry_after(response: httpx.Response) -> float | None:
    """Seconds from a numeric Retry-After header, capped at MAX_RETRY_AFTER."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return min(max(seconds, 0.0), MAX_RETRY_AFTER)


def _sleep_backoff(attempt: int, retry_after: float | None = None) -> None:
    if retry_after is None:
        # Exponential from BACKOFF_BASE, capped, plus up to 25% jitter.
        delay = min(BACKOFF_CAP, BACKOFF_BASE * 2 ** (attempt - 1))
        retry_after = delay * random.uniform(1.0, 1.25)
    time.sleep(retry_after)
