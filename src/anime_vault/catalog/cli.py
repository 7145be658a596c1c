# anime_vault/catalog/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from anime_vault.catalog.client import (
    MAX_PER_PAGE,
    AniListClient,
    CatalogError,
    RateLimiter,
)
from anime_vault.config import get_store_path
from anime_vault.domain.models import AnimePreview
from anime_vault.io.previews_jsonl import (
    load_previews_from_jsonl,
    merge_previews,
    save_previews_to_jsonl,
)

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the anime-vault CLI."""
    args = _build_arg_parser().parse_args(argv)

    _configure_logging(verbose=args.verbose)

    store_path = Path(args.store) if args.store else get_store_path()

    try:
        if args.command == "search":
            _cmd_search(
                query=args.query,
                page=args.page,
                per_page=args.per_page,
                save=args.save,
                store_path=store_path,
            )
        elif args.command == "show":
            _cmd_show(store_path=store_path)
        else:
            msg = f"Unknown command: {args.command}"
            raise ValueError(msg)
    except CatalogError as exc:
        logger.error("%s", exc)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-vault",
        description="Browse AniList anime previews and keep a local JSONL copy.",
    )

    parser.add_argument(
        "--store",
        default=None,
        help="Path to the previews JSONL file (default: data/previews.jsonl).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Sub-command to run.",
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search AniList for anime.",
    )
    search_parser.add_argument("query", help="Search text.")
    search_parser.add_argument(
        "--page",
        type=_positive_int,
        default=1,
        help="Result page (default: %(default)s).",
    )
    search_parser.add_argument(
        "--per-page",
        type=_per_page,
        default=20,
        help="Results per page, at most 50 (default: %(default)s).",
    )
    search_parser.add_argument(
        "--save",
        action="store_true",
        help="Merge the results into the store.",
    )

    subparsers.add_parser(
        "show",
        help="List previews saved in the store.",
    )

    return parser


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        msg = f"invalid integer: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if number < 1:
        msg = f"must be >= 1, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _per_page(value: str) -> int:
    number = _positive_int(value)
    if number > MAX_PER_PAGE:
        msg = f"must be at most {MAX_PER_PAGE}, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_preview_line(preview: AnimePreview) -> str:
    """One display line for a preview card."""
    return (
        f"{preview.display_title} | {preview.format_display} | "
        f"{preview.year_display} | {preview.score_display}% | "
        f"{preview.episodes_display} eps"
    )


def _print_previews(previews: Iterable[AnimePreview]) -> None:
    for preview in previews:
        print(format_preview_line(preview))


def _cmd_search(
    *,
    query: str,
    page: int,
    per_page: int,
    save: bool,
    store_path: Path,
) -> None:
    with AniListClient(rate_limiter=RateLimiter()) as client:
        previews = client.search_previews(query, page=page, per_page=per_page)

    logger.info("Found %s previews for %r (page %s).", len(previews), query, page)
    _print_previews(previews)

    if save:
        existing = load_previews_from_jsonl(store_path)
        merged = merge_previews(existing, previews)
        save_previews_to_jsonl(merged, store_path)
        logger.info(
            "Saved %s new previews to %s (%s total).",
            len(merged) - len(existing),
            store_path,
            len(merged),
        )


def _cmd_show(*, store_path: Path) -> None:
    previews = load_previews_from_jsonl(store_path)
    if not previews:
        logger.info("No previews stored in %s.", store_path)
        return
    _print_previews(previews)


if __name__ == "__main__":
    # python -m anime_vault.catalog.cli -v search "frieren" --save
    main()
