"""CLI entrypoint for contact-extractor."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from .config import (
    DEFAULT_INDEX_PATH,
    DEFAULT_LIMIT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_OUTPUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_WORKERS,
    ExtractorConfig,
)
from .errors import ConfigError
from .logging_utils import configure_logging, get_logger
from .pipeline import run_pipeline
from .validation import load_lines_from_file, normalize_keywords


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Contact Extractor - find (name, email) pairs on web pages by keyword or URL list."
    )
    source_group = parser.add_mutually_exclusive_group(required=False)
    source_group.add_argument("--keywords", nargs="+", help="Keywords to look up in the index.")
    source_group.add_argument(
        "--keywords-file", help="Path to keyword file (one keyword per line)."
    )
    parser.add_argument(
        "--urls-file", help="Path to URL file (one URL per line, skips the index)."
    )
    parser.add_argument(
        "--index",
        default=DEFAULT_INDEX_PATH,
        help="Keyword index file (.json or .csv).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Maximum URLs per keyword (1-50).",
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS, help="Number of concurrent fetches."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_REQUEST_TIMEOUT,
        help="Per-page fetch timeout in seconds.",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=DEFAULT_MAX_REDIRECTS,
        help="Maximum redirects followed per page.",
    )
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="Output CSV path.")
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.keywords or args.keywords_file or args.urls_file):
        parser.error("Provide --keywords, --keywords-file, or --urls-file.")
    return args


def _materialize_keywords(args: argparse.Namespace) -> tuple[str, ...]:
    if args.keywords:
        return normalize_keywords(args.keywords)
    if args.keywords_file:
        return normalize_keywords(load_lines_from_file(args.keywords_file))
    return tuple()


def _materialize_seeds(args: argparse.Namespace) -> tuple[str, ...]:
    if args.urls_file:
        return tuple(load_lines_from_file(args.urls_file))
    return tuple()


def namespace_to_config(args: argparse.Namespace) -> ExtractorConfig:
    """Convert CLI args to validated ExtractorConfig."""
    try:
        keywords = _materialize_keywords(args)
        seeds = _materialize_seeds(args)
    except OSError as exc:
        raise ConfigError(f"Cannot read input file: {exc}") from exc

    if keywords and seeds:
        get_logger().info("--urls-file given; keywords are ignored.")

    return ExtractorConfig(
        keywords=keywords,
        seeds=seeds,
        output=args.output,
        index_path=args.index,
        limit=args.limit,
        workers=args.workers,
        request_timeout=args.timeout,
        max_redirects=args.max_redirects,
        show_progress=not args.no_progress,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
        output = run_pipeline(config, logger=logger)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info("Wrote results to %s", output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
