"""Command-line access to the content search engine.

Loads a JSON corpus (a list of records, or an object with an ``items``
list), builds an index, and runs one query against it. Output is JSON on
stdout; logs go to stderr.

Examples:
  content-search corpus.json search "event loop" --category core --limit 5
  content-search corpus.json suggest ev
  content-search corpus.json related topic-event-loop
  content-search corpus.json stats
"""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
import sys
from typing import Any

import orjson

from content_search.config import get_settings
from content_search.domain.errors import ContentSearchError
from content_search.domain.model import SearchResult
from content_search.observability.logging import configure_logging
from content_search.search.index import build_index
from content_search.search.snippet import highlight_terms
from content_search.service_layer.search_service import ContentSearch


EXIT_OK = 0
EXIT_QUERY_ERROR = 1
EXIT_CORPUS_ERROR = 2


class CorpusLoadError(RuntimeError):
    """Raised when the corpus file cannot be read or decoded."""


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-search",
        description="Query a JSON content corpus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1].rstrip() if __doc__ else None,
    )
    parser.add_argument("corpus", type=Path, help="Path to a JSON corpus file")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Full-text search with optional facet filters")
    search.add_argument("query", nargs="?", default="", help="Query text (may be empty when filters are given)")
    search.add_argument("--type", dest="types", action="append", default=[], help="Allowed content type")
    search.add_argument("--category", dest="categories", action="append", default=[], help="Allowed category")
    search.add_argument("--difficulty", dest="difficulties", action="append", default=[], help="Allowed difficulty")
    search.add_argument("--tag", dest="tags", action="append", default=[], help="Allowed tag")
    search.add_argument("--limit", type=int, default=None, help="Maximum results")
    search.add_argument(
        "--highlight",
        choices=("plain", "html"),
        default=None,
        help="Highlight query terms in titles and excerpts",
    )

    suggest = subparsers.add_parser("suggest", help="Autocomplete suggestions for a prefix")
    suggest.add_argument("prefix")
    suggest.add_argument("--limit", type=int, default=None)

    related = subparsers.add_parser("related", help="Items related to an item id")
    related.add_argument("item_id")
    related.add_argument("--limit", type=int, default=None)

    subparsers.add_parser("stats", help="Facet counts for the corpus")
    return parser


def load_corpus(path: Path) -> list[Any]:
    try:
        payload = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        raise CorpusLoadError(f"Cannot read corpus {path}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise CorpusLoadError(f"Corpus {path} must be a list of records or an object with an 'items' list")
    return payload


def _render_result(result: SearchResult, query: str, style: str | None) -> dict[str, Any]:
    data = result.model_dump(mode="json")
    data["matched_fields"] = sorted(data["matched_fields"])
    data["item"]["tags"] = sorted(data["item"]["tags"])
    if style and query:
        terms = query.split()
        data["item"]["title"] = highlight_terms(result.item.title, terms, style=style)
        if result.item.excerpt:
            data["item"]["excerpt"] = highlight_terms(result.item.excerpt, terms, style=style)
    return data


def run(args: argparse.Namespace, engine: ContentSearch) -> Any:
    if args.command == "search":
        filters = {
            "types": args.types,
            "categories": args.categories,
            "difficulties": args.difficulties,
            "tags": args.tags,
        }
        results = engine.search(args.query, filters, args.limit)
        return [_render_result(result, args.query, args.highlight) for result in results]
    if args.command == "suggest":
        return [suggestion.model_dump(mode="json") for suggestion in engine.suggest(args.prefix, args.limit)]
    if args.command == "related":
        return [_render_result(result, "", None) for result in engine.related_to(args.item_id, args.limit)]
    return engine.stats().model_dump(mode="json")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level, settings.log_json)

    try:
        corpus = load_corpus(args.corpus)
    except CorpusLoadError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CORPUS_ERROR

    engine = ContentSearch(build_index(corpus), settings)
    try:
        output = run(args, engine)
    except ContentSearchError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_QUERY_ERROR

    print(orjson.dumps(output, option=orjson.OPT_INDENT_2).decode("utf-8"))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
