"""
Command-line driver for the search server.

Loads documents from a JSON Lines file, runs queries and prints the results.

For scripting: configure defaults via environment variables:
    SEARCH_SERVER_STOP_WORDS="and in on the"   # Space separated stop words
    SEARCH_SERVER_LOG_LEVEL=DEBUG              # Python logging level name

Run with:
    search-server documents.jsonl --stop-words "and in on the" \
        --query "fluffy groomed cat" --status BANNED
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

from search_server.document import DocumentPredicate, DocumentStatus, ScoredDocument
from search_server.exceptions import InvalidArgumentError
from search_server.server import SearchServer

logger = logging.getLogger(__name__)

# Default settings (can be overridden via env vars)
DEFAULT_STOP_WORDS = os.environ.get("SEARCH_SERVER_STOP_WORDS", "")
DEFAULT_LOG_LEVEL = os.environ.get("SEARCH_SERVER_LOG_LEVEL", "WARNING")


def format_document(document: ScoredDocument) -> str:
    return (
        f"{{ document_id = {document.id}, "
        f"relevance = {document.relevance:g}, "
        f"rating = {document.rating} }}"
    )


def format_match(document_id: int, words: list[str], status: DocumentStatus) -> str:
    return f"{{ document_id = {document_id}, status = {status.name}, words = {' '.join(words)} }}"


def read_documents(stream: TextIO) -> Iterator[dict]:
    """Yields one record per non-blank JSON line."""
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Line {line_number}: invalid JSON: {e}") from e
        if not isinstance(record, dict):
            raise ValueError(f"Line {line_number}: expected an object")
        yield record


def load_documents(server: SearchServer, records: Iterable[dict]) -> int:
    """
    Adds records to the server, skipping the ones it rejects.

    Returns:
        Number of documents added.
    """
    added = 0
    for record in records:
        try:
            status = DocumentStatus[record.get("status", "ACTUAL")]
            server.add_document(
                int(record["id"]),
                record["text"],
                status,
                [int(rating) for rating in record.get("ratings", [])],
            )
        except KeyError as e:
            logger.warning("Skipping document %r: missing or unknown %s", record.get("id"), e)
            continue
        except (InvalidArgumentError, TypeError, ValueError) as e:
            logger.warning("Skipping document %r: %s", record.get("id"), e)
            continue
        added += 1
    return added


def _even_ids(document_id: int, status: DocumentStatus, rating: int) -> bool:
    return document_id % 2 == 0


def run(args: argparse.Namespace, out: TextIO = sys.stdout) -> int:
    try:
        server = SearchServer(args.stop_words)
    except InvalidArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.documents == "-":
            added = load_documents(server, read_documents(sys.stdin))
        else:
            with open(args.documents, encoding="utf-8") as f:
                added = load_documents(server, read_documents(f))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logger.info("Indexed %d documents", added)

    predicate: DocumentStatus | DocumentPredicate = DocumentStatus[args.status]
    if args.even_ids:
        predicate = _even_ids

    try:
        for raw_query in args.query:
            print(f"{raw_query}:", file=out)
            for document in server.find_top_documents(raw_query, predicate):
                print(format_document(document), file=out)
            if args.match is not None:
                words, status = server.match_document(raw_query, args.match)
                print(format_match(args.match, words, status), file=out)
    except InvalidArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="search-server",
        description="Index documents and run ranked queries against them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Documents file format (one JSON object per line):
  {"id": 1, "text": "fluffy cat fluffy tail", "status": "ACTUAL", "ratings": [7, 2, 7]}

Examples:
  # Default status filter (ACTUAL)
  search-server docs.jsonl --stop-words "and in on" --query "fluffy groomed cat"

  # Explicit status, plus matching against one document
  search-server docs.jsonl --query "groomed starling" --status BANNED --match 3

  # Only documents with even ids
  search-server docs.jsonl --query "fluffy groomed cat" --even-ids
""",
    )
    parser.add_argument("documents", help="JSON Lines documents file, or '-' for stdin.")
    parser.add_argument(
        "--stop-words",
        type=str,
        default=DEFAULT_STOP_WORDS,
        help="Space separated stop words (default: $SEARCH_SERVER_STOP_WORDS).",
    )
    parser.add_argument(
        "--query",
        action="append",
        default=[],
        help="Query to run; may be repeated. Prefix a term with '-' to exclude it.",
    )
    parser.add_argument(
        "--status",
        type=str,
        choices=[status.name for status in DocumentStatus],
        default=DocumentStatus.ACTUAL.name,
        help="Only return documents with this status (default: ACTUAL).",
    )
    parser.add_argument(
        "--even-ids",
        action="store_true",
        help="Only return documents with even ids (overrides --status).",
    )
    parser.add_argument(
        "--match",
        type=int,
        default=None,
        metavar="ID",
        help="Also report which terms of each query occur in this document.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=DEFAULT_LOG_LEVEL.upper(),
        help="Logging level (default: $SEARCH_SERVER_LOG_LEVEL or WARNING).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
