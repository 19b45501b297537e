"""SearchServer: the public entry point for indexing and querying documents."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from search_server.document import (
    DocumentPredicate,
    DocumentStatus,
    ScoredDocument,
    status_predicate,
)
from search_server.index import DocumentIndex
from search_server.query import Query, parse_query
from search_server.ranking import batch_find_top_documents, find_top_documents


def _as_predicate(status_or_predicate: DocumentStatus | DocumentPredicate) -> DocumentPredicate:
    if isinstance(status_or_predicate, DocumentStatus):
        return status_predicate(status_or_predicate)
    return status_or_predicate


class SearchServer:
    """
    Search server over short documents with TF-IDF ranking.

    Args:
        stop_words: Optional stop words, as a space separated string or an
            iterable of words.

    Example:
        server = SearchServer("in the")
        server.add_document(1, "cat in the city", DocumentStatus.ACTUAL, [1, 2, 3])
        server.find_top_documents("cat")
        # [ScoredDocument(id=1, relevance=0.0, rating=2)]
    """

    def __init__(self, stop_words: str | Iterable[str] | None = None):
        self.index = DocumentIndex(stop_words)

    def __len__(self) -> int:
        return len(self.index)

    def __iter__(self) -> Iterator[int]:
        return iter(self.index)

    def set_stop_words(self, words: str | Iterable[str]) -> None:
        self.index.set_stop_words(words)

    def add_document(
        self,
        document_id: int,
        document: str,
        status: DocumentStatus = DocumentStatus.ACTUAL,
        ratings: Iterable[int] = (),
    ) -> None:
        self.index.add_document(document_id, document, status, ratings)

    def parse_query(self, raw_query: str) -> Query:
        return parse_query(raw_query, self.index.stop_words)

    def find_top_documents(
        self,
        raw_query: str,
        status_or_predicate: DocumentStatus | DocumentPredicate = DocumentStatus.ACTUAL,
    ) -> list[ScoredDocument]:
        """
        Returns up to five best matching documents.

        Args:
            raw_query: Space separated terms; a leading ``-`` excludes a term.
            status_or_predicate: Either a status to keep, or a callable
                ``predicate(document_id, status, rating) -> bool``.

        Raises:
            InvalidArgumentError: If the query is malformed.
        """
        query = self.parse_query(raw_query)
        return find_top_documents(self.index, query, _as_predicate(status_or_predicate))

    def find_top_documents_batch(
        self,
        raw_queries: Iterable[str],
        status_or_predicate: DocumentStatus | DocumentPredicate = DocumentStatus.ACTUAL,
    ) -> list[list[ScoredDocument]]:
        """Runs find_top_documents for many queries, in parallel for large batches."""
        queries = [self.parse_query(raw_query) for raw_query in raw_queries]
        return batch_find_top_documents(self.index, queries, _as_predicate(status_or_predicate))

    def get_document_count(self) -> int:
        return self.index.document_count

    def get_document_id(self, ordinal: int) -> int:
        return self.index.document_id(ordinal)

    def match_document(self, raw_query: str, document_id: int) -> tuple[list[str], DocumentStatus]:
        """
        Lists the plus terms of a query found in a document.

        The list is empty when any minus term of the query occurs in the
        document. Terms come back in lexicographic order.

        Raises:
            InvalidArgumentError: If the query is malformed or the document
                id is unknown.
        """
        query = self.parse_query(raw_query)
        document = self.index.document(document_id)

        for term in query.minus_terms:
            if document_id in self.index.postings(term):
                return [], document.status

        matched_words = [
            term for term in sorted(query.plus_terms) if document_id in self.index.postings(term)
        ]
        return matched_words, document.status


__all__ = ["SearchServer"]
