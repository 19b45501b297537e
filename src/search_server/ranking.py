"""
Query evaluation and ranking over a DocumentIndex.

This module provides the ranking pipeline behind SearchServer:
1. Scoring - TF-IDF relevance accumulated over plus terms, filtered by a predicate
2. Exclusion - documents containing any minus term are dropped
3. Ordering - relevance descending, near-equal relevance broken by rating
4. Top-k - results truncated to Config.max_result_document_count
5. Batch ranking - ThreadPoolExecutor for query parallelism

Usage:
    from search_server.ranking import find_top_documents

    results = find_top_documents(index, parse_query("cat -dog", index.stop_words), predicate)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import cmp_to_key
from typing import TYPE_CHECKING

from search_server.document import DocumentPredicate, ScoredDocument

if TYPE_CHECKING:
    from search_server.index import DocumentIndex
    from search_server.query import Query

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


class Config:
    """Ranking constants."""

    # Hard cap on the number of documents a query returns
    max_result_document_count: int = 5

    # Relevance values closer than this are treated as equal
    epsilon: float = 1e-6

    # Number of workers for parallel query processing
    num_query_workers: int = 32

    # Minimum queries before enabling parallelism
    min_queries_for_parallel: int = 10


# =============================================================================
# Scoring
# =============================================================================


def find_all_documents(
    index: DocumentIndex,
    query: Query,
    predicate: DocumentPredicate,
) -> list[ScoredDocument]:
    """
    Scores every document matching at least one plus term.

    relevance(d) = sum over plus terms t in d of tf(t, d) * ln(N / df(t))

    The predicate only gates plus-term contributions. Minus terms remove
    documents regardless of the predicate.

    Args:
        index: Index to evaluate against.
        query: Parsed query.
        predicate: Called as ``predicate(document_id, status, rating)``.

    Returns:
        Matching documents in ascending id order (unsorted by relevance).
    """
    document_to_relevance: dict[int, float] = {}
    idf = index.inverse_document_frequency(query.plus_terms)

    for term in sorted(idf):
        term_idf = idf[term]
        for document_id, term_frequency in sorted(index.postings(term).items()):
            document = index.document(document_id)
            if predicate(document_id, document.status, document.rating):
                document_to_relevance[document_id] = (
                    document_to_relevance.get(document_id, 0.0) + term_frequency * term_idf
                )

    for term in query.minus_terms:
        for document_id in index.postings(term):
            document_to_relevance.pop(document_id, None)

    return [
        ScoredDocument(
            id=document_id,
            relevance=relevance,
            rating=index.document(document_id).rating,
        )
        for document_id, relevance in sorted(document_to_relevance.items())
    ]


# =============================================================================
# Ordering and Top-K Selection
# =============================================================================


def compare_documents(lhs: ScoredDocument, rhs: ScoredDocument) -> int:
    """Negative when ``lhs`` ranks before ``rhs``."""
    if abs(lhs.relevance - rhs.relevance) < Config.epsilon:
        return rhs.rating - lhs.rating
    return -1 if lhs.relevance > rhs.relevance else 1


def sort_documents(documents: list[ScoredDocument]) -> list[ScoredDocument]:
    """Stable sort by relevance descending, then rating descending."""
    return sorted(documents, key=cmp_to_key(compare_documents))


def select_top_documents(
    documents: list[ScoredDocument],
    top_k: int | None = None,
) -> list[ScoredDocument]:
    """
    Orders documents and keeps the best ``top_k``.

    Args:
        documents: Scored documents in any order.
        top_k: Number of results to keep (None for Config.max_result_document_count).
    """
    if top_k is None:
        top_k = Config.max_result_document_count
    return sort_documents(documents)[:top_k]


# =============================================================================
# Single Query Ranking
# =============================================================================


def find_top_documents(
    index: DocumentIndex,
    query: Query,
    predicate: DocumentPredicate,
    top_k: int | None = None,
) -> list[ScoredDocument]:
    """Scores, orders and truncates the documents matching a parsed query."""
    matched_documents = find_all_documents(index, query, predicate)
    results = select_top_documents(matched_documents, top_k)
    logger.debug(
        "Query +%s -%s matched %d documents, returning %d",
        sorted(query.plus_terms),
        sorted(query.minus_terms),
        len(matched_documents),
        len(results),
    )
    return results


# =============================================================================
# Parallel Batch Ranking
# =============================================================================


def batch_find_top_documents(
    index: DocumentIndex,
    queries: list[Query],
    predicate: DocumentPredicate,
    top_k: int | None = None,
    num_workers: int | None = None,
    min_queries_for_parallel: int | None = None,
) -> list[list[ScoredDocument]]:
    """
    Ranks a batch of parsed queries against the same index.

    Queries only read the index, so they may run concurrently as long as no
    document is added meanwhile.

    Args:
        index: Index to evaluate against.
        queries: Parsed queries.
        predicate: Filter shared by every query.
        top_k: Number of results per query.
        num_workers: Number of parallel workers.
        min_queries_for_parallel: Minimum queries before enabling parallelism.

    Returns:
        One result list per query, in input order.
    """
    if not queries:
        return []
    if num_workers is None:
        num_workers = Config.num_query_workers
    if min_queries_for_parallel is None:
        min_queries_for_parallel = Config.min_queries_for_parallel

    def rank_single(query: Query) -> list[ScoredDocument]:
        return find_top_documents(index, query, predicate, top_k)

    # For small batches, run sequentially
    if len(queries) < min_queries_for_parallel:
        return [rank_single(query) for query in queries]

    logger.debug("Ranking %d queries on %d workers", len(queries), num_workers)
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        return list(executor.map(rank_single, queries))


# =============================================================================
# Module exports
# =============================================================================

__all__ = [
    "Config",
    "find_all_documents",
    "compare_documents",
    "sort_documents",
    "select_top_documents",
    "find_top_documents",
    "batch_find_top_documents",
]
