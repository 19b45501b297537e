"""Document records, statuses and rating helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum


class DocumentStatus(Enum):
    ACTUAL = "ACTUAL"
    IRRELEVANT = "IRRELEVANT"
    BANNED = "BANNED"
    REMOVED = "REMOVED"


# (document_id, status, rating) -> keep?
DocumentPredicate = Callable[[int, DocumentStatus, int], bool]


@dataclass(frozen=True)
class Document:
    """
    A stored document.

    Attributes:
        id: Caller-assigned, non-negative document identifier.
        status: Lifecycle status used by status filters.
        rating: Mean of the caller's ratings, truncated toward zero.
        terms: Document terms with stop words removed, in text order.
    """

    id: int
    status: DocumentStatus
    rating: int
    terms: tuple[str, ...]


@dataclass(frozen=True)
class ScoredDocument:
    """A document returned by a query."""

    id: int
    relevance: float
    rating: int


def compute_average_rating(ratings: Iterable[int]) -> int:
    """Integer mean of ratings, truncated toward zero; 0 for no ratings."""
    ratings = list(ratings)
    if not ratings:
        return 0
    total = sum(ratings)
    quotient = abs(total) // len(ratings)
    return quotient if total >= 0 else -quotient


def status_predicate(status: DocumentStatus) -> DocumentPredicate:
    """Predicate keeping only documents with the given status."""

    def predicate(document_id: int, document_status: DocumentStatus, rating: int) -> bool:
        return document_status == status

    return predicate


__all__ = [
    "DocumentStatus",
    "DocumentPredicate",
    "Document",
    "ScoredDocument",
    "compute_average_rating",
    "status_predicate",
]
