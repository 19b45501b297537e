"""
Inverted index over short text documents.

Stores documents by id, keeps their insertion order and maps every term to
the term frequency of each document containing it.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import numpy as np

from search_server.document import Document, DocumentStatus, compute_average_rating
from search_server.exceptions import InvalidArgumentError, OutOfRangeError
from search_server.tokenizer import is_valid_word, split_into_words

logger = logging.getLogger(__name__)

_EMPTY_POSTINGS: Mapping[int, float] = MappingProxyType({})


def _stop_word_list(words: str | Iterable[str]) -> list[str]:
    if isinstance(words, str):
        return split_into_words(words)
    return list(words)


class DocumentIndex:
    """
    In-memory inverted index over short text documents.

    Holds the stop words, the stored documents keyed by id, the ids in
    insertion order, and the term index mapping each term to the term
    frequency of every document containing it. Documents are only ever
    added; nothing is re-indexed.

    Attributes:
        stop_words (set[str]): Terms dropped from documents and queries.
    """

    def __init__(self, stop_words: str | Iterable[str] | None = None):
        self.stop_words: set[str] = set()
        self._documents: dict[int, Document] = {}
        self._document_ids: list[int] = []
        self._term_frequencies: dict[str, dict[int, float]] = {}
        if stop_words is not None:
            self.set_stop_words(stop_words)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[int]:
        return iter(self._document_ids)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    @property
    def document_count(self) -> int:
        return len(self._documents)

    def set_stop_words(self, words: str | Iterable[str]) -> None:
        """
        Adds stop words, given as a space separated string or any iterable.

        Raises:
            InvalidArgumentError: If any word is malformed. No word is added.
        """
        words = _stop_word_list(words)
        for word in words:
            if not is_valid_word(word):
                raise InvalidArgumentError(f"Invalid stop word: {word!r}")
        if self._documents:
            warnings.warn(
                "Stop words changed after documents were added; "
                "already indexed documents keep their terms.",
                stacklevel=2,
            )
        self.stop_words.update(words)

    def is_stop_word(self, word: str) -> bool:
        return word in self.stop_words

    def split_into_words_no_stop(self, text: str) -> list[str]:
        """
        Splits document text and drops stop words.

        Raises:
            InvalidArgumentError: If any term (stop words included) is malformed.
        """
        words = []
        for word in split_into_words(text):
            if not is_valid_word(word):
                raise InvalidArgumentError(f"Invalid word in document: {word!r}")
            if not self.is_stop_word(word):
                words.append(word)
        return words

    def add_document(
        self,
        document_id: int,
        text: str,
        status: DocumentStatus = DocumentStatus.ACTUAL,
        ratings: Iterable[int] = (),
    ) -> Document:
        """
        Validates, stores and indexes a document.

        The index is only touched once every check has passed, so a failed
        call leaves it unchanged.

        Raises:
            InvalidArgumentError: If the id is negative or already used, the
                status is not a DocumentStatus, a rating is not an integer,
                the text has no terms, or a term is malformed.
        """
        if document_id < 0:
            raise InvalidArgumentError(f"Negative document id: {document_id}")
        if document_id in self._documents:
            raise InvalidArgumentError(f"Duplicate document id: {document_id}")
        if not isinstance(status, DocumentStatus):
            raise InvalidArgumentError(f"Invalid status for document {document_id}: {status!r}")
        ratings = list(ratings)
        for rating in ratings:
            if isinstance(rating, bool) or not isinstance(rating, int):
                raise InvalidArgumentError(f"Invalid rating for document {document_id}: {rating!r}")
        if not split_into_words(text):
            raise InvalidArgumentError(f"Document {document_id} has no text")
        terms = self.split_into_words_no_stop(text)

        document = Document(
            id=document_id,
            status=status,
            rating=compute_average_rating(ratings),
            terms=tuple(terms),
        )
        self._documents[document_id] = document
        self._document_ids.append(document_id)

        if terms:
            inverse_word_count = 1.0 / len(terms)
            for term in terms:
                postings = self._term_frequencies.setdefault(term, {})
                postings[document_id] = postings.get(document_id, 0.0) + inverse_word_count

        logger.debug(
            "Added document %d (%s, rating=%d, %d terms)",
            document_id,
            status.name,
            document.rating,
            len(terms),
        )
        return document

    def document_id(self, ordinal: int) -> int:
        """
        Returns the id of the document added at position ``ordinal``.

        Raises:
            OutOfRangeError: If ``ordinal`` is outside ``[0, document_count)``.
        """
        if not 0 <= ordinal < len(self._document_ids):
            raise OutOfRangeError(
                f"Document ordinal {ordinal} out of range [0, {len(self._document_ids)})"
            )
        return self._document_ids[ordinal]

    def document(self, document_id: int) -> Document:
        try:
            return self._documents[document_id]
        except KeyError:
            raise InvalidArgumentError(f"Unknown document id: {document_id}") from None

    def postings(self, term: str) -> Mapping[int, float]:
        """Document id -> term frequency for a term; empty if the term is unknown."""
        postings = self._term_frequencies.get(term)
        if postings is None:
            return _EMPTY_POSTINGS
        return MappingProxyType(postings)

    def document_frequency(self, term: str) -> int:
        """Number of documents containing the term."""
        return len(self._term_frequencies.get(term, ()))

    def inverse_document_frequency(self, terms: Iterable[str]) -> dict[str, float]:
        """
        IDF for every given term present in the index:
            idf(t) = ln(N / df(t))
        """
        known = sorted({term for term in terms if term in self._term_frequencies})
        if not known:
            return {}
        df_values = np.array([len(self._term_frequencies[term]) for term in known], dtype=np.float64)
        idf = np.log(self.document_count / df_values)
        return {term: float(idf_value) for term, idf_value in zip(known, idf)}

    def vocabulary(self) -> list[str]:
        """Indexed terms in lexicographic order."""
        return sorted(self._term_frequencies)
