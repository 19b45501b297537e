"""
Query parsing.

A raw query is a whitespace separated list of terms. A leading ``-`` marks a
minus term: documents containing it are excluded from the results. Stop
words are dropped whether or not they carry a minus.
"""

from __future__ import annotations

from collections.abc import Container
from dataclasses import dataclass

from search_server.exceptions import InvalidArgumentError
from search_server.tokenizer import is_valid_word, split_into_words


@dataclass(frozen=True)
class QueryWord:
    data: str
    is_minus: bool
    is_stop: bool


@dataclass(frozen=True)
class Query:
    """
    A parsed query.

    A term given both bare and with a minus in the same query ends up in
    both sets; the minus side wins during ranking.
    """

    plus_terms: frozenset[str] = frozenset()
    minus_terms: frozenset[str] = frozenset()


def parse_query_word(text: str, stop_words: Container[str]) -> QueryWord:
    """
    Classifies a single query token.

    Raises:
        InvalidArgumentError: If nothing is left after the minus, or the term
            is malformed.
    """
    is_minus = False
    if text.startswith("-"):
        is_minus = True
        text = text[1:]
    if not text:
        raise InvalidArgumentError("Query has a minus with no term after it")
    if not is_valid_word(text):
        raise InvalidArgumentError(f"Invalid query word: {text!r}")
    return QueryWord(data=text, is_minus=is_minus, is_stop=text in stop_words)


def parse_query(text: str, stop_words: Container[str]) -> Query:
    """
    Splits a raw query into plus and minus terms.

    Raises:
        InvalidArgumentError: If any token is malformed.
    """
    plus_terms: set[str] = set()
    minus_terms: set[str] = set()
    for word in split_into_words(text):
        query_word = parse_query_word(word, stop_words)
        if query_word.is_stop:
            continue
        if query_word.is_minus:
            minus_terms.add(query_word.data)
        else:
            plus_terms.add(query_word.data)
    return Query(plus_terms=frozenset(plus_terms), minus_terms=frozenset(minus_terms))


__all__ = ["QueryWord", "Query", "parse_query_word", "parse_query"]
