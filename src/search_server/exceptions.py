"""Errors raised by the search server."""


class InvalidArgumentError(ValueError):
    """A stop word, document, document id or query failed validation."""


class OutOfRangeError(IndexError):
    """An ordinal lookup fell outside ``[0, document_count)``."""
