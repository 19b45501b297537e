"""
Whitespace tokenizer and term validation.

Terms are maximal runs of non-delimiter characters. No case folding,
stemming or punctuation stripping is applied: the term is exactly what
the caller wrote.
"""

from __future__ import annotations

WORD_DELIMITERS = " \t\n\r\v"


def split_into_words(text: str, delimiters: str = WORD_DELIMITERS) -> list[str]:
    """Splits text into terms, never emitting empty ones."""
    words: list[str] = []
    length = len(text)
    position = 0
    while position < length:
        # Find the first non-delimiter, then the delimiter that ends the term.
        while position < length and text[position] in delimiters:
            position += 1
        if position == length:
            break
        end = position
        while end < length and text[end] not in delimiters:
            end += 1
        words.append(text[position:end])
        position = end
    return words


def is_valid_word(word: str) -> bool:
    """
    Checks that a term is well formed.

    A term is invalid when empty, when it contains an ASCII control
    character, when its first ASCII character is not a letter, or when a
    later ASCII character is not printable. Non-ASCII characters are always
    accepted so that text in other scripts can be indexed.
    """
    if not word:
        return False
    for position, char in enumerate(word):
        if ord(char) >= 128:
            continue
        if not char.isprintable():
            return False
        if position == 0 and not char.isalpha():
            return False
    return True


__all__ = ["WORD_DELIMITERS", "split_into_words", "is_valid_word"]
