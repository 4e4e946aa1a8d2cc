"""Query tokenization and keyword counting."""

from __future__ import annotations

import re
from typing import List

SEPARATORS = " \t\n\r.,;:!?()[]{}\"'-_"
MIN_WORD_LENGTH = 4

_SPLIT_PATTERN = re.compile("[" + re.escape(SEPARATORS) + "]+")


def extract_search_words(query: str) -> List[str]:
    """Return the distinct lower-cased query words longer than three characters.

    Words keep the order of their first occurrence in the query.
    """
    words: List[str] = []
    seen: set[str] = set()
    for token in _SPLIT_PATTERN.split(query):
        if len(token) < MIN_WORD_LENGTH:
            continue
        word = token.lower()
        if word not in seen:
            seen.add(word)
            words.append(word)
    return words


def count_occurrences(content: str, word: str, *, folded: bool = False) -> int:
    """Count case-insensitive substring hits of ``word`` in ``content``.

    The cursor jumps past each hit, so overlapping matches are counted once.
    Pass ``folded=True`` when both arguments are already lower-cased to skip
    copying ``content`` again.
    """
    if not word:
        return 0
    # str.lower() is full Unicode lowering: "\u0130" becomes two code points and
    # "\u017f" (long s) does not fold to "s", unlike an ordinal invariant fold.
    haystack = content if folded else content.lower()
    needle = word if folded else word.lower()
    count = 0
    index = haystack.find(needle)
    while index != -1:
        count += 1
        index = haystack.find(needle, index + len(needle))
    return count
