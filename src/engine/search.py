"""Adjacency search over the dictionary."""

from typing import AbstractSet, List

from .dictionary import Dictionary
from .models import hamming_distance

# A move substitutes between one and three letters
MIN_SUBSTITUTIONS = 1
MAX_SUBSTITUTIONS = 3


def neighbors(
    dictionary: Dictionary,
    word: str,
    excluded: AbstractSet[str] = frozenset(),
) -> List[str]:
    """
    Find every dictionary word one to three substitutions away from `word`.

    Only same-position substitutions count; there are no insertions or
    deletions. The whole dictionary is scanned on each call.

    Args:
        dictionary: The word source
        word: Word to search around (any case)
        excluded: Words to skip (any case), typically already visited

    Returns:
        Lowercase neighbor words in dictionary order
    """
    word = word.lower()
    excluded = {w.lower() for w in excluded}
    if len(word) != dictionary.word_length:
        raise ValueError(
            f"'{word}' has {len(word)} letters, dictionary words have {dictionary.word_length}"
        )

    result: List[str] = []
    for candidate in dictionary.words:
        if candidate in excluded:
            continue
        distance = hamming_distance(word, candidate)
        if MIN_SUBSTITUTIONS <= distance <= MAX_SUBSTITUTIONS:
            result.append(candidate)
    return result
