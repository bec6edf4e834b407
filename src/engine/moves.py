"""
Legal move enumeration.

A move replaces some letters of the board word with rack tiles so the result
is a dictionary word. Duplicate letters on the rack are interchangeable
supply: two E tiles cover any word that needs up to two new E's.
"""

from collections import Counter
from typing import Iterable, Mapping, Union

from .dictionary import Dictionary
from .models import MoveMap, Tile, letters_of


def enumerate_moves(
    dictionary: Dictionary,
    current_word: str,
    tiles: Union[Iterable[Union[Tile, str]], Mapping[str, int]],
) -> MoveMap:
    """
    Return every word reachable from `current_word` with the given tiles.

    Args:
        dictionary: The word source
        current_word: Word on the board (any case)
        tiles: Available tiles, as Tile objects or single letters, or a
            mapping of letter to count

    Returns:
        Mapping of substitution count to sorted uppercase words. Empty when
        there is no legal move.
    """
    supply = Counter(letters_of(tiles))
    board = current_word.upper()
    moves: MoveMap = {}

    for word in dictionary.words:
        candidate = word.upper()
        if candidate == board or len(candidate) != len(board):
            continue

        remaining = supply.copy()
        tiles_used = 0
        feasible = True
        for placed, existing in zip(candidate, board):
            if placed == existing:
                continue
            if remaining[placed] <= 0:
                feasible = False
                break
            remaining[placed] -= 1
            tiles_used += 1

        if feasible and tiles_used > 0:
            moves.setdefault(tiles_used, []).append(candidate)

    for words in moves.values():
        words.sort()
    return dict(sorted(moves.items()))


def count_moves(moves: MoveMap) -> int:
    """Total number of candidate words across all groups."""
    return sum(len(words) for words in moves.values())


def has_moves(
    dictionary: Dictionary,
    current_word: str,
    tiles: Iterable[Union[Tile, str]],
) -> bool:
    """True when at least one legal move exists."""
    return count_moves(enumerate_moves(dictionary, current_word, tiles)) > 0
