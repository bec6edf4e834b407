"""
Puzzle generation by walking the word adjacency graph.

Backward generation starts from a random end word and walks toward a start
word, collecting the letters a player will need to place. Forward generation
(endless mode) starts from the word already on the board.
"""

import logging
import random
import string
from typing import List, Optional, Tuple

from .dictionary import Dictionary
from .models import LevelData, SolutionStep, Tile, differing_letters, make_tiles, new_tile_id
from .search import neighbors

logger = logging.getLogger(__name__)

# Used when every backward attempt gets stuck
FALLBACK_START_WORD = "PLATE"
FALLBACK_END_WORD = "SLATE"
FALLBACK_FIRST_TILE = "S"


def _walk(
    dictionary: Dictionary,
    origin: str,
    target_rack_size: int,
    max_steps: int,
    rng: random.Random,
    forward: bool,
) -> Optional[Tuple[List[SolutionStep], List[str], str]]:
    """
    One generation attempt from `origin`.

    Each step moves to a shuffled neighbor whose letters still fit the rack
    budget. A neighbor that would overshoot is skipped, never truncated.

    Returns:
        (steps in walk order, rack letters, last word reached), or None if
        the walk got stuck or ran out of steps short of the target
    """
    current = origin
    visited = {origin}
    rack_letters: List[str] = []
    steps: List[SolutionStep] = []

    for _ in range(max_steps):
        if len(rack_letters) >= target_rack_size:
            break

        candidates = neighbors(dictionary, current, visited)
        rng.shuffle(candidates)

        next_word = None
        for candidate in candidates:
            # Letters the player places: the successor's letters at changed positions
            placed = (
                differing_letters(current, candidate)
                if forward
                else differing_letters(candidate, current)
            )
            if len(rack_letters) + len(placed) <= target_rack_size:
                next_word = candidate
                break

        if next_word is None:
            return None

        if forward:
            step = SolutionStep.between(current, next_word)
        else:
            step = SolutionStep.between(next_word, current)
        rack_letters.extend(step.tiles_used)
        steps.append(step)

        current = next_word
        visited.add(current)

    if len(rack_letters) != target_rack_size:
        return None
    return steps, rack_letters, current


def generate_puzzle(
    dictionary: Dictionary,
    target_rack_size: int = 5,
    max_attempts: int = 50,
    max_steps_per_attempt: int = 20,
    rng: Optional[random.Random] = None,
) -> LevelData:
    """
    Generate a solvable puzzle by walking backward from a random end word.

    Stuck attempts are retried with a new end word. If every attempt gets
    stuck a fixed fallback puzzle is returned, so this never fails.

    Args:
        dictionary: The word source
        target_rack_size: Exact number of tiles the puzzle should have
        max_attempts: Random end words to try
        max_steps_per_attempt: Longest walk per attempt
        rng: Random source; a fresh unseeded one when omitted

    Returns:
        LevelData whose solution replays from start_word to end_word using
        every rack tile, or the fallback puzzle
    """
    if target_rack_size < 1:
        raise ValueError(f"Rack size must be at least 1, got {target_rack_size}")
    if rng is None:
        rng = random.Random()

    for attempt in range(1, max_attempts + 1):
        end_word = rng.choice(dictionary.words)
        walked = _walk(
            dictionary,
            end_word,
            target_rack_size,
            max_steps_per_attempt,
            rng,
            forward=False,
        )
        if walked is None:
            logger.debug("Attempt %d from '%s' got stuck", attempt, end_word)
            continue

        reverse_steps, rack_letters, start_word = walked
        return LevelData(
            start_word=start_word,
            end_word=end_word,
            rack_tiles=make_tiles(rack_letters, rng),
            solution=list(reversed(reverse_steps)),
            kind="generated",
        )

    logger.warning(
        "No %d-tile puzzle found in %d attempts, using fallback",
        target_rack_size,
        max_attempts,
    )
    return fallback_puzzle(target_rack_size, rng)


def fallback_puzzle(target_rack_size: int, rng: Optional[random.Random] = None) -> LevelData:
    """
    Fixed PLATE -> SLATE puzzle, padded with random letters to the rack size.

    Only the first tile is needed by the solution; the padding can leave the
    puzzle unwinnable.
    """
    if rng is None:
        rng = random.Random()

    rack: List[Tile] = [Tile(id=new_tile_id(rng), char=FALLBACK_FIRST_TILE)]
    while len(rack) < target_rack_size:
        rack.append(Tile(id=new_tile_id(rng), char=rng.choice(string.ascii_uppercase)))

    return LevelData(
        start_word=FALLBACK_START_WORD,
        end_word=FALLBACK_END_WORD,
        rack_tiles=rack,
        solution=[SolutionStep.between(FALLBACK_START_WORD, FALLBACK_END_WORD)],
        kind="fallback",
    )


def generate_next_round(
    dictionary: Dictionary,
    start_word: str,
    target_rack_size: int = 5,
    max_attempts: int = 20,
    max_steps_per_attempt: int = 20,
    rng: Optional[random.Random] = None,
) -> Optional[LevelData]:
    """
    Generate an endless-mode round continuing from the board word.

    Args:
        dictionary: The word source
        start_word: Word currently on the board
        target_rack_size: Exact number of tiles the round should have
        max_attempts: Walks to try before giving up
        max_steps_per_attempt: Longest walk per attempt
        rng: Random source; a fresh unseeded one when omitted

    Returns:
        LevelData starting at start_word, or None when no round could be
        built (the streak ends)

    Raises:
        ValueError: If start_word has the wrong length or non-letters
    """
    if target_rack_size < 1:
        raise ValueError(f"Rack size must be at least 1, got {target_rack_size}")
    origin = dictionary.check_word(start_word)
    if rng is None:
        rng = random.Random()

    for attempt in range(1, max_attempts + 1):
        walked = _walk(
            dictionary,
            origin,
            target_rack_size,
            max_steps_per_attempt,
            rng,
            forward=True,
        )
        if walked is None:
            logger.debug("Endless attempt %d from '%s' got stuck", attempt, origin)
            continue

        steps, rack_letters, end_word = walked
        return LevelData(
            start_word=origin,
            end_word=end_word,
            rack_tiles=make_tiles(rack_letters, rng),
            solution=steps,
            kind="endless",
        )

    logger.info("No next round from '%s' after %d attempts", origin, max_attempts)
    return None
