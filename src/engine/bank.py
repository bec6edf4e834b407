"""
Puzzle bank: a per-rack-size list of puzzles, filled once on first use.

Curated puzzles are placed first, then generated puzzles fill the bank to
capacity. Callers always receive copies with fresh tile ids, so replaying an
index never shares tile objects with an earlier play.
"""

import logging
import random
import threading
from collections import Counter
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .dictionary import Dictionary
from .generator import generate_puzzle
from .models import LevelData, SolutionStep, make_tiles
from .search import MAX_SUBSTITUTIONS, MIN_SUBSTITUTIONS

logger = logging.getLogger(__name__)

BANK_SIZE = 30


class CuratedPuzzle(BaseModel):
    """A hand-authored puzzle: start word, rack and the forward word path."""
    start: str
    rack: List[str]
    path: List[str]
    end_word: Optional[str] = None

    def to_level(self, dictionary: Dictionary) -> LevelData:
        """
        Convert to LevelData, checking the path against the dictionary.

        Raises:
            ValueError: If a word is unknown, a hop changes too few or too many
                letters, or the path does not spend exactly the rack
        """
        if not self.path:
            raise ValueError(f"Curated puzzle '{self.start}' has an empty path")

        words = [self.start.upper()] + [w.upper() for w in self.path]
        for word in words:
            if not dictionary.is_valid(word):
                raise ValueError(f"Curated word '{word}' is not in the dictionary")

        end_word = (self.end_word or self.path[-1]).upper()
        if end_word != words[-1]:
            raise ValueError(f"Curated path ends on {words[-1]}, not {end_word}")

        solution: List[SolutionStep] = []
        for current, target in zip(words, words[1:]):
            step = SolutionStep.between(current, target)
            if not MIN_SUBSTITUTIONS <= len(step.tiles_used) <= MAX_SUBSTITUTIONS:
                raise ValueError(
                    f"Curated hop {current} -> {target} changes {len(step.tiles_used)} letters"
                )
            solution.append(step)

        rack = [c.upper() for c in self.rack]
        spent = Counter(c for step in solution for c in step.tiles_used)
        if spent != Counter(rack):
            raise ValueError(
                f"Curated path for '{self.start}' spends {dict(spent)}, rack is {rack}"
            )

        return LevelData(
            start_word=words[0],
            end_word=end_word,
            rack_tiles=make_tiles(rack),
            solution=solution,
            kind="curated",
        )


CURATED_PUZZLES: List[CuratedPuzzle] = [
    CuratedPuzzle(
        start="about",
        rack=["e", "n", "s", "h", "r"],
        path=["abort", "snort", "short", "shore"],
        end_word="shore",
    ),
    CuratedPuzzle(
        start="dance",
        rack=["s", "r", "l", "u", "g"],
        path=["lance", "lunge", "lungs", "rungs"],
        end_word="rungs",
    ),
]


class PuzzleBank(BaseModel):
    """
    Lazily built, per-rack-size puzzle cache.

    Attributes:
        dictionary: Word source for generation and curated checks
        capacity: Puzzles per rack size
        curated: Hand-authored seeds; each goes into the bank of its rack size
        max_attempts: Passed to the generator
        max_steps_per_attempt: Passed to the generator
        seed: Optional random seed for reproducible banks
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dictionary: Dictionary
    capacity: int = Field(default=BANK_SIZE, ge=1)
    curated: List[CuratedPuzzle] = Field(default_factory=lambda: list(CURATED_PUZZLES))
    max_attempts: int = Field(default=50, ge=1)
    max_steps_per_attempt: int = Field(default=20, ge=1)
    seed: Optional[int] = None
    _rng: random.Random = PrivateAttr(default_factory=random.Random)
    _banks: Dict[int, List[LevelData]] = PrivateAttr(default_factory=dict)
    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def model_post_init(self, __context) -> None:
        """Initialize the random generator after model creation."""
        self._rng = random.Random(self.seed)

    def _fill(self, rack_size: int) -> List[LevelData]:
        bank: List[LevelData] = []

        for seed in self.curated:
            if len(seed.rack) != rack_size or len(bank) >= self.capacity:
                continue
            try:
                bank.append(seed.to_level(self.dictionary))
            except ValueError as e:
                logger.warning("Skipping curated puzzle '%s': %s", seed.start, e)

        while len(bank) < self.capacity:
            bank.append(generate_puzzle(
                self.dictionary,
                target_rack_size=rack_size,
                max_attempts=self.max_attempts,
                max_steps_per_attempt=self.max_steps_per_attempt,
                rng=self._rng,
            ))

        logger.info("Filled %d-tile bank with %d puzzles", rack_size, len(bank))
        return bank

    def get_bank(self, rack_size: int) -> List[LevelData]:
        """
        Get the bank for a rack size, building it on first access.

        Returns:
            The cached puzzles in index order (a new list; entries are shared)
        """
        if rack_size < 1:
            raise ValueError(f"Rack size must be at least 1, got {rack_size}")

        with self._lock:
            if rack_size not in self._banks:
                self._banks[rack_size] = self._fill(rack_size)
            return list(self._banks[rack_size])

    def get_by_index(self, index: int, rack_size: int) -> Optional[LevelData]:
        """
        Get a copy of one bank entry with fresh tile ids.

        Returns:
            The puzzle, or None if index is out of range
        """
        bank = self.get_bank(rack_size)
        if 0 <= index < len(bank):
            return bank[index].with_fresh_ids()
        return None

    def random_index(self, rack_size: int, rng: Optional[random.Random] = None) -> int:
        """Pick a random index into the bank for a rack size."""
        bank = self.get_bank(rack_size)
        return (rng or self._rng).randrange(len(bank))

    def rack_sizes(self) -> List[int]:
        """Rack sizes whose banks have been built."""
        with self._lock:
            return sorted(self._banks)
