"""Data models for the puzzle engine."""

import random
import uuid
from collections import Counter
from typing import List, Dict, Optional, Literal, Iterable, Mapping, Union

from pydantic import BaseModel, Field, field_validator, model_validator


# Type aliases
LevelKind = Literal["generated", "curated", "fallback", "endless", "custom"]
MoveMap = Dict[int, List[str]]


def new_tile_id(rng: Optional[random.Random] = None) -> str:
    """Mint an opaque tile id, drawn from `rng` when one is given."""
    if rng is None:
        return uuid.uuid4().hex[:9]
    return f"{rng.getrandbits(36):09x}"


def hamming_distance(a: str, b: str) -> int:
    """Count the positions at which two equal-length words differ."""
    if len(a) != len(b):
        raise ValueError(f"Cannot compare '{a}' and '{b}': lengths differ")
    return sum(1 for x, y in zip(a, b) if x != y)


def differing_letters(source: str, target: str) -> List[str]:
    """Letters of `target` at every position where it differs from `source`."""
    return [t for s, t in zip(source, target) if s != t]


class Tile(BaseModel):
    """A letter tile. The id only distinguishes otherwise identical letters."""
    id: str
    char: str = Field(..., pattern=r'^[A-Z]$')

    @field_validator("char", mode="before")
    @classmethod
    def _upper_char(cls, value):
        return value.upper() if isinstance(value, str) else value


class SolutionStep(BaseModel):
    """One transition of a solution path."""
    from_word: str = Field(..., min_length=1, pattern=r'^[A-Z]+$')
    target_word: str = Field(..., min_length=1, pattern=r'^[A-Z]+$')
    tiles_used: List[str] = Field(default_factory=list)

    @field_validator("from_word", "target_word", mode="before")
    @classmethod
    def _upper_word(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("tiles_used", mode="before")
    @classmethod
    def _upper_tiles(cls, value):
        if isinstance(value, list):
            return [c.upper() if isinstance(c, str) else c for c in value]
        return value

    @model_validator(mode="after")
    def _check_tiles(self) -> "SolutionStep":
        expected = differing_letters(self.from_word, self.target_word)
        if len(self.from_word) != len(self.target_word):
            raise ValueError(
                f"Step {self.from_word} -> {self.target_word} joins words of different lengths"
            )
        if not expected:
            raise ValueError(f"Step {self.from_word} -> {self.target_word} changes nothing")
        if self.tiles_used != expected:
            raise ValueError(
                f"Step {self.from_word} -> {self.target_word} must use {expected}, "
                f"got {self.tiles_used}"
            )
        return self

    @classmethod
    def between(cls, from_word: str, target_word: str) -> "SolutionStep":
        """Build the step from `from_word` to `target_word`, deriving the tiles."""
        from_word, target_word = from_word.upper(), target_word.upper()
        return cls(
            from_word=from_word,
            target_word=target_word,
            tiles_used=differing_letters(from_word, target_word),
        )


class LevelData(BaseModel):
    """
    A complete puzzle instance.

    Attributes:
        start_word: The word on the board when play begins
        end_word: The last word of the known solution (None for custom puzzles)
        rack_tiles: Tiles the player must place
        solution: A verified path from start_word to end_word
        kind: Where the puzzle came from
    """
    start_word: str = Field(..., min_length=1, pattern=r'^[A-Z]+$')
    end_word: Optional[str] = Field(None, pattern=r'^[A-Z]+$')
    rack_tiles: List[Tile] = Field(default_factory=list)
    solution: List[SolutionStep] = Field(default_factory=list)
    kind: LevelKind = "generated"

    @field_validator("start_word", "end_word", mode="before")
    @classmethod
    def _upper_word(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def rack_size(self) -> int:
        return len(self.rack_tiles)

    def rack_letters(self) -> List[str]:
        return [t.char for t in self.rack_tiles]

    def with_fresh_ids(self, rng: Optional[random.Random] = None) -> "LevelData":
        """Deep copy whose tiles carry newly minted ids."""
        level = self.model_copy(deep=True)
        for tile in level.rack_tiles:
            tile.id = new_tile_id(rng)
        return level

    def replay(self) -> List[str]:
        """
        Walk the solution from start_word, spending rack letters.

        Returns:
            The word path, start_word first

        Raises:
            ValueError: If a step does not continue from the previous word,
                spends a letter the rack does not hold, or the walk does not
                end on end_word with the rack exhausted
        """
        remaining = Counter(self.rack_letters())
        current = self.start_word
        path = [current]

        for i, step in enumerate(self.solution, start=1):
            if step.from_word != current:
                raise ValueError(
                    f"Step {i} starts from {step.from_word}, expected {current}"
                )
            for letter in step.tiles_used:
                if remaining[letter] <= 0:
                    raise ValueError(f"Step {i} needs '{letter}' but the rack has none left")
                remaining[letter] -= 1
            current = step.target_word
            path.append(current)

        if self.end_word is not None and current != self.end_word:
            raise ValueError(f"Solution ends on {current}, expected {self.end_word}")

        leftover = +remaining
        if leftover:
            raise ValueError(f"Solution leaves rack letters unused: {dict(leftover)}")

        return path


class ValidationError(BaseModel):
    """A single validation finding."""
    code: str
    message: str
    word: Optional[str] = None


class ValidationResult(BaseModel):
    """Result of validating caller-supplied puzzle input."""
    valid: bool
    errors: List[ValidationError] = Field(default_factory=list)
    start_word: Optional[str] = None
    rack: List[str] = Field(default_factory=list)


def make_tiles(letters: Iterable[str], rng: Optional[random.Random] = None) -> List[Tile]:
    """Wrap letters as tiles with fresh ids."""
    return [Tile(id=new_tile_id(rng), char=c.upper()) for c in letters]


def letters_of(tiles: Union[Iterable[Union[Tile, str]], Mapping[str, int]]) -> List[str]:
    """
    Uppercase letters of a mixed collection of tiles and plain characters.

    A mapping of letter to count (such as a Counter) is expanded to one
    entry per unit of supply.
    """
    if isinstance(tiles, Mapping):
        return [c.upper() for c in Counter(tiles).elements()]
    return [t.char if isinstance(t, Tile) else t.upper() for t in tiles]
