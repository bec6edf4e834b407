"""
Validation for player-authored puzzles.

Checks:
1. Start word length and characters
2. Start word is in the dictionary
3. Rack is non-empty and holds single letters only
"""

import random
import re
from typing import List, Optional, Sequence, Union

from .dictionary import Dictionary
from .models import LevelData, ValidationError, ValidationResult, make_tiles


class PuzzleInputError(ValueError):
    """Raised when a custom puzzle fails validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(e.message for e in result.errors)
        super().__init__(f"Invalid custom puzzle: {messages}")


def _clean_rack(rack: Union[str, Sequence[str]], errors: List[ValidationError]) -> List[str]:
    """Normalize a rack. Strings drop non-letters; lists must hold single letters."""
    if isinstance(rack, str):
        return [c for c in rack.strip().upper() if re.match(r'[A-Z]', c)]

    letters: List[str] = []
    for entry in rack:
        if isinstance(entry, str) and len(entry) == 1 and re.match(r'^[A-Za-z]$', entry):
            letters.append(entry.upper())
        else:
            errors.append(ValidationError(
                code="INVALID_RACK_LETTER",
                message=f"Rack entry {entry!r} is not a single letter",
            ))
    return letters


def validate_custom_puzzle(
    dictionary: Dictionary,
    start_word: str,
    rack: Union[str, Sequence[str]],
) -> ValidationResult:
    """Validate a start word and rack supplied by a player."""
    errors: List[ValidationError] = []
    word = start_word.strip().upper()

    if len(word) != dictionary.word_length:
        errors.append(ValidationError(
            code="WORD_LENGTH",
            message=f"Start word must be exactly {dictionary.word_length} letters",
            word=word,
        ))
    elif not re.match(r'^[A-Z]+$', word):
        errors.append(ValidationError(
            code="NOT_ALPHABETIC",
            message=f"'{word}' must contain only letters A-Z",
            word=word,
        ))
    elif not dictionary.is_valid(word):
        errors.append(ValidationError(
            code="NOT_IN_DICTIONARY",
            message=f"'{word}' is not in the game dictionary",
            word=word,
        ))

    letters = _clean_rack(rack, errors)
    if not letters and not any(e.code == "INVALID_RACK_LETTER" for e in errors):
        errors.append(ValidationError(
            code="EMPTY_RACK",
            message="Enter at least one letter for the rack",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        start_word=word,
        rack=letters,
    )


def create_custom_puzzle(
    dictionary: Dictionary,
    start_word: str,
    rack: Union[str, Sequence[str]],
    rng: Optional[random.Random] = None,
) -> LevelData:
    """
    Build a custom puzzle. It has no end word and no known solution.

    Raises:
        PuzzleInputError: If the input fails validation
    """
    result = validate_custom_puzzle(dictionary, start_word, rack)
    if not result.valid:
        raise PuzzleInputError(result)

    return LevelData(
        start_word=result.start_word,
        end_word=None,
        rack_tiles=make_tiles(result.rack, rng),
        solution=[],
        kind="custom",
    )
