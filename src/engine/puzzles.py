"""
Puzzle data files.

A puzzle file carries curated puzzles plus optional metadata:

    version: "1.0.0"
    description: Launch set
    puzzles:
      - start: about
        rack: [e, n, s, h, r]
        path: [abort, snort, short, shore]

JSON and YAML are both accepted. Entries may carry solver statistics
(total_solutions, total_paths, C_S_<k>, ...); unknown keys are kept.
"""

import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .bank import CuratedPuzzle
from .dictionary import Dictionary
from .models import LevelData
from .solver import solve

logger = logging.getLogger(__name__)


class RawPuzzle(BaseModel):
    """One puzzle entry as stored in a file."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    start: str = Field(..., min_length=1)
    rack: List[str] = Field(..., min_length=1)
    path: Optional[List[str]] = None
    end_word: Optional[str] = Field(None, alias="endWord")
    total_solutions: Optional[int] = None
    total_paths: Optional[int] = None

    @field_validator("rack")
    @classmethod
    def _single_letters(cls, rack: List[str]) -> List[str]:
        for char in rack:
            if len(char) != 1:
                raise ValueError(f"Rack entry {char!r} is not a single character")
        return rack


class PuzzleDataFile(BaseModel):
    """A whole puzzle file."""
    model_config = ConfigDict(populate_by_name=True)

    version: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    description: Optional[str] = None
    puzzle_count: Optional[int] = Field(None, alias="puzzleCount")
    rack_sizes: Optional[List[int]] = Field(None, alias="rackSizes")
    puzzles: List[RawPuzzle] = Field(..., min_length=1)


def validate_puzzle_data(data: Any) -> bool:
    """True if `data` (already parsed) has the puzzle file structure."""
    try:
        PuzzleDataFile.model_validate(data)
    except (PydanticValidationError, ValueError):
        return False
    return True


def extract_rack_sizes(data: PuzzleDataFile) -> List[int]:
    """Distinct rack sizes present in the file, ascending."""
    return sorted({len(p.rack) for p in data.puzzles})


def calculate_version(data: PuzzleDataFile) -> str:
    """SHA-256 of the canonical JSON form, used to tell file versions apart."""
    payload = json.dumps(
        data.model_dump(by_alias=True, exclude_none=True),
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def load_puzzle_file(path: str | Path) -> PuzzleDataFile:
    """
    Load a puzzle file from JSON or YAML.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content does not have the puzzle file structure
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Puzzle file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Could not parse puzzle file {path}: {e}") from e

    try:
        return PuzzleDataFile.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid puzzle file {path}: {e}") from e


def curated_from_file(data: PuzzleDataFile, dictionary: Dictionary) -> List[CuratedPuzzle]:
    """
    Turn file entries into curated seeds.

    Entries without a path are solved and take the shortest solution; entries
    with no solution at all are skipped.
    """
    seeds: List[CuratedPuzzle] = []
    for raw in data.puzzles:
        path = raw.path
        if not path:
            report = solve(dictionary, raw.start, raw.rack)
            path = [w.lower() for w in report.first_solution()]
            if not path:
                logger.warning("Skipping unsolvable puzzle '%s'", raw.start)
                continue
        seeds.append(CuratedPuzzle(
            start=raw.start,
            rack=raw.rack,
            path=path,
            end_word=raw.end_word,
        ))
    return seeds


def level_to_raw(level: LevelData, dictionary: Optional[Dictionary] = None) -> RawPuzzle:
    """
    Convert a level to a file entry, with solver statistics when a
    dictionary is given.
    """
    extra: Dict[str, int] = {}
    total_solutions = total_paths = None
    if dictionary is not None:
        report = solve(dictionary, level.start_word, level.rack_tiles)
        total_solutions = report.total_solutions
        total_paths = report.total_paths
        extra = report.counts()

    return RawPuzzle(
        start=level.start_word.lower(),
        rack=[c.lower() for c in level.rack_letters()],
        path=[step.target_word.lower() for step in level.solution],
        end_word=level.end_word.lower() if level.end_word else None,
        total_solutions=total_solutions,
        total_paths=total_paths,
        **extra,
    )


def export_bank(
    levels: List[LevelData],
    path: str | Path,
    dictionary: Optional[Dictionary] = None,
    description: Optional[str] = None,
) -> PuzzleDataFile:
    """
    Write levels to a puzzle file (JSON, or YAML by suffix).

    Returns:
        The written file model
    """
    data = PuzzleDataFile(
        version="1.0.0",
        created_at=datetime.now().isoformat(),
        description=description,
        puzzles=[level_to_raw(level, dictionary) for level in levels],
    )
    data.puzzle_count = len(data.puzzles)
    data.rack_sizes = extract_rack_sizes(data)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    dumped = data.model_dump(by_alias=True, exclude_none=True)
    with open(path, 'w', encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            yaml.safe_dump(dumped, f, sort_keys=False)
        else:
            json.dump(dumped, f, indent=2)

    return data
