"""Puzzle engine for word-patch."""

from .models import (
    Tile,
    SolutionStep,
    LevelData,
    LevelKind,
    MoveMap,
    ValidationError,
    ValidationResult,
    hamming_distance,
    differing_letters,
    make_tiles,
    new_tile_id,
)
from .dictionary import Dictionary, DictionaryError
from .data import load_default_dictionary
from .search import neighbors
from .moves import enumerate_moves, count_moves, has_moves
from .generator import generate_puzzle, generate_next_round, fallback_puzzle
from .bank import PuzzleBank, CuratedPuzzle, CURATED_PUZZLES, BANK_SIZE
from .custom import validate_custom_puzzle, create_custom_puzzle, PuzzleInputError
from .solver import solve, SolveReport
from .puzzles import (
    PuzzleDataFile,
    RawPuzzle,
    load_puzzle_file,
    validate_puzzle_data,
    extract_rack_sizes,
    calculate_version,
    curated_from_file,
    export_bank,
)

__all__ = [
    # Models
    "Tile",
    "SolutionStep",
    "LevelData",
    "LevelKind",
    "MoveMap",
    "ValidationError",
    "ValidationResult",
    "hamming_distance",
    "differing_letters",
    "make_tiles",
    "new_tile_id",
    # Dictionary
    "Dictionary",
    "DictionaryError",
    "load_default_dictionary",
    # Search and moves
    "neighbors",
    "enumerate_moves",
    "count_moves",
    "has_moves",
    # Generation
    "generate_puzzle",
    "generate_next_round",
    "fallback_puzzle",
    "PuzzleBank",
    "CuratedPuzzle",
    "CURATED_PUZZLES",
    "BANK_SIZE",
    # Custom puzzles
    "validate_custom_puzzle",
    "create_custom_puzzle",
    "PuzzleInputError",
    # Solver
    "solve",
    "SolveReport",
    # Puzzle files
    "PuzzleDataFile",
    "RawPuzzle",
    "load_puzzle_file",
    "validate_puzzle_data",
    "extract_rack_sizes",
    "calculate_version",
    "curated_from_file",
    "export_bank",
]
