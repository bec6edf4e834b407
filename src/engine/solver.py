"""
Exhaustive solver used to rate puzzles.

Every move spends at least one tile, so every path is finite and no visited
set is needed.
"""

from collections import Counter
from typing import Dict, List, Sequence, Union

from pydantic import BaseModel, Field

from .dictionary import Dictionary
from .models import Tile, differing_letters, letters_of
from .moves import enumerate_moves


class SolveReport(BaseModel):
    """
    Result of exploring every play line of a puzzle.

    Attributes:
        start_word: Uppercase start word
        rack: Uppercase rack letters
        total_paths: Lines explored to their end (solutions and dead ends)
        total_solutions: Lines that spend the whole rack
        solutions: Solution word paths (start word excluded), keyed by move count
        truncated: True when exploration stopped at max_paths
    """
    start_word: str
    rack: List[str] = Field(default_factory=list)
    total_paths: int = 0
    total_solutions: int = 0
    solutions: Dict[int, List[List[str]]] = Field(default_factory=dict)
    truncated: bool = False

    @property
    def solvable(self) -> bool:
        return self.total_solutions > 0

    def first_solution(self) -> List[str]:
        """Shortest solution found, or an empty list."""
        for moves in sorted(self.solutions):
            if self.solutions[moves]:
                return self.solutions[moves][0]
        return []

    def counts(self) -> Dict[str, int]:
        """Solution counts per move count, keyed C_S_<moves>."""
        return {f"C_S_{k}": len(v) for k, v in sorted(self.solutions.items())}


def solve(
    dictionary: Dictionary,
    start_word: str,
    rack: Sequence[Union[Tile, str]],
    max_paths: int = 10000,
) -> SolveReport:
    """Explore every legal play line from start_word with the given rack."""
    report = SolveReport(start_word=start_word.upper(), rack=letters_of(rack))

    def explore(word: str, remaining: Counter, path: List[str]) -> None:
        if report.total_paths >= max_paths:
            report.truncated = True
            return

        if sum(remaining.values()) == 0:
            report.total_paths += 1
            report.total_solutions += 1
            report.solutions.setdefault(len(path), []).append(list(path))
            return

        moves = enumerate_moves(dictionary, word, remaining.elements())
        if not moves:
            report.total_paths += 1
            return

        for count in sorted(moves):
            for candidate in moves[count]:
                left = remaining.copy()
                left.subtract(differing_letters(word, candidate))
                path.append(candidate)
                explore(candidate, left, path)
                path.pop()
                if report.truncated:
                    return

    explore(report.start_word, Counter(report.rack), [])
    return report
