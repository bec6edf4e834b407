"""Plain-text rendering of boards, racks and move lists."""

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..engine.models import LevelData, MoveMap, Tile


def render_board(word: str, staged: Optional[Dict[int, str]] = None) -> str:
    """
    Render the board word as boxed letters. Staged letters are lowercase.

    Example:
        [S][H][O][r][T]
    """
    staged = staged or {}
    cells = []
    for i, letter in enumerate(word.upper()):
        cells.append(f"[{staged[i].lower()}]" if i in staged else f"[{letter}]")
    return "".join(cells)


def render_rack(tiles: Sequence[Tile] | Sequence[str]) -> str:
    """Render the rack as space-separated letters."""
    letters = [t.char if isinstance(t, Tile) else t.upper() for t in tiles]
    return " ".join(letters) if letters else "(empty)"


def format_rack_counts(letters: Sequence[str]) -> str:
    """Format rack letters sorted, with counts."""
    counts = Counter(letter.upper() for letter in letters)
    return " ".join(f"{letter}:{count}" for letter, count in sorted(counts.items()))


def render_moves(moves: MoveMap, limit: int = 10) -> str:
    """Render a move map, one line per substitution count."""
    if not moves:
        return "No moves available"

    lines: List[str] = []
    for count in sorted(moves):
        words = moves[count]
        shown = " ".join(words[:limit])
        more = f" (+{len(words) - limit} more)" if len(words) > limit else ""
        label = "tile" if count == 1 else "tiles"
        lines.append(f"{count} {label}: {shown}{more}")
    return "\n".join(lines)


def render_level(level: LevelData, show_solution: bool = True) -> str:
    """Render a puzzle: start, rack and, optionally, its known solution."""
    lines = [
        f"Start: {render_board(level.start_word)}",
        f"Rack:  {render_rack(level.rack_tiles)}",
    ]
    if show_solution:
        if level.solution:
            lines.append("Solution:")
            for i, step in enumerate(level.solution, start=1):
                lines.append(
                    f"  {i}. {step.from_word} -> {step.target_word} "
                    f"({', '.join(step.tiles_used)})"
                )
        else:
            lines.append("No pre-calculated solution.")
    return "\n".join(lines)
