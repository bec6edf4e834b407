"""
Test suite for plain-text rendering.
"""

from src.engine import Tile, fallback_puzzle, LevelData
from src.utils.board_render import (
    format_rack_counts,
    render_board,
    render_level,
    render_moves,
    render_rack,
)


def test_render_board_with_staged():
    assert render_board("snort", {1: "H"}) == "[S][h][O][R][T]"


def test_render_rack():
    assert render_rack([Tile(id="a", char="E"), "s"]) == "E S"
    assert render_rack([]) == "(empty)"


def test_format_rack_counts():
    assert format_rack_counts(list("ebE")) == "B:1 E:2"


def test_render_moves():
    text = render_moves({1: ["ABORT"], 3: ["SHORT", "SNORT"]}, limit=1)
    assert text.splitlines() == ["1 tile: ABORT", "3 tiles: SHORT (+1 more)"]
    assert render_moves({}) == "No moves available"


def test_render_level():
    text = render_level(fallback_puzzle(1))
    assert "Start: [P][L][A][T][E]" in text
    assert "1. PLATE -> SLATE (S)" in text
    custom = LevelData(start_word="ABOUT", end_word=None)
    assert render_level(custom).endswith("No pre-calculated solution.")
