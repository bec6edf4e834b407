"""
Test suite for puzzle records, custom puzzles, the solver and puzzle files.
"""

import json

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError

from src.engine import (
    CURATED_PUZZLES,
    Dictionary,
    LevelData,
    PuzzleInputError,
    SolutionStep,
    Tile,
    calculate_version,
    create_custom_puzzle,
    curated_from_file,
    export_bank,
    extract_rack_sizes,
    load_puzzle_file,
    make_tiles,
    solve,
    validate_custom_puzzle,
    validate_puzzle_data,
)
from src.engine.puzzles import PuzzleDataFile


SMALL_WORDS = "about abort snort short shore"


@pytest.fixture
def small():
    return Dictionary.from_text(SMALL_WORDS)


class TestRecords:
    """Test cases for Tile, SolutionStep and LevelData."""

    def test_tile_uppercases(self):
        assert Tile(id="a", char="e").char == "E"

    def test_tile_single_letter(self):
        with pytest.raises(PydanticValidationError):
            Tile(id="a", char="EE")

    def test_step_between_derives_tiles(self):
        step = SolutionStep.between("abort", "snort")
        assert step.from_word == "ABORT"
        assert step.tiles_used == ["S", "N"]

    def test_step_tiles_must_match_changes(self):
        with pytest.raises(PydanticValidationError):
            SolutionStep(from_word="ABORT", target_word="SNORT", tiles_used=["N", "S"])
        with pytest.raises(PydanticValidationError):
            SolutionStep(from_word="ABORT", target_word="SNORT", tiles_used=["S"])

    def test_step_must_change_something(self):
        with pytest.raises(PydanticValidationError):
            SolutionStep(from_word="ABORT", target_word="ABORT", tiles_used=[])

    def test_step_lengths_must_match(self):
        with pytest.raises(PydanticValidationError):
            SolutionStep(from_word="ABORT", target_word="ABORTS", tiles_used=["S"])

    def test_replay_detects_leftover(self, small):
        level = CURATED_PUZZLES[0].to_level(small)
        level.rack_tiles.append(Tile(id="extra", char="Z"))
        with pytest.raises(ValueError, match="unused"):
            level.replay()

    def test_replay_detects_shortfall(self, small):
        level = CURATED_PUZZLES[0].to_level(small)
        level.rack_tiles.pop()
        with pytest.raises(ValueError, match="needs"):
            level.replay()

    def test_replay_detects_disconnected_step(self):
        level = LevelData(
            start_word="ABOUT",
            end_word="SHORE",
            rack_tiles=make_tiles("E"),
            solution=[SolutionStep.between("SHORT", "SHORE")],
        )
        with pytest.raises(ValueError, match="starts from"):
            level.replay()

    def test_with_fresh_ids(self, small):
        level = CURATED_PUZZLES[0].to_level(small)
        copy = level.with_fresh_ids()
        assert copy.rack_letters() == level.rack_letters()
        assert all(a.id != b.id for a, b in zip(copy.rack_tiles, level.rack_tiles))
        assert copy.solution == level.solution


class TestCustomPuzzle:
    """Test cases for custom puzzle validation."""

    def test_valid_string_rack(self, small):
        result = validate_custom_puzzle(small, " about ", "e, n s!")
        assert result.valid is True
        assert result.start_word == "ABOUT"
        assert result.rack == ["E", "N", "S"]

    def test_wrong_length(self, small):
        result = validate_custom_puzzle(small, "abouts", "e")
        assert result.valid is False
        assert any(e.code == "WORD_LENGTH" for e in result.errors)

    def test_not_alphabetic(self, small):
        result = validate_custom_puzzle(small, "ab0ut", "e")
        assert any(e.code == "NOT_ALPHABETIC" for e in result.errors)

    def test_not_in_dictionary(self, small):
        result = validate_custom_puzzle(small, "plate", "e")
        assert any(e.code == "NOT_IN_DICTIONARY" for e in result.errors)

    def test_empty_rack(self, small):
        result = validate_custom_puzzle(small, "about", "123")
        assert [e.code for e in result.errors] == ["EMPTY_RACK"]

    def test_list_rack_entries_checked(self, small):
        result = validate_custom_puzzle(small, "about", ["e", "nn", "7"])
        codes = [e.code for e in result.errors]
        assert codes.count("INVALID_RACK_LETTER") == 2
        assert result.rack == ["E"]

    def test_create(self, small):
        level = create_custom_puzzle(small, "about", "ENSHR")
        assert level.kind == "custom"
        assert level.end_word is None
        assert level.solution == []
        assert level.rack_letters() == ["E", "N", "S", "H", "R"]

    def test_create_rejects_invalid(self, small):
        with pytest.raises(PuzzleInputError) as exc_info:
            create_custom_puzzle(small, "plate", "E")
        assert exc_info.value.result.errors[0].code == "NOT_IN_DICTIONARY"
        assert isinstance(exc_info.value, ValueError)


class TestSolver:
    """Test cases for the exhaustive solver."""

    def test_about_puzzle(self, small):
        """Every way to spend E N S H R from ABOUT."""
        report = solve(small, "about", list("ENSHR"))
        assert report.total_solutions == 4
        assert report.total_paths == 10
        assert sorted(report.solutions) == [2, 3, 4]
        assert report.solutions[2] == [["SNORT", "SHORE"]]
        assert report.solutions[3] == [
            ["ABORT", "SNORT", "SHORE"],
            ["SNORT", "SHORT", "SHORE"],
        ]
        assert report.solutions[4] == [["ABORT", "SNORT", "SHORT", "SHORE"]]
        assert report.first_solution() == ["SNORT", "SHORE"]
        assert report.counts() == {"C_S_2": 1, "C_S_3": 2, "C_S_4": 1}
        assert report.solvable

    def test_unsolvable(self, small):
        report = solve(small, "about", ["Z"])
        assert report.total_solutions == 0
        assert report.total_paths == 1
        assert report.first_solution() == []
        assert not report.solvable

    def test_truncation(self, small):
        report = solve(small, "about", list("ENSHR"), max_paths=3)
        assert report.truncated is True
        assert report.total_paths == 3

    def test_accepts_tiles(self, small):
        report = solve(small, "snort", make_tiles("H"))
        assert report.solutions == {1: [["SHORT"]]}


class TestPuzzleFiles:
    """Test cases for puzzle data files."""

    def test_validate(self):
        assert validate_puzzle_data({"puzzles": [{"start": "about", "rack": ["e"]}]})
        assert not validate_puzzle_data(None)
        assert not validate_puzzle_data({})
        assert not validate_puzzle_data({"puzzles": []})
        assert not validate_puzzle_data({"puzzles": [{"start": "about", "rack": []}]})
        assert not validate_puzzle_data({"puzzles": [{"start": "about", "rack": ["ee"]}]})
        assert not validate_puzzle_data({"version": 3, "puzzles": [{"start": "a", "rack": ["e"]}]})

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "puzzles.yaml"
        path.write_text(yaml.safe_dump({
            "version": "1.0.0",
            "puzzles": [
                {"start": "about", "rack": ["e", "n", "s", "h", "r"], "path": ["snort", "shore"]},
                {"start": "snort", "rack": ["h"], "C_S_1": 1},
            ],
        }))
        data = load_puzzle_file(path)
        assert data.version == "1.0.0"
        assert extract_rack_sizes(data) == [1, 5]
        assert data.puzzles[1].model_extra == {"C_S_1": 1}

    def test_load_json_aliases(self, tmp_path):
        path = tmp_path / "puzzles.json"
        path.write_text(json.dumps({
            "createdAt": "2025-01-01T00:00:00",
            "rackSizes": [1],
            "puzzles": [{"start": "snort", "rack": ["h"], "endWord": "short"}],
        }))
        data = load_puzzle_file(path)
        assert data.created_at == "2025-01-01T00:00:00"
        assert data.puzzles[0].end_word == "short"

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_puzzle_file(tmp_path / "none.json")

    def test_load_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"puzzles": []}))
        with pytest.raises(ValueError):
            load_puzzle_file(path)

    @pytest.mark.parametrize("name,content", [
        ("broken.yaml", "puzzles: [start: about\n  rack: {"),
        ("broken.json", '{"puzzles": ['),
    ])
    def test_load_unparseable(self, tmp_path, name, content):
        """Syntax errors surface as ValueError, like structural ones."""
        path = tmp_path / name
        path.write_text(content)
        with pytest.raises(ValueError, match="Could not parse"):
            load_puzzle_file(path)

    def test_version_hash(self):
        a = PuzzleDataFile.model_validate({"puzzles": [{"start": "about", "rack": ["e"]}]})
        b = PuzzleDataFile.model_validate({"puzzles": [{"start": "about", "rack": ["e"]}]})
        c = PuzzleDataFile.model_validate({"puzzles": [{"start": "about", "rack": ["s"]}]})
        assert calculate_version(a) == calculate_version(b)
        assert calculate_version(a) != calculate_version(c)
        assert len(calculate_version(a)) == 64

    def test_curated_from_file_solves_missing_paths(self, small):
        data = PuzzleDataFile.model_validate({"puzzles": [
            {"start": "about", "rack": ["e", "n", "s", "h", "r"]},
            {"start": "about", "rack": ["z"]},
        ]})
        seeds = curated_from_file(data, small)
        assert len(seeds) == 1
        assert seeds[0].path == ["snort", "shore"]
        level = seeds[0].to_level(small)
        assert level.replay() == ["ABOUT", "SNORT", "SHORE"]

    def test_export_round_trip(self, small, tmp_path):
        levels = [seed.to_level(small) for seed in CURATED_PUZZLES[:1]]
        path = tmp_path / "out" / "bank.json"
        written = export_bank(levels, path, dictionary=small, description="test")

        assert written.puzzle_count == 1
        assert written.rack_sizes == [5]
        raw = json.loads(path.read_text())
        assert raw["puzzleCount"] == 1
        entry = raw["puzzles"][0]
        assert entry["start"] == "about"
        assert entry["path"] == ["abort", "snort", "short", "shore"]
        assert entry["total_solutions"] == 4
        assert entry["C_S_4"] == 1

        reloaded = curated_from_file(load_puzzle_file(path), small)
        assert reloaded[0].to_level(small).end_word == "SHORE"

    def test_export_yaml(self, small, tmp_path):
        levels = [CURATED_PUZZLES[0].to_level(small)]
        path = tmp_path / "bank.yaml"
        export_bank(levels, path)
        data = yaml.safe_load(path.read_text())
        assert data["puzzles"][0]["endWord"] == "shore"
        assert "total_solutions" not in data["puzzles"][0]
