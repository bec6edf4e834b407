"""
Test suite for the dictionary, adjacency search and move enumeration.

Covers:
- Dictionary construction, filtering and membership
- Neighbors within one to three substitutions
- Legal move enumeration with multiset tile supply
"""

from collections import Counter
from itertools import combinations

import pytest

from src.engine import (
    Dictionary,
    DictionaryError,
    Tile,
    count_moves,
    enumerate_moves,
    hamming_distance,
    has_moves,
    load_default_dictionary,
    neighbors,
)


SMALL_WORDS = "about abort snort short shore"


@pytest.fixture
def small():
    return Dictionary.from_text(SMALL_WORDS)


class TestDictionary:
    """Test cases for dictionary construction."""

    def test_trims_lowercases_and_filters(self):
        """Tokens are lowercased and only the configured length is kept."""
        d = Dictionary.from_text("  ABOUT\tshort\n cat  elephant Shore ", word_length=5)
        assert d.words == ("about", "shore", "short")
        assert len(d) == 3

    def test_duplicates_collapse(self):
        """Set semantics: repeated words appear once."""
        d = Dictionary.from_text("about ABOUT About")
        assert d.words == ("about",)

    def test_non_letters_dropped(self):
        """Tokens with digits or punctuation are not words."""
        d = Dictionary.from_text("ab0ut a-out about")
        assert d.words == ("about",)

    def test_empty_word_list_is_fatal(self):
        """No valid words is a configuration error."""
        with pytest.raises(DictionaryError):
            Dictionary.from_text("cat dog elephant")

    def test_dictionary_error_is_value_error(self):
        """DictionaryError can be handled as a ValueError."""
        with pytest.raises(ValueError):
            Dictionary.from_text("")

    def test_membership_case_insensitive(self, small):
        """Lookups accept any case."""
        assert small.is_valid("ABOUT")
        assert "Short" in small
        assert "about" in small
        assert "plate" not in small
        assert 42 not in small

    def test_other_word_length(self):
        """Any fixed length works."""
        d = Dictionary.from_text("cat dog bird", word_length=3)
        assert d.word_length == 3
        assert d.words == ("cat", "dog")

    def test_from_file_missing(self, tmp_path):
        """A missing word list file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Dictionary.from_file(tmp_path / "missing.txt")

    def test_from_file(self, tmp_path):
        """Word lists load from disk."""
        path = tmp_path / "words.txt"
        path.write_text("about\nabort\nsnort\n")
        d = Dictionary.from_file(path)
        assert d.words == ("abort", "about", "snort")

    def test_default_dictionary(self):
        """The bundled list loads and holds only 5-letter words."""
        d = load_default_dictionary()
        assert len(d) > 1000
        assert all(len(w) == 5 and w.isalpha() and w.islower() for w in d.words)
        assert list(d.words) == sorted(d.words)
        for word in ["about", "abort", "snort", "short", "shore", "plate", "slate"]:
            assert word in d

    def test_check_word(self, small):
        """check_word normalizes and rejects malformed words."""
        assert small.check_word(" ABOUT ") == "about"
        with pytest.raises(ValueError):
            small.check_word("abouts")
        with pytest.raises(ValueError):
            small.check_word("ab0ut")

    def test_constructor_normalizes_words(self):
        """Direct construction applies the same filtering as from_text."""
        d = Dictionary(words=("ABOUT", "abort", "toolong", "ab0ut", "About"))
        assert d.words == ("abort", "about")
        assert d.is_valid("about")
        assert "ABORT" in d

    def test_constructor_rejects_empty(self):
        """An empty or fully filtered word list is a configuration error."""
        with pytest.raises(ValueError, match="no valid 5-letter words"):
            Dictionary()
        with pytest.raises(ValueError):
            Dictionary(words=("cat", "elephant"))

    def test_immutable(self, small):
        """Fields cannot be reassigned."""
        with pytest.raises(Exception):
            small.word_length = 4


class TestHammingDistance:
    """Test cases for the distance helper."""

    def test_distances(self):
        assert hamming_distance("about", "about") == 0
        assert hamming_distance("about", "abort") == 1
        assert hamming_distance("about", "shore") == 4

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            hamming_distance("about", "abo")


class TestNeighbors:
    """Test cases for adjacency search."""

    def test_about_neighbors(self, small):
        """ABORT is one away; SHORE is four away and excluded."""
        found = neighbors(small, "ABOUT")
        assert "abort" in found
        assert "shore" not in found
        assert found == ["abort", "short", "snort"]

    def test_excluded_words_skipped(self, small):
        """Visited words never come back."""
        found = neighbors(small, "about", excluded={"abort"})
        assert "abort" not in found

    def test_excluded_any_case(self, small):
        """Excluded words match regardless of case."""
        found = neighbors(small, "about", excluded={"ABORT", "Snort"})
        assert found == ["short"]

    def test_word_itself_never_included(self, small):
        """Distance zero is not adjacency."""
        assert "short" not in neighbors(small, "short")

    def test_neighbors_of_non_dictionary_word(self, small):
        """The search word need not be in the dictionary."""
        assert neighbors(small, "shirt") == ["abort", "shore", "short", "snort"]

    def test_wrong_length_rejected(self, small):
        with pytest.raises(ValueError):
            neighbors(small, "abouts")

    def test_adjacency_matches_distance_band(self, small):
        """b is a neighbor of a exactly when 1 <= distance <= 3."""
        for a in small.words:
            found = set(neighbors(small, a))
            for b in small.words:
                assert (b in found) == (1 <= hamming_distance(a, b) <= 3)


class TestEnumerateMoves:
    """Test cases for legal move enumeration."""

    def test_single_substitution(self, small):
        """SNORT + H reaches SHORT with one tile."""
        moves = enumerate_moves(small, "SNORT", ["H"])
        assert moves == {1: ["SHORT"]}

    def test_missing_letters_excluded(self, small):
        """Words needing letters not on the rack are not moves."""
        moves = enumerate_moves(small, "SNORT", ["H"])
        assert "SHORE" not in moves.get(2, [])
        assert "ABOUT" not in moves.get(3, [])

    def test_grouped_and_sorted(self, small):
        """Moves are grouped by tiles used and sorted alphabetically."""
        moves = enumerate_moves(small, "about", list("ENSHR"))
        assert moves == {1: ["ABORT"], 3: ["SHORT", "SNORT"], 4: ["SHORE"]}

    def test_duplicate_letters_are_supply(self):
        """Two E tiles cover two E substitutions."""
        d = Dictionary.from_text("aaaaa aeeaa aeaaa")
        assert enumerate_moves(d, "aaaaa", ["E", "E"]) == {1: ["AEAAA"], 2: ["AEEAA"]}
        assert enumerate_moves(d, "aaaaa", ["E"]) == {1: ["AEAAA"]}

    def test_counter_supply(self):
        """A letter-count mapping supplies every counted unit."""
        d = Dictionary.from_text("aaaaa aeeaa aeaaa")
        assert enumerate_moves(d, "aaaaa", Counter({"E": 2})) == {1: ["AEAAA"], 2: ["AEEAA"]}
        assert enumerate_moves(d, "aaaaa", {"e": 1}) == {1: ["AEAAA"]}

    def test_accepts_tiles_and_mixed_case(self, small):
        """Tile objects and lowercase letters both count as supply."""
        tiles = [Tile(id="t1", char="h"), "r", Tile(id="t2", char="S")]
        moves = enumerate_moves(small, "about", tiles)
        assert moves[3] == ["SHORT"]
        assert moves[1] == ["ABORT"]

    def test_no_moves_is_empty_mapping(self, small):
        """No legal move returns an empty mapping, not an error."""
        moves = enumerate_moves(small, "about", ["Z", "Q"])
        assert moves == {}
        assert count_moves(moves) == 0
        assert not has_moves(small, "about", ["Z"])

    def test_empty_rack(self, small):
        assert enumerate_moves(small, "about", []) == {}

    def test_current_word_never_a_move(self, small):
        moves = enumerate_moves(small, "ShOrT", list("ABCDEFGHIJKLMNOPQRSTUVWXYZ"))
        assert all("SHORT" not in words for words in moves.values())

    def test_soundness_and_completeness(self):
        """Every reported move is feasible with count = distance, and none is missed."""
        d = load_default_dictionary()
        rack = list("EARST")
        current = "slate"
        moves = enumerate_moves(d, current, rack)

        reported = {w: k for k, words in moves.items() for w in words}
        supply = Counter(rack)
        for word in d.words:
            if word == current:
                continue
            needed = Counter(c.upper() for c, b in zip(word, current) if c != b)
            feasible = all(supply[c] >= n for c, n in needed.items())
            if feasible:
                assert reported.get(word.upper()) == hamming_distance(word, current)
            else:
                assert word.upper() not in reported

    def test_deterministic(self, small):
        first = enumerate_moves(small, "abort", list("SNHE"))
        second = enumerate_moves(small, "abort", list("EHNS"))
        assert first == second


def test_small_dictionary_pairs_are_symmetric(small):
    """Adjacency is symmetric."""
    for a, b in combinations(small.words, 2):
        assert (b in neighbors(small, a)) == (a in neighbors(small, b))
