"""Bundled word list."""

from pathlib import Path

from ..dictionary import Dictionary

WORDS_FILE = Path(__file__).parent / "words.txt"


def load_default_dictionary(word_length: int = 5) -> Dictionary:
    """Load the bundled word list filtered to `word_length`."""
    return Dictionary.from_file(WORDS_FILE, word_length)
