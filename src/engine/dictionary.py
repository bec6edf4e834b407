"""
Word dictionary for the puzzle engine.

A Dictionary is built once from a raw word list and never changes. Words are
stored lowercase; lookups accept any case.
"""

import logging
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

logger = logging.getLogger(__name__)


class DictionaryError(ValueError):
    """Raised when a word list yields no usable words."""


def _clean_words(tokens: Iterable[Any], word_length: int) -> Tuple[str, ...]:
    """Lowercase, keep ASCII-alphabetic tokens of the right length, sort, dedupe."""
    words = set()
    for token in tokens:
        if not isinstance(token, str):
            continue
        word = token.strip().lower()
        if len(word) == word_length and word.isascii() and word.isalpha():
            words.add(word)
    return tuple(sorted(words))


class Dictionary(BaseModel):
    """
    Immutable set of valid words of one fixed length.

    Attributes:
        word_length: Length every word in the dictionary has
        words: All words, lowercase and sorted (the scan order)
    """

    model_config = ConfigDict(frozen=True)

    word_length: int = Field(default=5, ge=1)
    words: Tuple[str, ...] = Field(default_factory=tuple)
    _lookup: FrozenSet[str] = PrivateAttr(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def _normalize_words(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        word_length = data.get("word_length", 5)
        if not isinstance(word_length, int):
            return data
        raw = data.get("words", ())
        if isinstance(raw, str):
            raw = raw.split()
        words = _clean_words(raw, word_length)
        if not words:
            raise DictionaryError(
                f"Word list contains no valid {word_length}-letter words"
            )
        return {**data, "words": words}

    def model_post_init(self, __context) -> None:
        """Build the membership set after model creation."""
        self._lookup = frozenset(self.words)

    @classmethod
    def from_text(cls, raw: str, word_length: int = 5) -> "Dictionary":
        """
        Build a dictionary from whitespace-separated text.

        Args:
            raw: Raw word list text
            word_length: Only tokens of exactly this length are kept

        Returns:
            A new Dictionary

        Raises:
            DictionaryError: If no token survives filtering
        """
        words = _clean_words(raw.split(), word_length)
        if not words:
            raise DictionaryError(
                f"Word list contains no valid {word_length}-letter words"
            )

        return cls(word_length=word_length, words=words)

    @classmethod
    def from_file(cls, path: str | Path, word_length: int = 5) -> "Dictionary":
        """Build a dictionary from a word list file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Word list file not found: {path}")

        dictionary = cls.from_text(path.read_text(encoding="utf-8"), word_length)
        logger.info("Loaded %d words from %s", len(dictionary), path)
        return dictionary

    def is_valid(self, word: str) -> bool:
        """Case-insensitive membership test."""
        return word.lower() in self._lookup

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.is_valid(word)

    def __len__(self) -> int:
        return len(self.words)

    def check_word(self, word: str) -> str:
        """
        Normalize a caller-supplied word to lowercase.

        Raises:
            ValueError: If the word has the wrong length or non-letter characters
        """
        cleaned = word.strip().lower()
        if len(cleaned) != self.word_length:
            raise ValueError(
                f"'{word}' must be exactly {self.word_length} letters"
            )
        if not (cleaned.isascii() and cleaned.isalpha()):
            raise ValueError(f"'{word}' must contain only letters A-Z")
        return cleaned
