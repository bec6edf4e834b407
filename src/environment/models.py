"""
Pydantic models for the environment layer.

This module contains the data models (configuration, board slots, turn and
play results) used by the session and the automatic player. The main logic
classes (GameSession, AutoPlayer) remain in their respective files.
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, Field

from ..engine.models import Tile, MoveMap


# Type aliases
GameStatus = Literal["playing", "won", "lost", "round_won", "streak_ended"]
Strategy = Literal["greedy", "solver"]


class BoardSlot(BaseModel):
    """One board position: the committed letter plus an optional staged tile."""
    index: int = Field(..., ge=0)
    locked_char: str = Field(..., pattern=r'^[A-Z]$')
    staged_tile: Optional[Tile] = None

    @property
    def visible_char(self) -> str:
        return self.staged_tile.char if self.staged_tile else self.locked_char


class TurnResult(BaseModel):
    """Result of a single submitted word."""
    turn_number: int
    round_number: int = 1
    word_before: str
    candidate: str
    accepted: bool
    tiles_used: List[str] = Field(default_factory=list)
    rack_before: List[str] = Field(default_factory=list)
    rack_after: List[str] = Field(default_factory=list)
    moves_available: int = 0
    status: GameStatus = "playing"
    error: Optional[str] = None


class EngineConfig(BaseModel):
    """Configuration for the engine and the command line."""
    word_length: int = Field(default=5, ge=1)
    rack_size: int = Field(default=5, ge=1)
    bank_size: int = Field(default=30, ge=1)
    max_attempts: int = Field(default=50, ge=1)
    max_steps_per_attempt: int = Field(default=20, ge=1)
    endless_max_attempts: int = Field(default=20, ge=1)
    seed: Optional[int] = None
    dictionary_path: Optional[str] = None
    puzzles_path: Optional[str] = None


class PlayResult(BaseModel):
    """Result of an automatic play-through."""
    start_word: str
    final_word: str
    status: GameStatus
    endless: bool = False
    rounds_completed: int = 0
    streak: int = 0
    tiles_left: int = 0
    message: str = ""
    word_history: List[str] = Field(default_factory=list)
    turn_history: List[TurnResult] = Field(default_factory=list)
    final_moves: MoveMap = Field(default_factory=dict)
    started_at: str = ""
    ended_at: str = ""
    duration_seconds: float = 0.0
