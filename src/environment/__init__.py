"""Game session environment for word-patch."""

from .models import (
    GameStatus,
    Strategy,
    BoardSlot,
    TurnResult,
    EngineConfig,
    PlayResult,
)
from .session import GameSession, END_GAME_MESSAGES
from .autoplay import AutoPlayer

__all__ = [
    "GameStatus",
    "Strategy",
    "BoardSlot",
    "TurnResult",
    "EngineConfig",
    "PlayResult",
    "GameSession",
    "END_GAME_MESSAGES",
    "AutoPlayer",
]
