"""
Game session: one player's board and rack.

Handles staging tiles on the board, submitting words, undo, win and loss
detection, and continuing an endless-mode streak.
"""

import random
from typing import List, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, PrivateAttr

from ..engine.dictionary import Dictionary
from ..engine.generator import generate_next_round
from ..engine.models import LevelData, MoveMap, Tile, differing_letters
from ..engine.moves import enumerate_moves, count_moves
from .models import BoardSlot, GameStatus, TurnResult


# End-of-game messages by tiles left on the rack
END_GAME_MESSAGES: Dict[int, str] = {
    0: "Perfect!",
    1: "Amazing!",
    2: "Great Job!",
    3: "Good Effort!",
}


class GameSession(BaseModel):
    """
    Manages the state of one puzzle being played.

    Attributes:
        dictionary: Word source for validity checks and move enumeration
        level: The puzzle being played (replaced each endless round)
        board: Board slots, one per letter of the word
        rack: Tiles not currently on the board
        status: Current game status
        word_history: Words committed this round, start word first
        endless: Whether completing a round continues the streak
        streak: Endless rounds completed
        turn_count: Turns taken, rejected words included
        undo_just_used: Undo is disabled until a tile is staged again
        seed: Optional random seed for reproducibility
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dictionary: Dictionary = Field(exclude=True)
    level: LevelData
    board: List[BoardSlot] = Field(default_factory=list)
    rack: List[Tile] = Field(default_factory=list)
    status: GameStatus = "playing"
    word_history: List[str] = Field(default_factory=list)
    endless: bool = False
    streak: int = 0
    turn_count: int = 0
    undo_just_used: bool = False
    endless_max_attempts: int = Field(default=20, ge=1)
    seed: Optional[int] = None
    _rng: random.Random = PrivateAttr(default_factory=random.Random)

    def model_post_init(self, __context) -> None:
        """Initialize the random generator after model creation."""
        self._rng = random.Random(self.seed)

    @classmethod
    def create(
        cls,
        dictionary: Dictionary,
        level: LevelData,
        endless: bool = False,
        seed: Optional[int] = None,
        **kwargs,
    ) -> "GameSession":
        """
        Factory method to start a session on a puzzle.

        The level is copied with fresh tile ids, so the caller's LevelData is
        never mutated by play.
        """
        level = level.with_fresh_ids()
        session = cls(
            dictionary=dictionary,
            level=level,
            board=cls._board_for(level.start_word),
            rack=list(level.rack_tiles),
            word_history=[level.start_word],
            endless=endless,
            seed=seed,
            **kwargs,
        )
        session._check_lost()
        return session

    @staticmethod
    def _board_for(word: str) -> List[BoardSlot]:
        return [BoardSlot(index=i, locked_char=c) for i, c in enumerate(word.upper())]

    @property
    def current_word(self) -> str:
        """The committed word on the board."""
        return "".join(slot.locked_char for slot in self.board)

    @property
    def effective_word(self) -> str:
        """The board word with staged tiles applied."""
        return "".join(slot.visible_char for slot in self.board)

    @property
    def staged_tiles(self) -> List[Tile]:
        return [slot.staged_tile for slot in self.board if slot.staged_tile]

    @property
    def tiles_left(self) -> int:
        """Tiles not yet committed to the board."""
        return len(self.rack) + len(self.staged_tiles)

    @property
    def can_undo(self) -> bool:
        return bool(self.staged_tiles) and not self.undo_just_used

    @property
    def end_game_message(self) -> str:
        return END_GAME_MESSAGES.get(self.tiles_left, "Nice Try!")

    def _find_rack_tile(self, tile_id: str) -> Optional[int]:
        for i, tile in enumerate(self.rack):
            if tile.id == tile_id:
                return i
        return None

    def _find_staged_tile(self, tile_id: str) -> Optional[int]:
        for slot in self.board:
            if slot.staged_tile and slot.staged_tile.id == tile_id:
                return slot.index
        return None

    def stage(self, tile_id: str, slot_index: int) -> bool:
        """
        Place a tile from the rack, or move one already staged, onto a slot.

        A tile whose letter the slot already shows is rejected. A tile staged
        on the target slot goes back to the rack.

        Returns:
            True if the tile was placed
        """
        if self.status != "playing":
            return False
        if not 0 <= slot_index < len(self.board):
            raise ValueError(f"Slot {slot_index} out of range (board has {len(self.board)})")

        rack_pos = self._find_rack_tile(tile_id)
        source_slot = self._find_staged_tile(tile_id) if rack_pos is None else None
        if rack_pos is None and source_slot is None:
            raise ValueError(f"Tile '{tile_id}' is not on the rack or the board")

        target = self.board[slot_index]
        tile = self.rack[rack_pos] if rack_pos is not None else self.board[source_slot].staged_tile

        if target.visible_char == tile.char:
            return False

        displaced = target.staged_tile
        if rack_pos is not None:
            self.rack.pop(rack_pos)
        else:
            self.board[source_slot].staged_tile = None
        target.staged_tile = tile
        if displaced is not None:
            self.rack.append(displaced)

        self.undo_just_used = False
        return True

    def unstage(self, slot_index: int) -> Optional[Tile]:
        """Return the tile staged on a slot to the rack."""
        if not 0 <= slot_index < len(self.board):
            raise ValueError(f"Slot {slot_index} out of range (board has {len(self.board)})")

        slot = self.board[slot_index]
        tile = slot.staged_tile
        if tile is not None:
            slot.staged_tile = None
            self.rack.append(tile)
        return tile

    def _return_staged(self) -> List[Tile]:
        returned = []
        for slot in self.board:
            if slot.staged_tile:
                returned.append(slot.staged_tile)
                slot.staged_tile = None
        self.rack.extend(returned)
        return returned

    def undo(self) -> bool:
        """
        Return every staged tile to the rack.

        Returns:
            False if there was nothing to undo or undo was just used
        """
        if not self.can_undo:
            return False
        self._return_staged()
        self.undo_just_used = True
        return True

    def shuffle_rack(self) -> None:
        self._rng.shuffle(self.rack)

    def possible_moves(self) -> MoveMap:
        """Legal moves from the committed word using rack and staged tiles."""
        return enumerate_moves(
            self.dictionary,
            self.current_word,
            self.rack + self.staged_tiles,
        )

    def _check_lost(self) -> int:
        """Mark the session lost when tiles remain and no move exists."""
        if self.status != "playing" or self.tiles_left == 0:
            return 0
        available = count_moves(self.possible_moves())
        if available == 0:
            self.status = "lost"
        return available

    def submit(self) -> TurnResult:
        """
        Submit the board word with staged tiles applied.

        A valid word is committed; emptying the rack wins the round. An
        invalid word sends the staged tiles back to the rack.

        Returns:
            TurnResult describing the outcome
        """
        if self.status != "playing":
            raise ValueError(f"Cannot submit while session is {self.status}")

        word_before = self.current_word
        candidate = self.effective_word
        rack_before = sorted(t.char for t in self.rack + self.staged_tiles)
        self.turn_count += 1

        error = None
        accepted = False
        tiles_used: List[str] = []
        if candidate == word_before:
            error = "Place at least one tile"
        elif not self.dictionary.is_valid(candidate):
            error = f"'{candidate}' is not in the dictionary"
        else:
            accepted = True

        if accepted:
            tiles_used = differing_letters(word_before, candidate)
            for slot in self.board:
                if slot.staged_tile:
                    slot.locked_char = slot.staged_tile.char
                    slot.staged_tile = None
            self.word_history.append(candidate)
            if not self.rack:
                self.status = "round_won" if self.endless else "won"
        else:
            self._return_staged()

        self.undo_just_used = False
        moves_available = self._check_lost()

        return TurnResult(
            turn_number=self.turn_count,
            round_number=self.streak + 1,
            word_before=word_before,
            candidate=candidate,
            accepted=accepted,
            tiles_used=tiles_used,
            rack_before=rack_before,
            rack_after=sorted(t.char for t in self.rack),
            moves_available=moves_available,
            status=self.status,
            error=error,
        )

    def play_word(self, word: str) -> TurnResult:
        """
        Stage whatever tiles turn the board into `word`, then submit.

        Staged tiles are returned first. If the rack cannot supply a needed
        letter nothing is submitted; the attempt still counts as a turn and a
        rejected TurnResult is returned.
        """
        if self.status != "playing":
            raise ValueError(f"Cannot play while session is {self.status}")

        self._return_staged()
        target = word.strip().upper()
        if len(target) != len(self.board):
            raise ValueError(f"'{word}' must be exactly {len(self.board)} letters")

        for slot, letter in zip(self.board, target):
            if slot.locked_char == letter:
                continue
            tile = next((t for t in self.rack if t.char == letter), None)
            if tile is None:
                self._return_staged()
                self.turn_count += 1
                return TurnResult(
                    turn_number=self.turn_count,
                    round_number=self.streak + 1,
                    word_before=self.current_word,
                    candidate=target,
                    accepted=False,
                    rack_before=sorted(t.char for t in self.rack),
                    rack_after=sorted(t.char for t in self.rack),
                    status=self.status,
                    error=f"No '{letter}' tile left for {target}",
                )
            self.stage(tile.id, slot.index)

        return self.submit()

    def continue_streak(self, rack_size: Optional[int] = None) -> Optional[LevelData]:
        """
        Start the next endless round from the committed board word.

        Returns:
            The new round, or None when none could be generated, in which case
            the streak ends
        """
        if not self.endless:
            raise ValueError("Streaks only continue in endless mode")
        if self.status != "round_won":
            raise ValueError(f"Cannot continue streak while session is {self.status}")

        next_round = generate_next_round(
            self.dictionary,
            self.current_word,
            target_rack_size=rack_size or self.level.rack_size,
            max_attempts=self.endless_max_attempts,
            rng=self._rng,
        )
        if next_round is None:
            self.status = "streak_ended"
            return None

        self.level = next_round
        self.rack = list(next_round.rack_tiles)
        self.word_history = [self.current_word]
        self.streak += 1
        self.undo_just_used = False
        self.status = "playing"
        self._check_lost()
        return next_round

    def restart(self) -> None:
        """Replay the current level from its start word with fresh tile ids."""
        self.level = self.level.with_fresh_ids()
        self.board = self._board_for(self.level.start_word)
        self.rack = list(self.level.rack_tiles)
        self.word_history = [self.level.start_word]
        self.turn_count = 0
        self.undo_just_used = False
        self.status = "playing"
        self._check_lost()

    def get_state(self) -> Dict:
        """
        Get the current session state as a dictionary.

        Useful for serialization and logging.
        """
        return {
            "current_word": self.current_word,
            "effective_word": self.effective_word,
            "rack": [t.char for t in self.rack],
            "staged": {s.index: s.staged_tile.char for s in self.board if s.staged_tile},
            "status": self.status,
            "endless": self.endless,
            "streak": self.streak,
            "turn_count": self.turn_count,
            "tiles_left": self.tiles_left,
            "word_history": list(self.word_history),
        }
