import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Callable
from pydantic import BaseModel, Field, ConfigDict, PrivateAttr

from ..engine.solver import solve
from ..utils.board_render import render_board, render_rack, render_moves
from .models import PlayResult, Strategy, TurnResult
from .session import GameSession


class AutoPlayer(BaseModel):
    """
    Plays a session to the end without a human.

    The "greedy" strategy always plays the move that spends the most tiles,
    taking the alphabetically first word among ties. The "solver" strategy
    searches for a line that spends the whole rack and follows it, falling
    back to greedy when the rack cannot be emptied.

    Attributes:
        session: The session being played
        strategy: Move selection strategy
        max_rounds: Endless rounds to play before stopping
        max_turns: Safety limit on submitted words
        turn_history: History of all turns
        end_reason: Why play stopped
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session: GameSession
    strategy: Strategy = "greedy"
    max_rounds: int = Field(default=1, ge=1)
    max_turns: int = Field(default=100, ge=1)
    turn_history: List[TurnResult] = Field(default_factory=list)
    rounds_completed: int = 0
    end_reason: str = ""
    started_at: Optional[datetime] = None
    _plan: List[str] = PrivateAttr(default_factory=list)

    def choose_move(self) -> Optional[str]:
        """Pick the next word to play, or None if there is no legal move."""
        if self.strategy == "solver":
            if not self._plan:
                report = solve(
                    self.session.dictionary,
                    self.session.current_word,
                    self.session.rack,
                )
                self._plan = list(report.first_solution())
            if self._plan:
                return self._plan.pop(0)

        moves = self.session.possible_moves()
        if not moves:
            return None
        return moves[max(moves)][0]

    def step(self) -> Optional[TurnResult]:
        """
        Play one word.

        Returns:
            TurnResult, or None if no move was available
        """
        word = self.choose_move()
        if word is None:
            return None

        turn_result = self.session.play_word(word)
        self.turn_history.append(turn_result)
        return turn_result

    def run(
        self,
        on_turn: Optional[Callable[[TurnResult], None]] = None,
        verbose: bool = False,
    ) -> PlayResult:
        """
        Play until the puzzle is won or lost, or the round/turn limit is hit.

        Args:
            on_turn: Optional callback called after each turn
            verbose: If True, print progress to stdout

        Returns:
            PlayResult summarizing the play-through
        """
        self.started_at = datetime.now()
        session = self.session
        start_word = session.current_word

        if verbose:
            print(f"Starting {'endless ' if session.endless else ''}play ({self.strategy})")
            print(f"Board: {render_board(session.current_word)}")
            print(f"Rack:  {render_rack(session.rack)}")
            print("-" * 40)

        while not self.end_reason:
            if len(self.turn_history) >= self.max_turns:
                self.end_reason = f"Max turns ({self.max_turns}) reached"
                break

            if session.status == "playing":
                turn_result = self.step()
                if turn_result is None:
                    session.status = "lost"
                    continue

                if verbose:
                    mark = "✓" if turn_result.accepted else "✗"
                    print(
                        f"Turn {turn_result.turn_number}: {turn_result.word_before} -> "
                        f"{turn_result.candidate} {mark}  rack: {render_rack(turn_result.rack_after)}"
                    )
                    if turn_result.error:
                        print(f"  ERROR: {turn_result.error}")

                if on_turn:
                    on_turn(turn_result)

            elif session.status == "round_won":
                self.rounds_completed += 1
                if verbose:
                    print(f"Round {self.rounds_completed} complete on {session.current_word}")
                if self.rounds_completed >= self.max_rounds:
                    self.end_reason = f"Completed {self.rounds_completed} round(s)"
                    break
                self._plan = []
                next_round = session.continue_streak()
                if verbose and next_round is not None:
                    print(f"Next round rack: {render_rack(next_round.rack_tiles)}")
                    print("-" * 40)

            elif session.status == "won":
                self.rounds_completed += 1
                self.end_reason = f"Won with {session.end_game_message}"

            elif session.status == "lost":
                self.end_reason = f"No moves left with {session.tiles_left} tile(s) on the rack"

            else:
                self.end_reason = "Streak ended: no next round from this word"

        if verbose:
            print("-" * 40)
            print(f"Play complete: {self.end_reason}")
            if session.status == "lost":
                print(render_moves(session.possible_moves()))

        return self.get_result(start_word)

    def get_result(self, start_word: Optional[str] = None) -> PlayResult:
        """Build the PlayResult for the play so far."""
        ended_at = datetime.now()
        duration = (ended_at - self.started_at).total_seconds() if self.started_at else 0.0
        session = self.session

        return PlayResult(
            start_word=start_word or session.word_history[0],
            final_word=session.current_word,
            status=session.status,
            endless=session.endless,
            rounds_completed=self.rounds_completed,
            streak=session.streak,
            tiles_left=session.tiles_left,
            message=session.end_game_message,
            word_history=list(session.word_history),
            turn_history=list(self.turn_history),
            final_moves=session.possible_moves() if session.status == "playing" else {},
            started_at=self.started_at.isoformat() if self.started_at else "",
            ended_at=ended_at.isoformat(),
            duration_seconds=duration,
        )

    def save_result(self, path: str | Path) -> None:
        """
        Save the play result to a JSON file.

        Args:
            path: Path to save the result file
        """
        result = self.get_result()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(result.model_dump(), f, indent=2, default=str)
