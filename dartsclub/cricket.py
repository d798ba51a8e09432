"""
Cricket scoring: resolves one throw into marks and overflow points.

Rules:
- Only 15..20 and the bull (25) count; any other target is ignored.
- The bull has no treble ring, so a triple bull counts as a double.
- Marks cap at three.  Hits beyond the third mark "overflow" and score
  target_number points each, unless every opponent has closed the number.
"""

from __future__ import annotations

from dataclasses import dataclass

from dartsclub.board import BULL, CLOSED_MARKS, CRICKET_TARGETS, CricketBoardState


@dataclass(frozen=True)
class ThrowResult:
    awarded_points: int
    overflow_marks: int
    player_closed_board: bool


class CricketScorer:
    """Applies cricket throws to a shared CricketBoardState."""

    def __init__(self, board: CricketBoardState) -> None:
        self.board = board

    def apply_throw(
        self,
        player_id: str,
        opponent_ids: list[str],
        target_number: int,
        multiplier: int,
    ) -> ThrowResult:
        if target_number not in CRICKET_TARGETS:
            return ThrowResult(0, 0, self.board.is_closed(player_id))

        effective = effective_multiplier(target_number, multiplier)
        before = self.board.marks(player_id, target_number)
        self.board.apply_mark(player_id, target_number, effective)

        overflow = max(0, before + effective - CLOSED_MARKS)
        all_opponents_closed = all(
            self.board.is_target_closed(opponent, target_number) for opponent in opponent_ids
        )
        awarded = 0 if all_opponents_closed else overflow * target_number

        return ThrowResult(
            awarded_points=awarded,
            overflow_marks=overflow,
            player_closed_board=self.board.is_closed(player_id),
        )


def effective_multiplier(target_number: int, multiplier: int) -> int:
    if target_number == BULL and multiplier == 3:
        return 2
    return multiplier
