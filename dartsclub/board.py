"""
Cricket board state: marks per player per target number.

Provides the exact interface cricket.py needs: read marks, add a capped hit,
and ask whether a player has closed the whole board.
"""

from __future__ import annotations

CRICKET_TARGETS: tuple[int, ...] = (15, 16, 17, 18, 19, 20, 25)
BULL = 25
CLOSED_MARKS = 3


class CricketBoardState:
    """Marks (0–3, never decreasing) on 15..20 and bull for each player."""

    def __init__(self, player_ids: list[str]) -> None:
        self._marks: dict[str, dict[int, int]] = {
            pid: {target: 0 for target in CRICKET_TARGETS} for pid in player_ids
        }

    # ------------------------------------------------------------------ #
    # State queries                                                        #
    # ------------------------------------------------------------------ #

    def marks(self, player_id: str, target_number: int) -> int:
        return self._marks.get(player_id, {}).get(target_number, 0)

    def is_target_closed(self, player_id: str, target_number: int) -> bool:
        return self.marks(player_id, target_number) >= CLOSED_MARKS

    def is_closed(self, player_id: str) -> bool:
        """True once the player has three marks on every cricket target."""
        player_marks = self._marks.get(player_id)
        if player_marks is None:
            return False
        return all(player_marks[target] >= CLOSED_MARKS for target in CRICKET_TARGETS)

    def marks_for(self, player_id: str) -> dict[int, int]:
        return dict(self._marks.get(player_id, {}))

    # ------------------------------------------------------------------ #
    # Mutation                                                             #
    # ------------------------------------------------------------------ #

    def apply_mark(self, player_id: str, target_number: int, multiplier: int) -> None:
        """Add a hit, capped at three marks.  Unknown targets/players are ignored."""
        if target_number not in CRICKET_TARGETS:
            return
        player_marks = self._marks.get(player_id)
        if player_marks is None:
            return
        current = player_marks[target_number]
        player_marks[target_number] = min(CLOSED_MARKS, current + multiplier)
