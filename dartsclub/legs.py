"""
Per-player and per-match records for X01 legs.

These are plain mutable dataclasses.  They are owned by exactly one
DartsMatch and only the match engine mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

GameMode = Literal["X01_301", "X01_501", "CRICKET", "CUSTOM"]
CheckoutMode = Literal["SINGLE_OUT", "DOUBLE_OUT", "MASTER_OUT"]
Multiplier = Literal[1, 2, 3]

GAME_MODES: tuple[GameMode, ...] = ("X01_301", "X01_501", "CRICKET", "CUSTOM")
CHECKOUT_MODES: tuple[CheckoutMode, ...] = ("SINGLE_OUT", "DOUBLE_OUT", "MASTER_OUT")


def starting_score(mode: GameMode) -> int:
    """X01_301 counts down from 301; every other mode uses 501."""
    return 301 if mode == "X01_301" else 501


@dataclass(frozen=True)
class MatchConfiguration:
    mode: GameMode
    starting_player_id: str
    legs_per_set: int = 1
    sets_to_win: int = 1


@dataclass
class PlayerLegState:
    """One player's leg state plus running performance counters."""

    player_id: str
    display_name: str
    checkout_mode: CheckoutMode
    score: int
    total_scored: int = 0
    darts_thrown: int = 0
    highest_turn_score: int = 0
    checkout_attempts: int = 0
    successful_checkouts: int = 0

    def apply_turn(self, points: int) -> None:
        """Apply a valid, non-bust visit."""
        self.score -= points
        self.total_scored += points
        self.darts_thrown += 3
        self.highest_turn_score = max(self.highest_turn_score, points)

    @property
    def three_dart_average(self) -> float:
        if self.darts_thrown == 0:
            return 0.0
        return (self.total_scored / self.darts_thrown) * 3

    @property
    def checkout_percentage(self) -> float:
        if self.checkout_attempts == 0:
            return 0.0
        return (self.successful_checkouts / self.checkout_attempts) * 100

    def fresh_leg(self, score: int) -> PlayerLegState:
        """Copy for the next leg: score reset, cumulative counters kept."""
        return PlayerLegState(
            player_id=self.player_id,
            display_name=self.display_name,
            checkout_mode=self.checkout_mode,
            score=score,
            total_scored=self.total_scored,
            darts_thrown=self.darts_thrown,
            highest_turn_score=self.highest_turn_score,
            checkout_attempts=self.checkout_attempts,
            successful_checkouts=self.successful_checkouts,
        )


@dataclass(frozen=True)
class LegResult:
    leg_number: int
    winner_player_id: str
    winner_display_name: str
    sets_after_leg: int
    total_legs_won_after_leg: int


class MatchScoreboard:
    """Tracks per-player legs and sets across a full match."""

    def __init__(self, player_ids: list[str]) -> None:
        self._legs: dict[str, int] = {pid: 0 for pid in player_ids}
        self._sets: dict[str, int] = {pid: 0 for pid in player_ids}
        self._total_legs: dict[str, int] = {pid: 0 for pid in player_ids}

    def register_leg_winner(self, player_id: str, legs_per_set: int) -> bool:
        """
        Count one leg for player_id.  Returns True when the leg also won a set.

        A won set closes the set for everyone, so every player's
        legs-in-current-set counter goes back to zero.
        """
        self._legs[player_id] = self._legs.get(player_id, 0) + 1
        self._total_legs[player_id] = self._total_legs.get(player_id, 0) + 1

        if self._legs[player_id] < legs_per_set:
            return False

        for pid in self._legs:
            self._legs[pid] = 0
        self._sets[player_id] = self._sets.get(player_id, 0) + 1
        return True

    def legs(self, player_id: str) -> int:
        return self._legs.get(player_id, 0)

    def sets(self, player_id: str) -> int:
        return self._sets.get(player_id, 0)

    def total_legs(self, player_id: str) -> int:
        return self._total_legs.get(player_id, 0)

    @property
    def player_ids(self) -> list[str]:
        return list(self._legs)
