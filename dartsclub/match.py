"""
Darts match aggregate: the turn state machine.

This module is UI-agnostic.  It never prints and never performs I/O; every
significant outcome is appended to a pending-event queue that the caller
drains with take_events() after each mutation.

States:
    in progress (winner_player_id is None)  →  won (terminal)

X01 turn rules (register_turn):
- Going below zero is a bust: the visit is discarded and the turn passes.
- Reaching exactly zero must satisfy the player's checkout mode
  (SINGLE_OUT: any dart, DOUBLE_OUT: a double, MASTER_OUT: double or
  treble); an invalid checkout is handled exactly like a bust.
- A valid checkout wins the leg.  The match is won once the player holds
  sets_to_win sets; otherwise the next leg starts with reset scores.

Cricket (register_cricket_turn) and bull-off (resolve_bull_off_winner) are
variants over the same terminal state.
"""

from __future__ import annotations

import logging

from dartsclub.board import CricketBoardState
from dartsclub.cricket import CricketScorer
from dartsclub.errors import MatchRuleError
from dartsclub.events import LegWonEvent, MatchEvent
from dartsclub.legs import (
    CheckoutMode,
    GameMode,
    LegResult,
    MatchConfiguration,
    MatchScoreboard,
    PlayerLegState,
    starting_score,
)

logger = logging.getLogger(__name__)


class DartsMatch:
    """Aggregate root for one match of X01 or cricket."""

    def __init__(
        self,
        match_id: str,
        configuration: MatchConfiguration,
        players: list[PlayerLegState],
    ) -> None:
        if not players:
            raise MatchRuleError("A match requires at least one player.")
        if configuration.legs_per_set < 1 or configuration.sets_to_win < 1:
            raise MatchRuleError("legs_per_set and sets_to_win must be >= 1")

        self.match_id = match_id
        self.configuration = configuration
        self._players = list(players)
        self._player_order = [p.player_id for p in players]
        if len(set(self._player_order)) != len(self._player_order):
            raise MatchRuleError("Player ids must be unique within a match.")

        try:
            self._active_index = self._player_order.index(configuration.starting_player_id)
        except ValueError:
            logger.warning(
                "Match %s: starting player %r is not in the match, %s throws first",
                match_id,
                configuration.starting_player_id,
                self._player_order[0],
            )
            self._active_index = 0
        self._leg_starter_index = self._active_index

        self._leg_number = 1
        self._winner_player_id: str | None = None
        self._scoreboard = MatchScoreboard(self._player_order)
        self._cricket_board = CricketBoardState(self._player_order)
        self._cricket_scores: dict[str, int] = {pid: 0 for pid in self._player_order}
        self._leg_results: list[LegResult] = []
        self._pending_events: list[MatchEvent] = []

    # ------------------------------------------------------------------ #
    # State queries                                                        #
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> GameMode:
        return self.configuration.mode

    @property
    def players(self) -> tuple[PlayerLegState, ...]:
        return tuple(self._players)

    @property
    def player_ids(self) -> list[str]:
        return list(self._player_order)

    @property
    def active_player(self) -> PlayerLegState:
        return self._players[self._active_index]

    @property
    def active_player_index(self) -> int:
        return self._active_index

    @property
    def leg_number(self) -> int:
        return self._leg_number

    @property
    def winner_player_id(self) -> str | None:
        return self._winner_player_id

    @property
    def is_finished(self) -> bool:
        return self._winner_player_id is not None

    @property
    def scoreboard(self) -> MatchScoreboard:
        return self._scoreboard

    @property
    def leg_results(self) -> list[LegResult]:
        return list(self._leg_results)

    def player(self, player_id: str) -> PlayerLegState:
        for p in self._players:
            if p.player_id == player_id:
                return p
        raise KeyError(player_id)

    def cricket_score(self, player_id: str) -> int:
        return self._cricket_scores.get(player_id, 0)

    def cricket_marks(self, player_id: str, target_number: int) -> int:
        return self._cricket_board.marks(player_id, target_number)

    # ------------------------------------------------------------------ #
    # X01                                                                  #
    # ------------------------------------------------------------------ #

    def register_turn(self, points: int, final_dart_multiplier: int) -> None:
        """Apply one three-dart visit worth `points` for the active player."""
        if self.is_finished:
            return
        if self.mode == "CRICKET":
            logger.warning("Match %s: X01 turn ignored on a cricket match", self.match_id)
            return

        player = self.active_player
        remaining = player.score - points

        if remaining < 0:
            logger.debug("Match %s: %s busts (%d from %d)", self.match_id, player.player_id, points, player.score)
            self._advance()
            return

        if remaining == 0 and not _is_valid_checkout(player.checkout_mode, final_dart_multiplier):
            logger.debug(
                "Match %s: %s invalid %s checkout with multiplier %d",
                self.match_id,
                player.player_id,
                player.checkout_mode,
                final_dart_multiplier,
            )
            self._advance()
            return

        player.apply_turn(points)

        if remaining > 0:
            self._advance()
            return

        # Only successful checkouts are counted as attempts.
        player.checkout_attempts += 1
        player.successful_checkouts += 1
        self._win_leg(player)

        if self._scoreboard.sets(player.player_id) >= self.configuration.sets_to_win:
            self._set_winner(player.player_id)
            return

        self._start_next_leg()

    # ------------------------------------------------------------------ #
    # Cricket                                                              #
    # ------------------------------------------------------------------ #

    def register_cricket_turn(self, target_number: int, multiplier: int) -> None:
        """
        Apply one cricket throw for the active player and pass the turn.

        The cricket "score" is the running total of overflow points.  A
        player wins once they have closed every target and their score is
        at least the best opponent score.
        """
        if self.is_finished:
            return
        if self.mode != "CRICKET":
            logger.warning("Match %s: cricket throw ignored on a %s match", self.match_id, self.mode)
            return

        player = self.active_player
        opponents = [pid for pid in self._player_order if pid != player.player_id]

        result = CricketScorer(self._cricket_board).apply_throw(
            player.player_id, opponents, target_number, multiplier
        )
        self._cricket_scores[player.player_id] += result.awarded_points

        own_score = self._cricket_scores[player.player_id]
        best_opponent = max((self._cricket_scores[pid] for pid in opponents), default=0)
        if result.player_closed_board and own_score >= best_opponent:
            self._win_leg(player)
            self._set_winner(player.player_id)
            return

        self._advance()

    # ------------------------------------------------------------------ #
    # Bull-off                                                             #
    # ------------------------------------------------------------------ #

    def resolve_bull_off_winner(self, winner_player_id: str) -> None:
        """Decide the match directly, e.g. after a bull-off on a tie."""
        if self.is_finished:
            return
        if winner_player_id not in self._player_order:
            raise MatchRuleError("Bull-off winner is not part of this match.")
        self._set_winner(winner_player_id)

    # ------------------------------------------------------------------ #
    # Events & reporting                                                   #
    # ------------------------------------------------------------------ #

    def take_events(self) -> list[MatchEvent]:
        """Return pending events in occurrence order and clear the queue."""
        events = list(self._pending_events)
        self._pending_events.clear()
        return events

    def summary(self) -> dict:
        """Compact post-match summary for reporting exports."""
        return {
            "winner_player_id": self._winner_player_id,
            "leg_number": self._leg_number,
            "scoreboard": [
                {
                    "player_id": pid,
                    "legs": self._scoreboard.legs(pid),
                    "sets": self._scoreboard.sets(pid),
                }
                for pid in self._player_order
            ],
            "personal_records": [
                {
                    "player_id": p.player_id,
                    "highest_turn_score": p.highest_turn_score,
                    "average": round(p.three_dart_average, 2),
                }
                for p in self._players
            ],
        }

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    def _advance(self) -> None:
        self._active_index = (self._active_index + 1) % len(self._players)

    def _win_leg(self, player: PlayerLegState) -> None:
        self._scoreboard.register_leg_winner(player.player_id, self.configuration.legs_per_set)
        self._leg_results.append(
            LegResult(
                leg_number=self._leg_number,
                winner_player_id=player.player_id,
                winner_display_name=player.display_name,
                sets_after_leg=self._scoreboard.sets(player.player_id),
                total_legs_won_after_leg=self._scoreboard.total_legs(player.player_id),
            )
        )
        self._pending_events.append(
            LegWonEvent(
                match_id=self.match_id,
                winner_player_id=player.player_id,
                leg_number=self._leg_number,
            )
        )
        logger.info("Match %s: leg %d won by %s", self.match_id, self._leg_number, player.player_id)

    def _set_winner(self, player_id: str) -> None:
        self._winner_player_id = player_id
        logger.info("Match %s: won by %s", self.match_id, player_id)

    def _start_next_leg(self) -> None:
        self._leg_number += 1
        score = starting_score(self.mode)
        self._players = [p.fresh_leg(score) for p in self._players]
        # The throw-first player rotates from leg to leg.
        self._leg_starter_index = (self._leg_starter_index + 1) % len(self._players)
        self._active_index = self._leg_starter_index


def _is_valid_checkout(mode: CheckoutMode, final_dart_multiplier: int) -> bool:
    match mode:
        case "SINGLE_OUT":
            return True
        case "DOUBLE_OUT":
            return final_dart_multiplier == 2
        case _:
            return final_dart_multiplier in (2, 3)
