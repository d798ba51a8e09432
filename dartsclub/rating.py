"""
Elo rating for match outcomes.

calculate_new_ratings() is the single update rule.  RatingBook holds the
player → rating map for the orchestrating service; the aggregates never
touch ratings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_RATING = 1200
DEFAULT_K_FACTOR = 32


@dataclass(frozen=True)
class RatingUpdate:
    winner: int
    loser: int


def expected_score(own_rating: float, other_rating: float) -> float:
    return 1 / (1 + 10 ** ((other_rating - own_rating) / 400))


def calculate_new_ratings(
    winner_rating: int,
    loser_rating: int,
    k_factor: int = DEFAULT_K_FACTOR,
) -> RatingUpdate:
    winner_expected = expected_score(winner_rating, loser_rating)
    loser_expected = expected_score(loser_rating, winner_rating)
    return RatingUpdate(
        winner=_round_half_up(winner_rating + k_factor * (1 - winner_expected)),
        loser=_round_half_up(loser_rating + k_factor * (0 - loser_expected)),
    )


def _round_half_up(value: float) -> int:
    # round() would use banker's rounding; ratings round .5 upwards.
    return math.floor(value + 0.5)


class RatingBook:
    """Player ratings, seeded the first time a player is seen."""

    def __init__(
        self,
        initial_rating: int = DEFAULT_RATING,
        k_factor: int = DEFAULT_K_FACTOR,
        ratings: dict[str, int] | None = None,
    ) -> None:
        self.initial_rating = initial_rating
        self.k_factor = k_factor
        self._ratings: dict[str, int] = dict(ratings or {})

    def rating(self, player_id: str) -> int:
        return self._ratings.setdefault(player_id, self.initial_rating)

    def peek(self, player_id: str) -> int:
        """Rating without seeding the player."""
        return self._ratings.get(player_id, self.initial_rating)

    def snapshot(self) -> dict[str, int]:
        return dict(self._ratings)

    def apply_result(self, winner_id: str, loser_ids: list[str]) -> dict[str, int]:
        """
        Update ratings for one decided match and return the new values.

        With more than two players the winner is scored against each loser
        separately; every pairing uses the pre-match ratings.
        """
        before = {pid: self.rating(pid) for pid in [winner_id, *loser_ids]}
        winner_delta = 0
        for loser_id in loser_ids:
            update = calculate_new_ratings(before[winner_id], before[loser_id], self.k_factor)
            winner_delta += update.winner - before[winner_id]
            self._ratings[loser_id] = update.loser
        self._ratings[winner_id] = before[winner_id] + winner_delta

        changed = {pid: self._ratings[pid] for pid in before}
        logger.info("Ratings updated: %s", ", ".join(f"{pid}={r}" for pid, r in changed.items()))
        return changed
