"""
Round-robin schedule builder.

Every participant meets every other participant exactly once.  The whole
schedule is a single round (round 1); fixture order is (i, j) for i < j in
seed order, so the first seed plays all of their fixtures first.
"""

from __future__ import annotations

from itertools import combinations

from dartsclub.legs import GameMode
from dartsclub.tournaments.base import TournamentFixture, TournamentRound, round_mode


def build_round_robin(
    participants: list[str],
    round_modes: list[GameMode] | None = None,
) -> list[TournamentRound]:
    if len(participants) < 2:
        raise ValueError("Round robin tournament requires at least 2 participants.")

    fixtures = [
        TournamentFixture(home_player_id=home, away_player_id=away)
        for home, away in combinations(participants, 2)
    ]
    return [TournamentRound(1, round_mode(round_modes, 1), fixtures)]
