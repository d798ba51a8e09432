"""
Tournament package.

create_tournament() is the single entry point for building any format:
seed the participants, build the initial rounds, wrap them in a Tournament
aggregate and resolve the byes that are already decidable.

To add a new format:
  1. Create dartsclub/tournaments/<name>.py with a build_<name>() function
  2. Add a case here
"""

from __future__ import annotations

import random
from typing import Callable

from dartsclub.errors import TournamentRuleError
from dartsclub.legs import GameMode
from dartsclub.tournaments.base import (
    BYE,
    FREILOS,
    SENTINELS,
    TBD,
    ByePlacement,
    SeedingMode,
    TournamentFixture,
    TournamentFormat,
    TournamentRound,
    TournamentSettings,
)
from dartsclub.tournaments.knockout import build_single_elimination, seed_bracket
from dartsclub.tournaments.progression import Tournament
from dartsclub.tournaments.round_robin import build_round_robin
from dartsclub.tournaments.seeding import seed_participants

__all__ = [
    # Base types
    "BYE",
    "FREILOS",
    "TBD",
    "ByePlacement",
    "SeedingMode",
    "TournamentFixture",
    "TournamentFormat",
    "TournamentRound",
    "TournamentSettings",
    # Aggregate
    "Tournament",
    # Builders
    "build_round_robin",
    "build_single_elimination",
    "seed_bracket",
    "seed_participants",
    # Factory
    "create_tournament",
]


def create_tournament(
    tournament_id: str,
    name: str,
    participants: list[str],
    format: TournamentFormat = "SINGLE_ELIMINATION",
    round_modes: list[GameMode] | None = None,
    settings: TournamentSettings | None = None,
    *,
    rng: random.Random | None = None,
    rating_of: Callable[[str], int] | None = None,
) -> Tournament:
    """
    Build a ready-to-play Tournament.

    Args:
        participants: player ids, in entry order ("BYE"/"TBD" are reserved)
        format:       "SINGLE_ELIMINATION" | "ROUND_ROBIN"
        round_modes:  game mode per round (index 0 = round 1); X01_501 fills gaps
        settings:     bye placement, seeding mode, match defaults
        rng:          random source for RANDOM seeding
        rating_of:    rating lookup for RANKING seeding
    """
    settings = settings or TournamentSettings()
    _validate_participants(participants)

    seeded = seed_participants(
        participants, settings.seeding_mode, rng=rng, rating_of=rating_of
    )

    match format:
        case "SINGLE_ELIMINATION":
            rounds = build_single_elimination(seeded, round_modes, settings.bye_placement)
        case "ROUND_ROBIN":
            rounds = build_round_robin(seeded, round_modes)
        case _:
            raise TournamentRuleError(
                f"Unknown tournament format: {format!r}. "
                "Valid formats: SINGLE_ELIMINATION, ROUND_ROBIN"
            )

    tournament = Tournament(tournament_id, name, format, settings, rounds)
    tournament.resolve_auto_byes()
    return tournament


def _validate_participants(participants: list[str]) -> None:
    if len(participants) < 2:
        raise TournamentRuleError("A tournament requires at least 2 participants.")
    if len(set(participants)) != len(participants):
        raise TournamentRuleError("Participant ids must be unique.")
    reserved = SENTINELS.intersection(participants)
    if reserved:
        raise TournamentRuleError(f"Participant ids {sorted(reserved)} are reserved.")
