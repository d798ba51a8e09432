"""
Tournament abstractions: shared types for the bracket builder and the
progression engine.

A tournament is an ordered list of TournamentRound objects, each holding its
TournamentFixture pairings.  Fixture slots hold either a real player id or one
of two sentinels:

    TBD: waiting for the winner of an earlier fixture
    BYE: no opponent; the other side advances automatically
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from dartsclub.legs import GameMode

TournamentFormat = Literal["SINGLE_ELIMINATION", "ROUND_ROBIN"]
ByePlacement = Literal["ROUND_1", "DISTRIBUTED", "PLAY_IN"]
SeedingMode = Literal["RANDOM", "MANUAL", "RANKING"]

TOURNAMENT_FORMATS: tuple[TournamentFormat, ...] = ("SINGLE_ELIMINATION", "ROUND_ROBIN")
BYE_PLACEMENTS: tuple[ByePlacement, ...] = ("ROUND_1", "DISTRIBUTED", "PLAY_IN")
SEEDING_MODES: tuple[SeedingMode, ...] = ("RANDOM", "MANUAL", "RANKING")

TBD = "TBD"
BYE = "BYE"
SENTINELS = frozenset({TBD, BYE})

# Result label written by the automatic bye path ("free ticket").
FREILOS = "Freilos"

DEFAULT_ROUND_MODE: GameMode = "X01_501"


@dataclass(frozen=True)
class TournamentSettings:
    bye_placement: ByePlacement = "ROUND_1"
    seeding_mode: SeedingMode = "MANUAL"
    default_legs_per_set: int = 3
    default_sets_to_win: int = 2
    allow_round_mode_switch: bool = True


@dataclass
class TournamentFixture:
    """One scheduled pairing within a round."""

    home_player_id: str
    away_player_id: str
    winner_player_id: str | None = None
    result_label: str | None = None
    linked_match_id: str | None = None

    @property
    def sides(self) -> tuple[str, str]:
        return self.home_player_id, self.away_player_id

    @property
    def is_decided(self) -> bool:
        return self.winner_player_id is not None

    @property
    def has_tbd(self) -> bool:
        return TBD in self.sides

    @property
    def has_bye(self) -> bool:
        return BYE in self.sides

    @property
    def is_start_ready(self) -> bool:
        """Both sides are real participants."""
        return not (self.has_tbd or self.has_bye)

    def bye_opponent(self) -> str | None:
        """The real participant facing a BYE, or None when this is not a bye fixture."""
        home, away = self.sides
        if home == BYE and away not in SENTINELS:
            return away
        if away == BYE and home not in SENTINELS:
            return home
        return None


@dataclass
class TournamentRound:
    round_number: int            # 1-based
    mode: GameMode
    fixtures: list[TournamentFixture] = field(default_factory=list)


def round_mode(round_modes: list[GameMode] | None, round_number: int) -> GameMode:
    """Mode for a 1-based round, falling back to X01_501 when none was given."""
    if round_modes and len(round_modes) >= round_number:
        return round_modes[round_number - 1]
    return DEFAULT_ROUND_MODE
