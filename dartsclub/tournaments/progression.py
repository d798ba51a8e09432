"""
Tournament aggregate, the progression engine over fixtures.

Created once from the bracket builder's rounds (see create_tournament() in
dartsclub.tournaments) and mutated only through the methods below.  Each
method either applies all of its effects or raises before touching state.

Fixture life-cycle:
    TBD side(s)  →  start-ready (both real)  →  linked to a match  →  decided
    one BYE side →  decided by resolve_auto_byes() with label "Freilos"

A fixture winner is written once and never changes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dartsclub.errors import (
    ByeResolutionError,
    FixtureAlreadyDecidedError,
    FixtureAlreadyLinkedError,
    FixtureNotFoundError,
    FixtureNotReadyError,
    InvalidFixtureWinnerError,
    RoundModeLockedError,
    RoundNotFoundError,
)
from dartsclub.legs import GameMode
from dartsclub.tournaments.base import (
    BYE,
    FREILOS,
    TournamentFixture,
    TournamentFormat,
    TournamentRound,
    TournamentSettings,
)

logger = logging.getLogger(__name__)


class Tournament:
    """Aggregate root: rounds, fixtures and their progression."""

    def __init__(
        self,
        tournament_id: str,
        name: str,
        format: TournamentFormat,
        settings: TournamentSettings,
        rounds: list[TournamentRound],
        updated_at: datetime | None = None,
    ) -> None:
        self.tournament_id = tournament_id
        self.name = name
        self.format = format
        self.settings = settings
        self._rounds = list(rounds)
        self.updated_at = updated_at or _utcnow()

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    @property
    def rounds(self) -> list[TournamentRound]:
        return list(self._rounds)

    def round(self, round_number: int) -> TournamentRound:
        for entry in self._rounds:
            if entry.round_number == round_number:
                return entry
        raise RoundNotFoundError(round_number)

    def fixture(self, round_number: int, fixture_index: int) -> TournamentFixture:
        fixtures = self.round(round_number).fixtures
        if not 0 <= fixture_index < len(fixtures):
            raise FixtureNotFoundError(round_number, fixture_index)
        return fixtures[fixture_index]

    def fixture_ready(self, round_number: int, fixture_index: int) -> bool:
        return self.fixture(round_number, fixture_index).is_start_ready

    def participants(self) -> list[str]:
        """Real participants of round 1, in slot order."""
        if not self._rounds:
            return []
        seen: dict[str, None] = {}
        for fixture in self._rounds[0].fixtures:
            for side in fixture.sides:
                if side != BYE:
                    seen.setdefault(side, None)
        return list(seen)

    def is_completed(self) -> bool:
        return all(fixture.is_decided for entry in self._rounds for fixture in entry.fixtures)

    def resolve_champion(self) -> str | None:
        """
        SINGLE_ELIMINATION: winner of the final, or None while undecided.

        ROUND_ROBIN: 2 points per recorded round-1 win; the first participant
        with the highest total (in fixture order) is champion.  None when
        there are no participants or no win has been recorded yet.
        """
        if not self._rounds:
            return None

        if self.format == "SINGLE_ELIMINATION":
            final = self._rounds[-1].fixtures
            return final[0].winner_player_id if len(final) == 1 else None

        table = self.points_table()
        if not table or max(table.values()) == 0:
            return None
        best = max(table.values())
        # First max in table order; ties are not broken any further.
        return next(pid for pid, points in table.items() if points == best)

    def points_table(self) -> dict[str, int]:
        table: dict[str, int] = {pid: 0 for pid in self.participants()}
        for fixture in self._rounds[0].fixtures:
            winner = fixture.winner_player_id
            if winner is not None and winner in table:
                table[winner] += 2
        return table

    # ------------------------------------------------------------------ #
    # Commands                                                             #
    # ------------------------------------------------------------------ #

    def set_round_mode(self, round_number: int, mode: GameMode) -> None:
        if not self.settings.allow_round_mode_switch:
            raise RoundModeLockedError()
        self.round(round_number).mode = mode
        self._touch()

    def link_fixture_match(self, round_number: int, fixture_index: int, match_id: str) -> None:
        fixture = self.fixture(round_number, fixture_index)
        if fixture.linked_match_id is not None:
            raise FixtureAlreadyLinkedError()
        if fixture.is_decided:
            raise FixtureAlreadyDecidedError()
        if not fixture.is_start_ready:
            raise FixtureNotReadyError()

        fixture.linked_match_id = match_id
        self._touch()
        logger.info(
            "Tournament %s: R%d fixture %d linked to match %s",
            self.tournament_id,
            round_number,
            fixture_index,
            match_id,
        )

    def record_fixture_winner(
        self,
        round_number: int,
        fixture_index: int,
        winner_player_id: str,
        result_label: str | None = None,
    ) -> None:
        fixture = self.fixture(round_number, fixture_index)
        if fixture.is_decided:
            raise FixtureAlreadyDecidedError()
        if fixture.has_tbd:
            raise FixtureNotReadyError("Fixture is not ready: a participant is still TBD.")

        if fixture.has_bye:
            # Only the automatic bye path may resolve these.
            if result_label != FREILOS or winner_player_id != fixture.bye_opponent():
                raise ByeResolutionError()
        elif winner_player_id not in fixture.sides:
            raise InvalidFixtureWinnerError()

        fixture.winner_player_id = winner_player_id
        fixture.result_label = result_label
        if self.format == "SINGLE_ELIMINATION":
            self._propagate_winners(round_number)
        self._touch()

        logger.info(
            "Tournament %s: R%d fixture %d won by %s%s",
            self.tournament_id,
            round_number,
            fixture_index,
            winner_player_id,
            f" ({result_label})" if result_label else "",
        )

    def resolve_auto_byes(self) -> int:
        """
        Resolve every fixture where a real participant faces a BYE.

        Runs to a fixed point so byes cascading through consecutive rounds
        are resolved too.  Returns the number of fixtures resolved.
        """
        resolved = 0
        changed = True
        while changed:
            changed = False
            for entry in self._rounds:
                for index, fixture in enumerate(entry.fixtures):
                    if fixture.is_decided:
                        continue
                    advancing = fixture.bye_opponent()
                    if advancing is None:
                        continue
                    self.record_fixture_winner(entry.round_number, index, advancing, FREILOS)
                    resolved += 1
                    changed = True
        return resolved

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    def _propagate_winners(self, round_number: int) -> None:
        """Copy decided winners of round r into the slots of round r + 1."""
        positions = [i for i, entry in enumerate(self._rounds) if entry.round_number == round_number]
        if not positions or positions[0] + 1 >= len(self._rounds):
            return

        current = self._rounds[positions[0]]
        following = self._rounds[positions[0] + 1]
        winners = [fixture.winner_player_id for fixture in current.fixtures]

        for i, next_fixture in enumerate(following.fixtures):
            home = winners[2 * i] if 2 * i < len(winners) else None
            away = winners[2 * i + 1] if 2 * i + 1 < len(winners) else None
            if home is not None:
                next_fixture.home_player_id = home
            if away is not None:
                next_fixture.away_player_id = away

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def __repr__(self) -> str:
        return f"Tournament({self.tournament_id!r}, {self.name!r}, {self.format})"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
