"""
Orchestrating services around the match and tournament aggregates.

Each mutating call follows the same shape:

    lock(id) → load → mutate → save → drain events → release

The per-id lock gives every aggregate a single writer at a time even when
several coroutines (CLI, tests, a future network layer) drive the same
match or tournament.  Domain errors from the aggregates propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

from dartsclub.config import MatchDefaults, TournamentDefaults
from dartsclub.errors import (
    FixtureAlreadyDecidedError,
    FixtureAlreadyLinkedError,
    FixtureNotReadyError,
    MatchNotFoundError,
    TournamentNotFoundError,
)
from dartsclub.events import EventSink, MatchEvent
from dartsclub.legs import CheckoutMode, GameMode, MatchConfiguration, PlayerLegState, starting_score
from dartsclub.match import DartsMatch
from dartsclub.rating import RatingBook
from dartsclub.serialization import match_state, tournament_state
from dartsclub.storage import Repository
from dartsclub.tournaments import TournamentSettings, create_tournament
from dartsclub.tournaments.base import TournamentFormat
from dartsclub.tournaments.progression import Tournament

logger = logging.getLogger(__name__)


class KeyedLocks:
    """
    One asyncio.Lock per aggregate id.

    A lock lives only while some coroutine holds or waits for it, so the
    table never outgrows the number of ids in use at the same time.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


# --------------------------------------------------------------------------- #
# Requests                                                                     #
# --------------------------------------------------------------------------- #

@dataclass
class PlayerEntry:
    player_id: str
    display_name: str
    checkout_mode: CheckoutMode | None = None   # None = MatchDefaults.checkout_mode


@dataclass
class CreateMatchRequest:
    players: list[PlayerEntry]
    mode: GameMode | None = None
    starting_player_id: str | None = None       # None = first player
    legs_per_set: int | None = None
    sets_to_win: int | None = None


@dataclass
class CreateTournamentRequest:
    name: str
    participants: list[str]
    format: TournamentFormat = "SINGLE_ELIMINATION"
    round_modes: list[GameMode] = field(default_factory=list)
    settings: TournamentSettings | None = None  # None = TournamentDefaults


# --------------------------------------------------------------------------- #
# Matches                                                                      #
# --------------------------------------------------------------------------- #

class MatchService:
    def __init__(
        self,
        repository: Repository[DartsMatch],
        ratings: RatingBook,
        sinks: list[EventSink] | None = None,
        defaults: MatchDefaults | None = None,
    ) -> None:
        self.repository = repository
        self.ratings = ratings
        self.sinks = list(sinks or [])
        self.defaults = defaults or MatchDefaults()
        self._locks = KeyedLocks()

    async def create_match(self, request: CreateMatchRequest) -> dict:
        mode = request.mode or self.defaults.mode
        starting = request.starting_player_id or (
            request.players[0].player_id if request.players else ""
        )
        legs_per_set = request.legs_per_set
        if legs_per_set is None:
            legs_per_set = self.defaults.legs_per_set
        sets_to_win = request.sets_to_win
        if sets_to_win is None:
            sets_to_win = self.defaults.sets_to_win

        configuration = MatchConfiguration(
            mode=mode,
            starting_player_id=starting,
            legs_per_set=legs_per_set,
            sets_to_win=sets_to_win,
        )
        players = [
            PlayerLegState(
                player_id=entry.player_id,
                display_name=entry.display_name,
                checkout_mode=entry.checkout_mode or self.defaults.checkout_mode,
                score=starting_score(mode),
            )
            for entry in request.players
        ]
        match = DartsMatch(f"match-{uuid.uuid4()}", configuration, players)
        await self.repository.save(match)
        logger.info(
            "Created match %s (%s, %d player(s))", match.match_id, mode, len(players)
        )
        return match_state(match)

    async def register_turn(self, match_id: str, points: int, final_dart_multiplier: int) -> dict:
        async with self._locks.hold(match_id):
            match = await self._load(match_id)
            previous_winner = match.winner_player_id
            match.register_turn(points, final_dart_multiplier)
            return await self._commit(match, previous_winner)

    async def register_cricket_turn(self, match_id: str, target_number: int, multiplier: int) -> dict:
        async with self._locks.hold(match_id):
            match = await self._load(match_id)
            previous_winner = match.winner_player_id
            match.register_cricket_turn(target_number, multiplier)
            return await self._commit(match, previous_winner)

    async def resolve_bull_off(self, match_id: str, winner_player_id: str) -> dict:
        async with self._locks.hold(match_id):
            match = await self._load(match_id)
            previous_winner = match.winner_player_id
            match.resolve_bull_off_winner(winner_player_id)
            return await self._commit(match, previous_winner)

    async def get_match_state(self, match_id: str) -> dict:
        return match_state(await self._load(match_id))

    async def get_match(self, match_id: str) -> DartsMatch:
        return await self._load(match_id)

    async def list_matches(self) -> list[dict]:
        return [match_state(m) for m in await self.repository.find_all()]

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    async def _load(self, match_id: str) -> DartsMatch:
        match = await self.repository.find_by_id(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        return match

    async def _commit(self, match: DartsMatch, previous_winner: str | None) -> dict:
        if previous_winner is None and match.winner_player_id is not None:
            losers = [pid for pid in match.player_ids if pid != match.winner_player_id]
            if losers:
                self.ratings.apply_result(match.winner_player_id, losers)

        await self.repository.save(match)
        for event in match.take_events():
            self._publish(event)
        return match_state(match)

    def _publish(self, event: MatchEvent) -> None:
        logger.info(
            "%s match=%s winner=%s leg=%d",
            event.event_name,
            event.match_id,
            event.winner_player_id,
            event.leg_number,
        )
        for sink in self.sinks:
            sink(event)


# --------------------------------------------------------------------------- #
# Tournaments                                                                  #
# --------------------------------------------------------------------------- #

class TournamentService:
    def __init__(
        self,
        repository: Repository[Tournament],
        match_service: MatchService | None = None,
        ratings: RatingBook | None = None,
        defaults: TournamentDefaults | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.repository = repository
        self.match_service = match_service
        self.ratings = ratings
        self.defaults = defaults or TournamentDefaults()
        self.rng = rng
        self._locks = KeyedLocks()

    async def create_tournament(self, request: CreateTournamentRequest) -> dict:
        settings = request.settings or TournamentSettings(
            bye_placement=self.defaults.bye_placement,
            seeding_mode=self.defaults.seeding_mode,
            default_legs_per_set=self.defaults.legs_per_set,
            default_sets_to_win=self.defaults.sets_to_win,
            allow_round_mode_switch=self.defaults.allow_round_mode_switch,
        )
        rating_of = self.ratings.peek if self.ratings is not None else None

        tournament = create_tournament(
            f"tournament-{uuid.uuid4()}",
            request.name,
            request.participants,
            request.format,
            request.round_modes,
            settings,
            rng=self.rng,
            rating_of=rating_of,
        )
        await self.repository.save(tournament)
        logger.info(
            "Created tournament %s %r (%s, %d participant(s))",
            tournament.tournament_id,
            tournament.name,
            tournament.format,
            len(request.participants),
        )
        return tournament_state(tournament)

    async def list_tournaments(self) -> list[dict]:
        return [tournament_state(t) for t in await self.repository.find_all()]

    async def get_tournament_state(self, tournament_id: str) -> dict:
        return tournament_state(await self._load(tournament_id))

    async def set_round_mode(self, tournament_id: str, round_number: int, mode: GameMode) -> dict:
        async with self._locks.hold(tournament_id):
            tournament = await self._load(tournament_id)
            tournament.set_round_mode(round_number, mode)
            await self.repository.save(tournament)
            return tournament_state(tournament)

    async def link_fixture_match(
        self, tournament_id: str, round_number: int, fixture_index: int, match_id: str
    ) -> dict:
        async with self._locks.hold(tournament_id):
            tournament = await self._load(tournament_id)
            tournament.link_fixture_match(round_number, fixture_index, match_id)
            await self.repository.save(tournament)
            return tournament_state(tournament)

    async def record_winner(
        self,
        tournament_id: str,
        round_number: int,
        fixture_index: int,
        winner_player_id: str,
        result_label: str | None = None,
    ) -> dict:
        async with self._locks.hold(tournament_id):
            tournament = await self._load(tournament_id)
            tournament.record_fixture_winner(round_number, fixture_index, winner_player_id, result_label)
            tournament.resolve_auto_byes()
            await self.repository.save(tournament)
            return tournament_state(tournament)

    async def start_fixture_match(
        self,
        tournament_id: str,
        round_number: int,
        fixture_index: int,
        display_names: dict[str, str] | None = None,
    ) -> dict:
        """
        Create a match for a start-ready fixture and link it.

        The match uses the round's game mode and the tournament's default
        legs/sets.  Returns the new match state.
        """
        if self.match_service is None:
            raise RuntimeError("TournamentService was created without a MatchService")

        async with self._locks.hold(tournament_id):
            tournament = await self._load(tournament_id)
            fixture = tournament.fixture(round_number, fixture_index)
            if fixture.linked_match_id is not None:
                raise FixtureAlreadyLinkedError()
            if fixture.is_decided:
                raise FixtureAlreadyDecidedError()
            if not fixture.is_start_ready:
                raise FixtureNotReadyError()

            names = display_names or {}
            request = CreateMatchRequest(
                players=[
                    PlayerEntry(pid, names.get(pid, pid)) for pid in fixture.sides
                ],
                mode=tournament.round(round_number).mode,
                legs_per_set=tournament.settings.default_legs_per_set,
                sets_to_win=tournament.settings.default_sets_to_win,
            )
            state = await self.match_service.create_match(request)
            tournament.link_fixture_match(round_number, fixture_index, state["match_id"])
            await self.repository.save(tournament)
            return state

    async def complete_linked_fixtures(self, tournament_id: str) -> int:
        """
        Record the winner of every linked fixture whose match has finished.

        All linked matches are looked up before the tournament is touched.
        A link to a match that no longer exists (matches are not persisted)
        is logged and skipped; its winner can still be recorded by hand.
        Returns the number of fixtures decided by this call.
        """
        if self.match_service is None:
            return 0

        async with self._locks.hold(tournament_id):
            tournament = await self._load(tournament_id)

            outcomes: list[tuple[int, int, str]] = []
            for entry in tournament.rounds:
                for index, fixture in enumerate(entry.fixtures):
                    if fixture.is_decided or fixture.linked_match_id is None:
                        continue
                    try:
                        match = await self.match_service.get_match(fixture.linked_match_id)
                    except MatchNotFoundError:
                        logger.warning(
                            "Tournament %s: R%d fixture %d links to unknown match %s",
                            tournament_id,
                            entry.round_number,
                            index,
                            fixture.linked_match_id,
                        )
                        continue
                    if match.winner_player_id is not None:
                        outcomes.append((entry.round_number, index, match.winner_player_id))

            for round_number, index, winner in outcomes:
                tournament.record_fixture_winner(round_number, index, winner)
            if outcomes:
                tournament.resolve_auto_byes()
                await self.repository.save(tournament)
            return len(outcomes)

    async def _load(self, tournament_id: str) -> Tournament:
        tournament = await self.repository.find_by_id(tournament_id)
        if tournament is None:
            raise TournamentNotFoundError(tournament_id)
        return tournament
