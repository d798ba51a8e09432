"""
Repositories for match and tournament aggregates.

All repositories share the same async contract:

    await repo.save(aggregate)
    await repo.find_by_id(id)   -> aggregate | None
    await repo.find_all()       -> list[aggregate]

InMemoryRepository keeps live aggregates in a dict.  FileTournamentRepository
additionally writes every tournament to a local JSON file so brackets survive
restarts.  This is a pragmatic store, not a durable database: a corrupt file
is logged and ignored.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, Generic, Protocol, TypeVar

from dartsclub.match import DartsMatch
from dartsclub.serialization import tournament_from_snapshot, tournament_to_snapshot
from dartsclub.tournaments.progression import Tournament

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Protocol[T]):
    async def save(self, aggregate: T) -> None: ...

    async def find_by_id(self, aggregate_id: str) -> T | None: ...

    async def find_all(self) -> list[T]: ...


class InMemoryRepository(Generic[T]):
    """Dict-backed store for local play and tests."""

    def __init__(self, key: Callable[[T], str]) -> None:
        self._key = key
        self._store: dict[str, T] = {}

    async def save(self, aggregate: T) -> None:
        self._store[self._key(aggregate)] = aggregate

    async def find_by_id(self, aggregate_id: str) -> T | None:
        return self._store.get(aggregate_id)

    async def find_all(self) -> list[T]:
        return list(self._store.values())


def in_memory_match_repository() -> InMemoryRepository[DartsMatch]:
    return InMemoryRepository(key=lambda match: match.match_id)


def in_memory_tournament_repository() -> InMemoryRepository[Tournament]:
    return InMemoryRepository(key=lambda tournament: tournament.tournament_id)


class FileTournamentRepository:
    """Tournament store persisted as a JSON list of snapshots."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._store: dict[str, Tournament] = {}
        self._hydrated = False
        # Guards the file: one read before any access, then one write at a time.
        self._lock = asyncio.Lock()

    async def save(self, tournament: Tournament) -> None:
        async with self._lock:
            await self._read_file()
            self._store[tournament.tournament_id] = tournament
            await self._flush()

    async def find_by_id(self, tournament_id: str) -> Tournament | None:
        await self._hydrate()
        return self._store.get(tournament_id)

    async def find_all(self) -> list[Tournament]:
        await self._hydrate()
        return list(self._store.values())

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    async def _hydrate(self) -> None:
        if self._hydrated:
            return
        async with self._lock:
            await self._read_file()

    async def _read_file(self) -> None:
        """Load the file once.  Caller holds self._lock."""
        if self._hydrated:
            return
        try:
            if not self.path.exists():
                return
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            loaded: dict[str, Tournament] = {}
            for entry in json.loads(raw):
                tournament = tournament_from_snapshot(entry)
                loaded[tournament.tournament_id] = tournament
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("Ignoring unreadable tournament file %s: %s", self.path, exc)
            return
        finally:
            self._hydrated = True
        self._store.update(loaded)
        logger.info("Loaded %d tournament(s) from %s", len(self._store), self.path)

    async def _flush(self) -> None:
        """Write every tournament.  Caller holds self._lock."""
        snapshots = [tournament_to_snapshot(t) for t in self._store.values()]
        payload = json.dumps(snapshots, indent=2)

        def _write() -> None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")

        await asyncio.to_thread(_write)
