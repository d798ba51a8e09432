import asyncio
import json
import tempfile
import unittest
from pathlib import Path

from dartsclub.serialization import tournament_to_snapshot
from dartsclub.storage import FileTournamentRepository, InMemoryRepository
from dartsclub.tournaments import create_tournament


class FileTournamentRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "data" / "tournaments.json"

    async def test_save_and_load_round_trip(self) -> None:
        tournament = create_tournament("t-1", "Club Night", ["anna", "ben", "cleo"])
        tournament.record_fixture_winner(1, 0, "ben", "2-1")
        tournament.link_fixture_match(2, 0, "match-final")

        await FileTournamentRepository(self.path).save(tournament)
        loaded = await FileTournamentRepository(self.path).find_by_id("t-1")

        self.assertIsNotNone(loaded)
        self.assertEqual(tournament_to_snapshot(loaded), tournament_to_snapshot(tournament))
        self.assertEqual(loaded.fixture(2, 0).sides, ("ben", "cleo"))

    async def test_every_save_is_written_through(self) -> None:
        repo = FileTournamentRepository(self.path)
        await repo.save(create_tournament("t-1", "One", ["anna", "ben"]))
        await repo.save(create_tournament("t-2", "Two", ["cleo", "dave"]))

        entries = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual([e["tournament_id"] for e in entries], ["t-1", "t-2"])

    async def test_missing_file_is_empty(self) -> None:
        repo = FileTournamentRepository(self.path)
        self.assertEqual(await repo.find_all(), [])
        self.assertIsNone(await repo.find_by_id("t-1"))

    async def test_invalid_json_is_ignored(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{bad json", encoding="utf-8")

        with self.assertLogs("dartsclub.storage", level="WARNING"):
            entries = await FileTournamentRepository(self.path).find_all()
        self.assertEqual(entries, [])

    async def test_invalid_snapshot_is_ignored(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps([{"name": "no id"}]), encoding="utf-8")

        with self.assertLogs("dartsclub.storage", level="WARNING"):
            entries = await FileTournamentRepository(self.path).find_all()
        self.assertEqual(entries, [])

    async def test_concurrent_reads_on_a_fresh_repository(self) -> None:
        await FileTournamentRepository(self.path).save(create_tournament("t-1", "One", ["anna", "ben"]))

        repo = FileTournamentRepository(self.path)
        first, second = await asyncio.gather(repo.find_by_id("t-1"), repo.find_by_id("t-1"))

        self.assertIsNotNone(first)
        self.assertIs(first, second)

    async def test_save_during_first_read_keeps_the_file(self) -> None:
        await FileTournamentRepository(self.path).save(create_tournament("t-1", "One", ["anna", "ben"]))

        repo = FileTournamentRepository(self.path)
        listed, _ = await asyncio.gather(
            repo.find_all(), repo.save(create_tournament("t-2", "Two", ["cleo", "dave"]))
        )

        self.assertEqual(listed[0].tournament_id, "t-1")
        entries = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(sorted(e["tournament_id"] for e in entries), ["t-1", "t-2"])

    async def test_concurrent_saves_are_all_written(self) -> None:
        repo = FileTournamentRepository(self.path)
        one = create_tournament("t-1", "One", ["anna", "ben"])
        two = create_tournament("t-2", "Two", ["cleo", "dave"])
        await asyncio.gather(repo.save(one), repo.save(two))

        one.record_fixture_winner(1, 0, "ben")
        await asyncio.gather(repo.save(one), repo.save(two))

        entries = {
            e["tournament_id"]: e for e in json.loads(self.path.read_text(encoding="utf-8"))
        }
        self.assertEqual(sorted(entries), ["t-1", "t-2"])
        self.assertEqual(entries["t-1"]["rounds"][0]["fixtures"][0]["winner_player_id"], "ben")


class InMemoryRepositoryTests(unittest.IsolatedAsyncioTestCase):
    async def test_save_replaces_by_key(self) -> None:
        repo: InMemoryRepository[dict] = InMemoryRepository(key=lambda item: item["id"])
        await repo.save({"id": "a", "v": 1})
        await repo.save({"id": "a", "v": 2})
        await repo.save({"id": "b", "v": 3})

        self.assertEqual(await repo.find_by_id("a"), {"id": "a", "v": 2})
        self.assertEqual(len(await repo.find_all()), 2)
        self.assertIsNone(await repo.find_by_id("c"))
