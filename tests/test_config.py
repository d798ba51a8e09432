import tempfile
import unittest
from pathlib import Path

from dartsclub.config import Config, load_config


class LoadConfigTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(tempfile.gettempdir()) / "no-such-dartsclub-config.yaml")

    def test_empty_file_gives_defaults(self) -> None:
        self.assertEqual(load_config(self._write("")), Config())

    def test_full_file(self) -> None:
        path = self._write(
            "match:\n"
            "  mode: X01_301\n"
            "  checkout_mode: MASTER_OUT\n"
            "  legs_per_set: 3\n"
            "tournament:\n"
            "  bye_placement: PLAY_IN\n"
            "  seeding_mode: RANKING\n"
            "  allow_round_mode_switch: false\n"
            "rating:\n"
            "  k_factor: 24\n"
            "storage:\n"
            "  tournament_file: ./data/t.json\n"
            "logging:\n"
            "  level: debug\n"
            "  file: null\n"
        )
        config = load_config(path)

        self.assertEqual(config.match.mode, "X01_301")
        self.assertEqual(config.match.checkout_mode, "MASTER_OUT")
        self.assertEqual(config.match.legs_per_set, 3)
        self.assertEqual(config.match.sets_to_win, 1)
        self.assertEqual(config.tournament.bye_placement, "PLAY_IN")
        self.assertEqual(config.tournament.seeding_mode, "RANKING")
        self.assertFalse(config.tournament.allow_round_mode_switch)
        self.assertEqual(config.rating.k_factor, 24)
        self.assertEqual(config.rating.initial_rating, 1200)
        self.assertEqual(config.storage.tournament_file_path, Path("./data/t.json"))
        self.assertEqual(config.logging.level, "DEBUG")
        self.assertIsNone(config.logging.file)

    def test_unknown_mode(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("match:\n  mode: AROUND_THE_CLOCK\n"))

    def test_unknown_bye_placement(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("tournament:\n  bye_placement: EVERYWHERE\n"))

    def test_non_positive_legs(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("tournament:\n  legs_per_set: 0\n"))

    def test_section_must_be_a_mapping(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("match: 5\n"))

    def test_unknown_logging_level(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("logging:\n  level: LOUD\n"))

    def test_in_memory_storage_by_default(self) -> None:
        self.assertIsNone(Config().storage.tournament_file_path)
