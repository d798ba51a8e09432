"""
Tests for the bracket builders: slot seeding and bye placement, round
construction for knock-out and round robin, and participant seeding.
"""

from __future__ import annotations

import random
import unittest

from dartsclub.tournaments.base import BYE, TBD
from dartsclub.tournaments.knockout import (
    _next_power_of_two,
    _round_label,
    build_single_elimination,
    seed_bracket,
)
from dartsclub.tournaments.round_robin import build_round_robin
from dartsclub.tournaments.seeding import seed_participants


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def make_participants(n: int) -> list[str]:
    names = [
        "alpha", "bravo", "charlie", "delta",
        "echo", "foxtrot", "golf", "hotel",
        "india", "juliet", "kilo", "lima",
        "mike", "november", "oscar", "papa",
        "quebec",
    ]
    return names[:n]


def pairs(slots: list[str]) -> list[tuple[str, str]]:
    return [(slots[i], slots[i + 1]) for i in range(0, len(slots), 2)]


# --------------------------------------------------------------------------- #
# Unit tests: bracket helpers                                                  #
# --------------------------------------------------------------------------- #

class TestNextPowerOfTwo(unittest.TestCase):
    def test_exact_powers(self):
        for n in [2, 4, 8, 16]:
            self.assertEqual(_next_power_of_two(n), n)

    def test_non_powers(self):
        self.assertEqual(_next_power_of_two(3), 4)
        self.assertEqual(_next_power_of_two(5), 8)
        self.assertEqual(_next_power_of_two(9), 16)

    def test_minimum_is_two(self):
        self.assertEqual(_next_power_of_two(1), 2)


class TestRoundLabel(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(_round_label(3, 1, 1), "F")
        self.assertEqual(_round_label(2, 2, 2), "SF-2")
        self.assertEqual(_round_label(1, 3, 4), "QF-3")
        self.assertEqual(_round_label(1, 2, 8), "R1-M2")


class TestSeedBracket(unittest.TestCase):

    def test_no_byes_keeps_seed_order(self):
        participants = make_participants(4)
        self.assertEqual(seed_bracket(participants), participants)

    def test_round_1_byes_sit_at_the_tail(self):
        slots = seed_bracket(make_participants(5), "ROUND_1")
        self.assertEqual(
            pairs(slots),
            [("alpha", "bravo"), ("charlie", BYE), ("delta", BYE), ("echo", BYE)],
        )

    def test_distributed_byes_are_spread(self):
        slots = seed_bracket(make_participants(5), "DISTRIBUTED")
        self.assertEqual(
            pairs(slots),
            [("alpha", BYE), ("bravo", BYE), ("charlie", BYE), ("delta", "echo")],
        )

    def test_play_in_alternates_direct_and_qualifying_fixtures(self):
        slots = seed_bracket(make_participants(6), "PLAY_IN")
        self.assertEqual(
            pairs(slots),
            [("alpha", BYE), ("charlie", "delta"), ("bravo", BYE), ("echo", "foxtrot")],
        )

    def test_every_placement_keeps_all_participants_and_never_pairs_two_byes(self):
        for placement in ("ROUND_1", "DISTRIBUTED", "PLAY_IN"):
            for n in range(2, 18):
                with self.subTest(placement=placement, n=n):
                    participants = make_participants(n)
                    slots = seed_bracket(participants, placement)

                    self.assertEqual(len(slots), _next_power_of_two(n))
                    self.assertEqual(sorted(s for s in slots if s != BYE), sorted(participants))
                    self.assertNotIn((BYE, BYE), pairs(slots))

    def test_unknown_placement(self):
        with self.assertRaises(ValueError):
            seed_bracket(make_participants(3), "SOMEWHERE")


# --------------------------------------------------------------------------- #
# Round construction                                                           #
# --------------------------------------------------------------------------- #

class TestBuildSingleElimination(unittest.TestCase):

    def test_five_players_round_1_shape(self):
        rounds = build_single_elimination(make_participants(5))

        self.assertEqual(len(rounds), 3)
        self.assertEqual([len(r.fixtures) for r in rounds], [4, 2, 1])
        self.assertEqual(sum(1 for f in rounds[0].fixtures if f.has_bye), 3)

    def test_later_rounds_start_as_tbd(self):
        rounds = build_single_elimination(make_participants(8))
        for entry in rounds[1:]:
            for fixture in entry.fixtures:
                self.assertEqual(fixture.sides, (TBD, TBD))
                self.assertIsNone(fixture.winner_player_id)

    def test_round_modes_with_default_fallback(self):
        rounds = build_single_elimination(make_participants(8), ["X01_301", "CRICKET"])
        self.assertEqual([r.mode for r in rounds], ["X01_301", "CRICKET", "X01_501"])
        self.assertEqual([r.round_number for r in rounds], [1, 2, 3])

    def test_two_participants_is_a_final(self):
        rounds = build_single_elimination(["alpha", "bravo"])
        self.assertEqual(len(rounds), 1)
        self.assertEqual(rounds[0].fixtures[0].sides, ("alpha", "bravo"))

    def test_requires_two_participants(self):
        with self.assertRaises(ValueError):
            build_single_elimination(["alpha"])


class TestBuildRoundRobin:

    def test_four_players_play_six_fixtures_in_one_round(self):
        rounds = build_round_robin(make_participants(4))
        assert len(rounds) == 1
        assert len(rounds[0].fixtures) == 6
        assert rounds[0].mode == "X01_501"

    def test_everyone_meets_everyone_once(self):
        participants = make_participants(5)
        fixtures = build_round_robin(participants, ["CRICKET"])[0].fixtures
        meetings = {frozenset(f.sides) for f in fixtures}
        assert len(meetings) == len(fixtures) == 10


class TestBuildRoundRobinValidation(unittest.TestCase):
    def test_requires_two_participants(self):
        with self.assertRaises(ValueError):
            build_round_robin(["alpha"])


# --------------------------------------------------------------------------- #
# Seeding                                                                      #
# --------------------------------------------------------------------------- #

class TestSeedParticipants(unittest.TestCase):

    def test_manual_keeps_order(self):
        participants = make_participants(5)
        self.assertEqual(seed_participants(participants, "MANUAL"), participants)

    def test_random_is_reproducible_with_a_seeded_rng(self):
        participants = make_participants(8)
        expected = list(participants)
        random.Random(7).shuffle(expected)

        seeded = seed_participants(participants, "RANDOM", rng=random.Random(7))

        self.assertEqual(seeded, expected)
        self.assertEqual(participants, make_participants(8))

    def test_ranking_orders_by_rating_and_keeps_ties_stable(self):
        ratings = {"alpha": 1200, "bravo": 1350, "charlie": 1200, "delta": 1500}
        seeded = seed_participants(make_participants(4), "RANKING", rating_of=ratings.__getitem__)
        self.assertEqual(seeded, ["delta", "bravo", "alpha", "charlie"])

    def test_ranking_needs_a_rating_lookup(self):
        with self.assertRaises(ValueError):
            seed_participants(make_participants(4), "RANKING")

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            seed_participants(make_participants(4), "ALPHABETICAL")


if __name__ == "__main__":
    unittest.main()
