"""
Tests for cricket scoring: the per-throw scorer on its own, and the cricket
variant of DartsMatch built on top of it.
"""

from __future__ import annotations

import unittest

from dartsclub.board import CricketBoardState
from dartsclub.cricket import CricketScorer, ThrowResult, effective_multiplier
from dartsclub.legs import MatchConfiguration, PlayerLegState
from dartsclub.match import DartsMatch


def make_scorer() -> tuple[CricketBoardState, CricketScorer]:
    board = CricketBoardState(["anna", "ben"])
    return board, CricketScorer(board)


def make_cricket_match() -> DartsMatch:
    players = [
        PlayerLegState(player_id=pid, display_name=pid.title(), checkout_mode="DOUBLE_OUT", score=501)
        for pid in ("anna", "ben")
    ]
    configuration = MatchConfiguration(mode="CRICKET", starting_player_id="anna")
    return DartsMatch("match-c", configuration, players)


class TestCricketScorer(unittest.TestCase):

    def test_overflow_scores_on_an_open_number(self):
        board, scorer = make_scorer()
        board.apply_mark("anna", 20, 3)

        result = scorer.apply_throw("anna", ["ben"], 20, 3)

        self.assertEqual(result.awarded_points, 60)
        self.assertEqual(result.overflow_marks, 3)
        self.assertEqual(board.marks("anna", 20), 3)

    def test_no_points_once_every_opponent_closed_the_number(self):
        board, scorer = make_scorer()
        board.apply_mark("anna", 20, 3)
        board.apply_mark("ben", 20, 3)

        result = scorer.apply_throw("anna", ["ben"], 20, 3)

        self.assertEqual(result.awarded_points, 0)
        self.assertEqual(result.overflow_marks, 3)

    def test_partial_overflow(self):
        board, scorer = make_scorer()
        board.apply_mark("anna", 19, 2)

        result = scorer.apply_throw("anna", ["ben"], 19, 3)

        self.assertEqual(result.overflow_marks, 2)
        self.assertEqual(result.awarded_points, 38)

    def test_triple_bull_counts_as_double(self):
        board, scorer = make_scorer()
        result = scorer.apply_throw("anna", ["ben"], 25, 3)

        self.assertEqual(board.marks("anna", 25), 2)
        self.assertEqual(result.awarded_points, 0)
        self.assertEqual(effective_multiplier(25, 3), 2)
        self.assertEqual(effective_multiplier(20, 3), 3)

    def test_invalid_target_is_ignored(self):
        board, scorer = make_scorer()
        result = scorer.apply_throw("anna", ["ben"], 14, 3)

        self.assertEqual(result, ThrowResult(0, 0, False))
        self.assertEqual(board.marks_for("anna"), {t: 0 for t in (15, 16, 17, 18, 19, 20, 25)})

    def test_closing_the_last_target_reports_a_closed_board(self):
        board, scorer = make_scorer()
        for target in (15, 16, 17, 18, 19, 20):
            board.apply_mark("anna", target, 3)
        board.apply_mark("anna", 25, 2)

        result = scorer.apply_throw("anna", ["ben"], 25, 1)

        self.assertTrue(result.player_closed_board)
        self.assertTrue(board.is_closed("anna"))
        self.assertFalse(board.is_closed("ben"))


class TestCricketBoardState:

    def test_marks_are_capped_at_three(self):
        board = CricketBoardState(["anna"])
        board.apply_mark("anna", 15, 2)
        board.apply_mark("anna", 15, 3)
        assert board.marks("anna", 15) == 3
        assert board.is_target_closed("anna", 15)

    def test_unknown_player_is_ignored(self):
        board = CricketBoardState(["anna"])
        board.apply_mark("zoe", 20, 3)
        assert board.marks("zoe", 20) == 0
        assert not board.is_closed("zoe")


class TestCricketMatch(unittest.TestCase):

    def _throw_all(self, match: DartsMatch, throws: list[tuple[int, int]]) -> None:
        for target, multiplier in throws:
            match.register_cricket_turn(target, multiplier)

    def test_closed_board_wins_only_when_not_behind(self):
        match = make_cricket_match()

        # anna closes one number per throw while ben hammers single 20s.
        self._throw_all(match, [
            (15, 3), (20, 1),
            (16, 3), (20, 1),
            (17, 3), (20, 1),
            (18, 3), (20, 1),    # ben: first overflow, 20 points
            (19, 3), (20, 1),    # ben: 40 points
            (20, 3), (20, 1),    # anna closes 20, ben scores nothing more
            (25, 3), (20, 1),    # triple bull is two marks
            (25, 1),             # anna closes the board but trails 0-40
        ])

        self.assertIsNone(match.winner_player_id)
        self.assertEqual(match.cricket_score("anna"), 0)
        self.assertEqual(match.cricket_score("ben"), 40)
        self.assertEqual(match.active_player.player_id, "ben")

        self._throw_all(match, [(20, 1), (15, 3)])   # anna overflows 15 for 45

        self.assertEqual(match.winner_player_id, "anna")
        self.assertEqual(match.cricket_score("anna"), 45)
        events = match.take_events()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].winner_player_id, "anna")

    def test_each_throw_passes_the_turn(self):
        match = make_cricket_match()
        match.register_cricket_turn(20, 1)
        self.assertEqual(match.active_player.player_id, "ben")
        self.assertEqual(match.cricket_marks("anna", 20), 1)

    def test_x01_turn_is_ignored_on_a_cricket_match(self):
        match = make_cricket_match()
        with self.assertLogs("dartsclub.match", level="WARNING"):
            match.register_turn(60, 1)
        self.assertEqual(match.player("anna").score, 501)
        self.assertEqual(match.active_player.player_id, "anna")


if __name__ == "__main__":
    unittest.main()
