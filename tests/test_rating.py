"""Tests for the Elo update rule and the RatingBook."""

from __future__ import annotations

import unittest

from dartsclub.rating import RatingBook, calculate_new_ratings, expected_score


class TestCalculateNewRatings(unittest.TestCase):

    def test_equal_ratings(self):
        update = calculate_new_ratings(1200, 1200)
        self.assertEqual(update.winner, 1216)
        self.assertEqual(update.loser, 1184)

    def test_favourite_gains_less(self):
        update = calculate_new_ratings(1400, 1200)
        self.assertEqual(update.winner, 1408)
        self.assertEqual(update.loser, 1192)

    def test_underdog_gains_more(self):
        update = calculate_new_ratings(1200, 1400)
        self.assertEqual(update.winner, 1224)
        self.assertEqual(update.loser, 1376)

    def test_custom_k_factor(self):
        update = calculate_new_ratings(1200, 1200, k_factor=20)
        self.assertEqual(update.winner, 1210)
        self.assertEqual(update.loser, 1190)

    def test_expected_scores_sum_to_one(self):
        self.assertAlmostEqual(expected_score(1500, 1300) + expected_score(1300, 1500), 1.0)


class TestRatingBook:

    def test_new_players_start_at_the_initial_rating(self):
        book = RatingBook()
        assert book.rating("anna") == 1200
        assert book.snapshot() == {"anna": 1200}

    def test_peek_does_not_seed(self):
        book = RatingBook(initial_rating=1000)
        assert book.peek("anna") == 1000
        assert book.snapshot() == {}

    def test_apply_result_two_players(self):
        book = RatingBook()
        changed = book.apply_result("anna", ["ben"])
        assert changed == {"anna": 1216, "ben": 1184}
        assert book.snapshot() == {"anna": 1216, "ben": 1184}

    def test_apply_result_uses_pre_match_ratings_for_every_pairing(self):
        book = RatingBook()
        changed = book.apply_result("anna", ["ben", "cleo"])
        assert changed == {"anna": 1232, "ben": 1184, "cleo": 1184}

    def test_existing_ratings_are_used(self):
        book = RatingBook(ratings={"anna": 1400})
        book.apply_result("anna", ["ben"])
        assert book.peek("anna") == 1408
        assert book.peek("ben") == 1192


if __name__ == "__main__":
    unittest.main()
