"""
Participant seeding: the order the bracket builder receives participants in.

    MANUAL: keep the order the organiser entered (first = seed 1)
    RANDOM: shuffle; pass a random.Random for reproducible draws
    RANKING: highest rating first; equal ratings keep the entered order
"""

from __future__ import annotations

import random
from typing import Callable

from dartsclub.tournaments.base import SeedingMode


def seed_participants(
    participants: list[str],
    seeding_mode: SeedingMode,
    *,
    rng: random.Random | None = None,
    rating_of: Callable[[str], int] | None = None,
) -> list[str]:
    seeded = list(participants)
    match seeding_mode:
        case "MANUAL":
            return seeded
        case "RANDOM":
            (rng or random.Random()).shuffle(seeded)
            return seeded
        case "RANKING":
            if rating_of is None:
                raise ValueError("RANKING seeding needs a rating lookup.")
            # sorted() is stable, so ties keep the entered order.
            return sorted(seeded, key=lambda pid: -rating_of(pid))
        case _:
            raise ValueError(
                f"Unknown seeding mode: {seeding_mode!r}. Valid modes: RANDOM, MANUAL, RANKING"
            )
