"""
Knock-out (single-elimination) bracket builder.

Rules:
- The draw is padded to the next power of two; the padding slots are BYEs.
- Round 1 pairs seeded slots (0, 1), (2, 3), …; every later round starts as
  TBD vs TBD and is filled by the progression engine as winners arrive.
- Bye placement (configurable):
    "ROUND_1": byes sit at the tail of round 1, one per fixture, so the
        last participants in seed order advance without playing.
    "DISTRIBUTED": byes are spread evenly across the slot sequence.
    "PLAY_IN": the top seeds qualify directly; everybody else plays a
        qualifying fixture whose winner meets a direct qualifier.
- A BYE never faces another BYE and every participant gets exactly one slot.
"""

from __future__ import annotations

import logging
import math

from dartsclub.legs import GameMode
from dartsclub.tournaments.base import (
    BYE,
    TBD,
    ByePlacement,
    TournamentFixture,
    TournamentRound,
    round_mode,
)

logger = logging.getLogger(__name__)


def build_single_elimination(
    participants: list[str],
    round_modes: list[GameMode] | None = None,
    bye_placement: ByePlacement = "ROUND_1",
) -> list[TournamentRound]:
    """
    Build the full bracket: round 1 seeded, later rounds all TBD.

    Participants must already be in seed order (see seeding.py).
    """
    if len(participants) < 2:
        raise ValueError("Knockout tournament requires at least 2 participants.")

    slots = seed_bracket(participants, bye_placement)
    rounds: list[TournamentRound] = []

    round_number = 1
    fixture_count = len(slots) // 2
    first_round = [
        TournamentFixture(home_player_id=slots[i * 2], away_player_id=slots[i * 2 + 1])
        for i in range(fixture_count)
    ]
    rounds.append(TournamentRound(round_number, round_mode(round_modes, round_number), first_round))

    while fixture_count > 1:
        round_number += 1
        fixture_count //= 2
        rounds.append(
            TournamentRound(
                round_number,
                round_mode(round_modes, round_number),
                [TournamentFixture(home_player_id=TBD, away_player_id=TBD) for _ in range(fixture_count)],
            )
        )

    logger.debug(
        "Built %d-slot bracket (%d rounds, %s byes) for %d participants",
        len(slots),
        len(rounds),
        len(slots) - len(participants),
        len(participants),
    )
    return rounds


# ------------------------------------------------------------------ #
# Bracket helpers                                                     #
# ------------------------------------------------------------------ #

def _next_power_of_two(n: int) -> int:
    return 1 << math.ceil(math.log2(max(n, 2)))


def seed_bracket(participants: list[str], bye_placement: ByePlacement = "ROUND_1") -> list[str]:
    """Return the round-1 slot sequence (length = next power of two)."""
    slot_count = _next_power_of_two(len(participants))
    bye_count = slot_count - len(participants)

    if bye_count == 0:
        return list(participants)

    match bye_placement:
        case "ROUND_1":
            slots = _tail_byes(participants, slot_count, bye_count)
        case "DISTRIBUTED":
            slots = _distributed_byes(participants, slot_count, bye_count)
        case "PLAY_IN":
            slots = _play_in_byes(participants, slot_count, bye_count)
        case _:
            raise ValueError(
                f"Unknown bye placement: {bye_placement!r}. "
                "Valid placements: ROUND_1, DISTRIBUTED, PLAY_IN"
            )

    assert len(slots) == slot_count
    return slots


def _tail_byes(participants: list[str], slot_count: int, bye_count: int) -> list[str]:
    """Full pairings first, then the remaining participants each facing a BYE."""
    paired = slot_count - 2 * bye_count
    slots = list(participants[:paired])
    for participant in participants[paired:]:
        slots.extend((participant, BYE))
    return slots


def _distributed_byes(participants: list[str], slot_count: int, bye_count: int) -> list[str]:
    bye_every = max(2, slot_count // bye_count)
    remaining = iter(participants)
    left = len(participants)
    byes_left = bye_count
    slots: list[str] = []

    for index in range(slot_count):
        if left == 0 or (index % bye_every == 1 and byes_left > 0):
            slots.append(BYE)
            byes_left -= 1
        else:
            slots.append(next(remaining))
            left -= 1
    return slots


def _play_in_byes(participants: list[str], slot_count: int, bye_count: int) -> list[str]:
    """
    Direct qualifiers (top seeds) alternate with qualifying fixtures, so that
    in round 2 each qualifier winner meets a direct qualifier where possible.
    """
    direct = [(participant, BYE) for participant in participants[:bye_count]]
    qualifiers = participants[bye_count:]
    qualifying = [(qualifiers[i], qualifiers[i + 1]) for i in range(0, len(qualifiers), 2)]

    fixtures: list[tuple[str, str]] = []
    while direct or qualifying:
        if direct:
            fixtures.append(direct.pop(0))
        if qualifying:
            fixtures.append(qualifying.pop(0))
    return [slot for fixture in fixtures for slot in fixture]


def _round_label(round_num: int, match_num: int, matches_in_round: int) -> str:
    """Return a human-readable fixture label."""
    if matches_in_round == 1 and match_num == 1:
        return "F"     # Final
    if matches_in_round == 2:
        return f"SF-{match_num}"   # Semi-final
    if matches_in_round == 4:
        return f"QF-{match_num}"   # Quarter-final
    return f"R{round_num}-M{match_num}"
