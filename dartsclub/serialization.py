"""
Read models and JSON snapshots.

match_state() / tournament_state() build the plain-dict views handed to any
presentation layer.  tournament_to_snapshot() / tournament_from_snapshot()
are the persisted form used by the file repository.  to_json_dict() turns an
event dataclass into a JSON-safe dict tagged with its "type".
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from typing import Any

from dartsclub.board import CRICKET_TARGETS
from dartsclub.match import DartsMatch
from dartsclub.tournaments.base import (
    TournamentFixture,
    TournamentRound,
    TournamentSettings,
)
from dartsclub.tournaments.progression import Tournament


def to_json_dict(obj: Any) -> Any:
    """
    Convert dataclasses (recursively) to dicts with a "type" key at every
    level, lists/tuples to lists and datetimes to ISO strings.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        result = {"type": type(obj).__name__}
        for f in dataclasses.fields(obj):
            result[f.name] = to_json_dict(getattr(obj, f.name))
        return result
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {key: to_json_dict(value) for key, value in obj.items()}
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return obj


def to_json(data: Any) -> str:
    """json.dumps with datetime → ISO-string support."""
    def _default(obj: object) -> str:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
    return json.dumps(data, default=_default, indent=2)


# --------------------------------------------------------------------------- #
# Match                                                                        #
# --------------------------------------------------------------------------- #

def match_state(match: DartsMatch) -> dict:
    scoreboard = match.scoreboard
    return {
        "match_id": match.match_id,
        "mode": match.mode,
        "legs_per_set": match.configuration.legs_per_set,
        "sets_to_win": match.configuration.sets_to_win,
        "leg_number": match.leg_number,
        "winner_player_id": match.winner_player_id,
        "active_player_id": match.active_player.player_id,
        "players": [
            {
                "player_id": p.player_id,
                "display_name": p.display_name,
                "checkout_mode": p.checkout_mode,
                "score": p.score,
                "cricket_score": match.cricket_score(p.player_id),
                "average": round(p.three_dart_average, 2),
                "checkout_percentage": round(p.checkout_percentage, 2),
                "highest_turn_score": p.highest_turn_score,
                "darts_thrown": p.darts_thrown,
                "cricket_marks": {
                    _mark_key(target): match.cricket_marks(p.player_id, target)
                    for target in CRICKET_TARGETS
                },
            }
            for p in match.players
        ],
        "scoreboard": [
            {
                "player_id": pid,
                "legs": scoreboard.legs(pid),
                "sets": scoreboard.sets(pid),
                "total_legs": scoreboard.total_legs(pid),
            }
            for pid in match.player_ids
        ],
        "leg_results": [dataclasses.asdict(result) for result in match.leg_results],
    }


def _mark_key(target: int) -> str:
    return "bull" if target == 25 else f"m{target}"


# --------------------------------------------------------------------------- #
# Tournament                                                                   #
# --------------------------------------------------------------------------- #

def tournament_state(tournament: Tournament) -> dict:
    state = tournament_to_snapshot(tournament)
    state["champion"] = tournament.resolve_champion()
    state["is_completed"] = tournament.is_completed()
    state["points_table"] = tournament.points_table()
    return state


def tournament_to_snapshot(tournament: Tournament) -> dict:
    return {
        "tournament_id": tournament.tournament_id,
        "name": tournament.name,
        "format": tournament.format,
        "settings": dataclasses.asdict(tournament.settings),
        "updated_at": tournament.updated_at.isoformat(),
        "rounds": [
            {
                "round_number": entry.round_number,
                "mode": entry.mode,
                "fixtures": [dataclasses.asdict(fixture) for fixture in entry.fixtures],
            }
            for entry in tournament.rounds
        ],
    }


def tournament_from_snapshot(data: dict) -> Tournament:
    """
    Rebuild a Tournament from tournament_to_snapshot() output.

    Raises:
        ValueError: the snapshot is missing required fields.
    """
    try:
        rounds = [
            TournamentRound(
                round_number=int(entry["round_number"]),
                mode=entry["mode"],
                fixtures=[TournamentFixture(**fixture) for fixture in entry["fixtures"]],
            )
            for entry in data["rounds"]
        ]
        return Tournament(
            tournament_id=data["tournament_id"],
            name=data["name"],
            format=data["format"],
            settings=TournamentSettings(**(data.get("settings") or {})),
            rounds=rounds,
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else None,
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid tournament snapshot: {exc}") from exc
