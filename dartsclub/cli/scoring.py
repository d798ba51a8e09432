"""
Interactive scoring loop shared by the match and tournament entry points.

Each visit is typed in as the points scored.  When a visit would finish the
leg, the multiplier of the final dart is asked for so the checkout rule can
be enforced.  In cricket every throw is entered as "<target> <multiplier>",
e.g. "20 3" or "25 2"; "0" records a miss.

Commands at any prompt:
    bull <n>   decide the match by bull-off (player number n)
    q          stop scoring, leaving the match unfinished
"""

from __future__ import annotations

from rich.prompt import IntPrompt, Prompt

from dartsclub.cli.display import (
    console,
    display_match_over,
    display_match_start,
    display_match_state,
)
from dartsclub.errors import DartsClubError
from dartsclub.services import MatchService


async def score_match(service: MatchService, state: dict) -> dict:
    """Prompt for visits until the match is won or abandoned; returns the last state."""
    display_match_start(state)

    while state["winner_player_id"] is None:
        display_match_state(state)
        active = next(p for p in state["players"] if p["player_id"] == state["active_player_id"])
        raw = Prompt.ask(f"[bold]{active['display_name']}[/]").strip().lower()

        if raw == "q":
            console.print("[yellow]Match left unfinished.[/]")
            return state

        try:
            if raw.startswith("bull"):
                state = await _bull_off(service, state, raw)
            elif state["mode"] == "CRICKET":
                state = await _cricket_throw(service, state, raw)
            else:
                state = await _x01_visit(service, state, active, raw)
        except DartsClubError as exc:
            console.print(f"  [red]✗[/] {exc}")
        except (ValueError, IndexError):
            console.print("  [red]Could not read that, try again.[/]")

    display_match_over(state)
    return state


async def _x01_visit(service: MatchService, state: dict, active: dict, raw: str) -> dict:
    points = int(raw)
    if not 0 <= points <= 180:
        raise ValueError(raw)

    multiplier = 1
    if points == active["score"]:
        multiplier = IntPrompt.ask("  Final dart multiplier", choices=["1", "2", "3"], default=2)
    return await service.register_turn(state["match_id"], points, multiplier)


async def _cricket_throw(service: MatchService, state: dict, raw: str) -> dict:
    parts = raw.split()
    target = int(parts[0])
    multiplier = int(parts[1]) if len(parts) > 1 else 1
    return await service.register_cricket_turn(state["match_id"], target, multiplier)


async def _bull_off(service: MatchService, state: dict, raw: str) -> dict:
    number = int(raw.removeprefix("bull").strip())
    if number < 1:
        raise IndexError(number)
    player_id = state["players"][number - 1]["player_id"]
    return await service.resolve_bull_off(state["match_id"], player_id)
