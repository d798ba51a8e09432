"""
Rich-based CLI consumer for match state and match events.

This is the only place where match output reaches the terminal.  The
services hand over plain state dicts (see dartsclub.serialization) and
drained MatchEvent objects; nothing here mutates a match.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dartsclub.events import LegWonEvent, MatchEvent

console = Console(legacy_windows=False)

_MARK_SYMBOLS = {0: "", 1: "/", 2: "X", 3: "Ⓧ"}
_CRICKET_COLUMNS = ("m15", "m16", "m17", "m18", "m19", "m20", "bull")


def display_event(event: MatchEvent) -> None:
    """Dispatch a MatchEvent to the appropriate display function."""
    match event:
        case LegWonEvent():
            console.print(
                f"  [green]✓[/] Leg {event.leg_number} won by [bold]{event.winner_player_id}[/]"
            )


def display_match_start(state: dict) -> None:
    names = "  vs  ".join(f"[bold white]{p['display_name']}[/]" for p in state["players"])
    format_line = f"{state['mode'].replace('_', ' ')}"
    if state["sets_to_win"] > 1 or state["legs_per_set"] > 1:
        format_line += f"  •  first to {state['sets_to_win']} set(s) of {state['legs_per_set']} leg(s)"

    console.print()
    console.print(
        Panel(
            f"{names}\n[dim]{format_line}[/]",
            title="[bold green] Darts Club [/]",
            border_style="green",
            expand=False,
        )
    )


def display_match_state(state: dict) -> None:
    if state["mode"] == "CRICKET":
        _cricket_table(state)
    else:
        _x01_table(state)


def display_match_over(state: dict) -> None:
    winner_id = state["winner_player_id"]
    names = {p["player_id"]: p["display_name"] for p in state["players"]}

    lines = [f"Winner: [bold]{names.get(winner_id, winner_id)}[/]"]
    for row in state["scoreboard"]:
        lines.append(
            f"[dim]{names.get(row['player_id'], row['player_id'])}: "
            f"{row['sets']} set(s), {row['total_legs']} leg(s)[/]"
        )

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Game Shot and the Match[/]",
            border_style="yellow",
            expand=False,
        )
    )


# --------------------------------------------------------------------------- #
# Tables                                                                       #
# --------------------------------------------------------------------------- #

def _x01_table(state: dict) -> None:
    legs = {row["player_id"]: row for row in state["scoreboard"]}

    table = Table(
        title=f"Leg {state['leg_number']}",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("", width=2)
    table.add_column("Player", min_width=16)
    table.add_column("Score", justify="right", width=6)
    table.add_column("Sets", justify="center", width=5)
    table.add_column("Legs", justify="center", width=5)
    table.add_column("Avg", justify="right", width=7)
    table.add_column("High", justify="right", width=5)
    table.add_column("Out", style="dim")

    for p in state["players"]:
        active = p["player_id"] == state["active_player_id"]
        row = legs[p["player_id"]]
        table.add_row(
            "▶" if active else "",
            p["display_name"],
            str(p["score"]),
            str(row["sets"]),
            str(row["legs"]),
            f"{p['average']:.2f}",
            str(p["highest_turn_score"]),
            p["checkout_mode"].replace("_", " ").lower(),
            style="bold" if active else "",
        )

    console.print()
    console.print(table)


def _cricket_table(state: dict) -> None:
    table = Table(
        title="Cricket",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("", width=2)
    table.add_column("Player", min_width=16)
    for column in _CRICKET_COLUMNS:
        table.add_column(column.removeprefix("m").title(), justify="center", width=4)
    table.add_column("Pts", justify="right", width=5)

    for p in state["players"]:
        active = p["player_id"] == state["active_player_id"]
        marks = [_MARK_SYMBOLS[p["cricket_marks"][column]] for column in _CRICKET_COLUMNS]
        table.add_row(
            "▶" if active else "",
            p["display_name"],
            *marks,
            str(p["cricket_score"]),
            style="bold" if active else "",
        )

    console.print()
    console.print(table)
