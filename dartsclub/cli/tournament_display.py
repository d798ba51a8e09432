"""
Rich-based CLI rendering of tournament state.

Works purely on the dict returned by tournament_state(); round tables show
each fixture with its label, sides and result, and round robin events add
a points table.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dartsclub.tournaments.base import BYE, TBD
from dartsclub.tournaments.knockout import _round_label

console = Console(legacy_windows=False)


def display_tournament_start(state: dict, participants: list[str]) -> None:
    names = "  •  ".join(participants)
    console.print()
    console.print(
        Panel(
            f"[bold]{state['format'].replace('_', ' ').title()}[/]\n\n"
            f"[dim]Participants ({len(participants)}):[/]\n{names}\n\n"
            f"[dim]Rounds: {len(state['rounds'])}  •  "
            f"byes: {state['settings']['bye_placement'].replace('_', ' ').lower()}  •  "
            f"seeding: {state['settings']['seeding_mode'].lower()}[/]",
            title=f"[bold green] {state['name']} [/]",
            border_style="green",
            expand=False,
        )
    )


def display_bracket(state: dict) -> None:
    """Print one table per round."""
    knockout = state["format"] == "SINGLE_ELIMINATION"
    for entry in state["rounds"]:
        _round_table(entry, knockout)
    if not knockout:
        display_points_table(state)


def display_points_table(state: dict) -> None:
    table = Table(
        title="Table",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Name", min_width=20)
    table.add_column("Pts", justify="right", width=5)

    # Stable sort: equal points keep table order, matching the champion rule.
    ranked = sorted(state["points_table"].items(), key=lambda item: -item[1])
    for i, (player_id, total) in enumerate(ranked, 1):
        table.add_row(str(i), player_id, str(total))

    console.print()
    console.print(table)


def display_champion(state: dict) -> None:
    if state["champion"] is None:
        return
    console.print()
    console.print(
        Panel(
            f"[bold yellow]★  {state['champion']}[/]",
            title="[bold green] Tournament Champion [/]",
            border_style="yellow",
            expand=False,
        )
    )


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _round_table(entry: dict, knockout: bool) -> None:
    fixtures = entry["fixtures"]

    console.print()
    console.rule(
        f"[bold]Round {entry['round_number']}[/]  [dim]{entry['mode'].replace('_', ' ')}[/]",
        style="bright_blue",
    )

    table = Table(show_header=True, header_style="bold", border_style="dim", show_lines=False)
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Fixture", style="dim", width=8)
    table.add_column("Home", min_width=16)
    table.add_column("", width=3, justify="center")
    table.add_column("Away", min_width=16)
    table.add_column("Result", min_width=12)

    for index, fixture in enumerate(fixtures):
        if knockout:
            label = _round_label(entry["round_number"], index + 1, len(fixtures))
        else:
            label = f"M{index + 1}"
        home = _side(fixture["home_player_id"], fixture["winner_player_id"])
        away = _side(fixture["away_player_id"], fixture["winner_player_id"])
        table.add_row(str(index), label, home, "vs", away, _result(fixture))

    console.print(table)


def _side(player_id: str, winner: str | None) -> str:
    if player_id in (BYE, TBD):
        return f"[dim]{player_id}[/]"
    if player_id == winner:
        return f"[bold green]{player_id}[/]"
    return player_id


def _result(fixture: dict) -> str:
    if fixture["winner_player_id"] is not None:
        label = f" ({fixture['result_label']})" if fixture["result_label"] else ""
        return f"[green]✓[/] {fixture['winner_player_id']}{label}"
    if fixture["linked_match_id"] is not None:
        return "[yellow]in play[/]"
    return ""
