"""
Interactive player and game-mode selection at match start.

Players are entered one at a time until the user is done (minimum 1); the
first player entered throws first unless another is chosen.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from dartsclub.config import MatchDefaults
from dartsclub.legs import CHECKOUT_MODES, GAME_MODES, CheckoutMode, GameMode
from dartsclub.services import CreateMatchRequest, PlayerEntry

console = Console(legacy_windows=False)


def select_players(defaults: MatchDefaults, minimum: int = 1) -> list[PlayerEntry]:
    console.print(
        "\n[bold]Players[/]\n"
        "  Enter a name to add a player.\n"
        f"  Press [bold]Enter[/] with no input when you're done (minimum {minimum}).\n"
    )

    entries: list[PlayerEntry] = []
    while True:
        prompt = f"  Player #{len(entries) + 1}"
        if len(entries) >= minimum:
            prompt += " (or Enter to finish)"

        name = Prompt.ask(prompt, default="", show_default=False).strip()
        if not name:
            if len(entries) < minimum:
                console.print(f"  [red]Need at least {minimum} player(s).[/]")
                continue
            break

        player_id = _slug(name)
        if any(e.player_id == player_id for e in entries):
            console.print(f"  [red]{name} is already playing.[/]")
            continue

        checkout = pick_option("    Checkout", CHECKOUT_MODES, defaults.checkout_mode)
        entries.append(PlayerEntry(player_id=player_id, display_name=name, checkout_mode=checkout))
        console.print(f"  [green]✓[/] Added [bold]{name}[/] [dim]({checkout.replace('_', ' ').lower()})[/]")

    _print_lineup(entries)
    return entries


def select_match_settings(players: list[PlayerEntry], defaults: MatchDefaults) -> CreateMatchRequest:
    mode: GameMode = pick_option("\nGame mode", GAME_MODES, defaults.mode)

    starter_choices = [str(i) for i in range(1, len(players) + 1)]
    starter = IntPrompt.ask("Who throws first?", choices=starter_choices, default=1)

    legs = IntPrompt.ask("Legs per set", default=defaults.legs_per_set)
    sets = IntPrompt.ask("Sets to win", default=defaults.sets_to_win)

    console.print()
    return CreateMatchRequest(
        players=players,
        mode=mode,
        starting_player_id=players[starter - 1].player_id,
        legs_per_set=max(1, legs),
        sets_to_win=max(1, sets),
    )


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def pick_option(label: str, options: tuple[str, ...], default: str) -> str:
    console.print(f"[bold]{label}:[/]")
    for i, option in enumerate(options, 1):
        marker = "  [dim](default)[/]" if option == default else ""
        console.print(f"  {i}. {option.replace('_', ' ')}{marker}")
    choice = IntPrompt.ask(
        "  Select",
        choices=[str(i) for i in range(1, len(options) + 1)],
        default=options.index(default) + 1,
    )
    return options[choice - 1]


def _slug(name: str) -> str:
    return "-".join(name.lower().split())


def _print_lineup(entries: list[PlayerEntry]) -> None:
    table = Table(
        title="Line-up",
        show_header=True,
        header_style="bold",
        border_style="green",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Name", min_width=20)
    table.add_column("Id", style="dim")
    table.add_column("Checkout", style="dim")

    for i, entry in enumerate(entries, 1):
        checkout: CheckoutMode | None = entry.checkout_mode
        table.add_row(str(i), entry.display_name, entry.player_id, checkout or "")

    console.print()
    console.print(table)
