"""
Interactive set-up for tournament mode.

Reuses the player entry loop from cli/selector.py (minimum 2) and then asks
for format, bye placement, seeding and per-round game modes.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt

from dartsclub.cli.selector import pick_option, select_players
from dartsclub.config import Config
from dartsclub.legs import GAME_MODES, GameMode
from dartsclub.services import CreateTournamentRequest
from dartsclub.tournaments.base import (
    BYE_PLACEMENTS,
    SEEDING_MODES,
    TOURNAMENT_FORMATS,
    TournamentSettings,
)
from dartsclub.tournaments.knockout import _next_power_of_two

console = Console(legacy_windows=False)


def select_tournament(config: Config) -> tuple[CreateTournamentRequest, dict[str, str]]:
    """
    Prompt for everything needed to create a tournament.

    Returns the request plus a player_id → display name map for the CLI.
    """
    defaults = config.tournament
    name = Prompt.ask("\n[bold]Tournament name[/]", default="Club Night")

    entries = select_players(config.match, minimum=2)
    participants = [e.player_id for e in entries]

    tournament_format = pick_option("\nFormat", TOURNAMENT_FORMATS, "SINGLE_ELIMINATION")
    bye_placement = defaults.bye_placement
    rounds = 1
    if tournament_format == "SINGLE_ELIMINATION":
        slots = _next_power_of_two(len(participants))
        rounds = slots.bit_length() - 1
        if slots > len(participants):
            console.print(f"  [dim]ℹ  {slots - len(participants)} bye(s) in a {slots}-slot draw.[/]")
            bye_placement = pick_option("\nBye placement", BYE_PLACEMENTS, defaults.bye_placement)

    seeding_mode = pick_option("\nSeeding", SEEDING_MODES, defaults.seeding_mode)

    round_modes: list[GameMode] = []
    if Confirm.ask("\nChoose a game mode per round?", default=False):
        for round_number in range(1, rounds + 1):
            round_modes.append(pick_option(f"  Round {round_number}", GAME_MODES, config.match.mode))

    settings = TournamentSettings(
        bye_placement=bye_placement,
        seeding_mode=seeding_mode,
        default_legs_per_set=defaults.legs_per_set,
        default_sets_to_win=defaults.sets_to_win,
        allow_round_mode_switch=defaults.allow_round_mode_switch,
    )
    request = CreateTournamentRequest(
        name=name,
        participants=participants,
        format=tournament_format,
        round_modes=round_modes,
        settings=settings,
    )
    console.print()
    return request, {e.player_id: e.display_name for e in entries}
