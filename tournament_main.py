"""
Darts Club: tournament entry point.

Usage:
    python tournament_main.py

Wires together:
    config → logging → tournament set-up (or resume) →
    fixture loop (score on the board or enter the result) → CLI display
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from rich.prompt import Confirm, Prompt

from dartsclub.cli.display import display_event
from dartsclub.cli.scoring import score_match
from dartsclub.cli.selector import pick_option
from dartsclub.cli.tournament_display import (
    console,
    display_bracket,
    display_champion,
    display_tournament_start,
)
from dartsclub.cli.tournament_selector import select_tournament
from dartsclub.config import Config, load_config, setup_logging
from dartsclub.errors import DartsClubError
from dartsclub.legs import GAME_MODES
from dartsclub.rating import RatingBook
from dartsclub.services import MatchService, TournamentService
from dartsclub.storage import (
    FileTournamentRepository,
    in_memory_match_repository,
    in_memory_tournament_repository,
)
from dartsclub.tournaments.base import BYE, TBD


async def _main() -> None:
    config_path = Path("config.yaml")
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        console.print(f"[dim]No {config_path} found, using built-in defaults.[/]")
        config = Config()
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    logger = setup_logging(config.logging)

    # ── Services ─────────────────────────────────────────────────────── #
    ratings = RatingBook(config.rating.initial_rating, config.rating.k_factor)
    matches = MatchService(in_memory_match_repository(), ratings, [display_event], config.match)

    tournament_file = config.storage.tournament_file_path
    if tournament_file is not None:
        repository = FileTournamentRepository(tournament_file)
        console.print(f"[dim]Tournaments are saved to {tournament_file}[/]")
    else:
        repository = in_memory_tournament_repository()
    service = TournamentService(repository, matches, ratings, config.tournament)

    # ── Create or resume ─────────────────────────────────────────────── #
    state = await _resume(service)
    names: dict[str, str] = {}
    if state is None:
        request, names = select_tournament(config)
        try:
            state = await service.create_tournament(request)
        except DartsClubError as exc:
            console.print(f"[red]Error:[/] {exc}")
            sys.exit(1)
        display_tournament_start(state, [names[pid] for pid in request.participants])

    logger.info("Running tournament %s", state["tournament_id"])

    # ── Fixture loop ─────────────────────────────────────────────────── #
    while not state["is_completed"]:
        display_bracket(state)
        ready = _open_fixtures(state)
        choices = [f"{r}.{i}" for r, i in ready]

        console.print(
            "\n  Pick a fixture as [bold]<round>.<#>[/] "
            f"[dim]({', '.join(choices)})[/], [bold]m[/] to change a round's mode, [bold]q[/] to stop."
        )
        raw = Prompt.ask("  Fixture").strip().lower()
        if raw == "q":
            break

        try:
            if raw == "m":
                state = await _change_round_mode(service, state)
            elif raw in choices:
                round_number, fixture_index = (int(part) for part in raw.split("."))
                state = await _play_fixture(service, matches, state, round_number, fixture_index, names)
            else:
                console.print("  [red]Invalid choice.[/]")
        except DartsClubError as exc:
            console.print(f"  [red]✗[/] {exc}")

    display_bracket(state)
    display_champion(state)


async def _resume(service: TournamentService) -> dict | None:
    existing = [t for t in await service.list_tournaments() if not t["is_completed"]]
    if not existing:
        return None

    console.print("\n[bold]Unfinished tournaments:[/]")
    for i, t in enumerate(existing, 1):
        console.print(f"  {i}. {t['name']}  [dim]{t['tournament_id']}[/]")
    raw = Prompt.ask("Resume which? (Enter for a new tournament)", default="", show_default=False)
    if raw.isdigit() and 1 <= int(raw) <= len(existing):
        return existing[int(raw) - 1]
    return None


def _open_fixtures(state: dict) -> list[tuple[int, int]]:
    """Fixtures with two real sides and no winner yet."""
    ready = []
    for entry in state["rounds"]:
        for index, fixture in enumerate(entry["fixtures"]):
            sides = (fixture["home_player_id"], fixture["away_player_id"])
            if fixture["winner_player_id"] is None and TBD not in sides and BYE not in sides:
                ready.append((entry["round_number"], index))
    return ready


async def _play_fixture(
    service: TournamentService,
    matches: MatchService,
    state: dict,
    round_number: int,
    fixture_index: int,
    names: dict[str, str],
) -> dict:
    tournament_id = state["tournament_id"]
    fixture = next(
        entry for entry in state["rounds"] if entry["round_number"] == round_number
    )["fixtures"][fixture_index]
    sides = [fixture["home_player_id"], fixture["away_player_id"]]

    if not Confirm.ask("  Score it on the board?", default=True):
        winner = Prompt.ask("  Winner", choices=sides)
        return await service.record_winner(tournament_id, round_number, fixture_index, winner)

    if fixture["linked_match_id"] is None:
        match_state = await service.start_fixture_match(tournament_id, round_number, fixture_index, names)
    else:
        match_state = await matches.get_match_state(fixture["linked_match_id"])

    await score_match(matches, match_state)
    await service.complete_linked_fixtures(tournament_id)
    return await service.get_tournament_state(tournament_id)


async def _change_round_mode(service: TournamentService, state: dict) -> dict:
    round_numbers = [str(entry["round_number"]) for entry in state["rounds"]]
    round_number = int(Prompt.ask("  Round", choices=round_numbers))
    current = state["rounds"][round_numbers.index(str(round_number))]["mode"]
    mode = pick_option("  Mode", GAME_MODES, current)
    return await service.set_round_mode(state["tournament_id"], round_number, mode)


def main() -> None:
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped. Saved fixtures are kept.[/]")


if __name__ == "__main__":
    main()
