"""
Darts Club: match scoring entry point.

Wires together:  config → logging → player selection → match service → CLI scoring loop
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dartsclub.cli.display import console, display_event
from dartsclub.cli.scoring import score_match
from dartsclub.cli.selector import select_match_settings, select_players
from dartsclub.config import Config, load_config, setup_logging
from dartsclub.errors import DartsClubError
from dartsclub.rating import RatingBook
from dartsclub.services import MatchService
from dartsclub.storage import in_memory_match_repository


def load_or_default(config_path: Path) -> Config:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[dim]No {config_path} found, using built-in defaults.[/]")
        return Config()
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)


async def _main() -> None:
    config = load_or_default(Path("config.yaml"))
    logger = setup_logging(config.logging)

    ratings = RatingBook(config.rating.initial_rating, config.rating.k_factor)
    service = MatchService(
        in_memory_match_repository(),
        ratings,
        sinks=[display_event],
        defaults=config.match,
    )

    players = select_players(config.match)
    request = select_match_settings(players, config.match)

    try:
        state = await service.create_match(request)
    except DartsClubError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)

    logger.info("Scoring match %s", state["match_id"])
    state = await score_match(service, state)

    if state["winner_player_id"] is not None:
        console.print(
            "[dim]Ratings: "
            + ", ".join(f"{pid} {rating}" for pid, rating in ratings.snapshot().items())
            + "[/]\n"
        )


def main() -> None:
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/]")


if __name__ == "__main__":
    main()
