"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
Every section is optional; Config() on its own is a valid configuration.
"""

from __future__ import annotations

import logging
import logging.handlers
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from dartsclub.legs import CHECKOUT_MODES, GAME_MODES, CheckoutMode, GameMode
from dartsclub.tournaments.base import (
    BYE_PLACEMENTS,
    SEEDING_MODES,
    ByePlacement,
    SeedingMode,
)


@dataclass
class MatchDefaults:
    mode: GameMode = "X01_501"
    checkout_mode: CheckoutMode = "DOUBLE_OUT"
    legs_per_set: int = 1
    sets_to_win: int = 1


@dataclass
class TournamentDefaults:
    bye_placement: ByePlacement = "ROUND_1"
    seeding_mode: SeedingMode = "MANUAL"
    legs_per_set: int = 3
    sets_to_win: int = 2
    allow_round_mode_switch: bool = True


@dataclass
class RatingConfig:
    initial_rating: int = 1200
    k_factor: int = 32


@dataclass
class StorageConfig:
    tournament_file: str | None = None   # None = keep tournaments in memory only

    @property
    def tournament_file_path(self) -> Path | None:
        return Path(self.tournament_file) if self.tournament_file else None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str | None = "./logs/dartsclub.log"


@dataclass
class Config:
    match: MatchDefaults = field(default_factory=MatchDefaults)
    tournament: TournamentDefaults = field(default_factory=TournamentDefaults)
    rating: RatingConfig = field(default_factory=RatingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: fields are invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and adjust it for your club."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        match_raw = raw.get("match") or {}
        tournament_raw = raw.get("tournament") or {}
        rating_raw = raw.get("rating") or {}
        storage_raw = raw.get("storage") or {}
        logging_raw = raw.get("logging") or {}

        config = Config(
            match=MatchDefaults(
                mode=match_raw.get("mode", "X01_501"),
                checkout_mode=match_raw.get("checkout_mode", "DOUBLE_OUT"),
                legs_per_set=int(match_raw.get("legs_per_set", 1)),
                sets_to_win=int(match_raw.get("sets_to_win", 1)),
            ),
            tournament=TournamentDefaults(
                bye_placement=tournament_raw.get("bye_placement", "ROUND_1"),
                seeding_mode=tournament_raw.get("seeding_mode", "MANUAL"),
                legs_per_set=int(tournament_raw.get("legs_per_set", 3)),
                sets_to_win=int(tournament_raw.get("sets_to_win", 2)),
                allow_round_mode_switch=bool(tournament_raw.get("allow_round_mode_switch", True)),
            ),
            rating=RatingConfig(
                initial_rating=int(rating_raw.get("initial_rating", 1200)),
                k_factor=int(rating_raw.get("k_factor", 32)),
            ),
            storage=StorageConfig(
                tournament_file=storage_raw.get("tournament_file") or None,
            ),
            logging=LoggingConfig(
                level=str(logging_raw.get("level", "INFO")).upper(),
                file=logging_raw.get("file", "./logs/dartsclub.log") or None,
            ),
        )
        _validate(config)
        return config

    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _validate(config: Config) -> None:
    _check_choice("match.mode", config.match.mode, GAME_MODES)
    _check_choice("match.checkout_mode", config.match.checkout_mode, CHECKOUT_MODES)
    _check_choice("tournament.bye_placement", config.tournament.bye_placement, BYE_PLACEMENTS)
    _check_choice("tournament.seeding_mode", config.tournament.seeding_mode, SEEDING_MODES)
    if config.match.legs_per_set < 1 or config.match.sets_to_win < 1:
        raise ValueError("match.legs_per_set and match.sets_to_win must be >= 1")
    if config.tournament.legs_per_set < 1 or config.tournament.sets_to_win < 1:
        raise ValueError("tournament.legs_per_set and tournament.sets_to_win must be >= 1")
    if config.rating.k_factor < 1:
        raise ValueError("rating.k_factor must be >= 1")
    if not isinstance(logging.getLevelName(config.logging.level), int):
        raise ValueError(f"logging.level is not a logging level: '{config.logging.level}'")


def _check_choice(name: str, value: object, valid: tuple[str, ...]) -> None:
    if value not in valid:
        raise ValueError(f"{name} must be one of {valid}, got '{value}'")


def setup_logging(cfg: LoggingConfig) -> logging.Logger:
    """Console logging plus an optional rotating log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if cfg.file:
        log_file = Path(cfg.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=cfg.level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        handlers=handlers,
    )
    return logging.getLogger("dartsclub")
