"""
Exception hierarchy shared by the match engine, the tournament engine and
the application services.

Every failure is synchronous and deterministic: the core never retries and
never swallows these.  Callers decide how to present them (console message,
HTTP status, …).

    DartsClubError
    ├── NotFoundError   (also a LookupError)
    │     match / tournament / round / fixture missing
    └── RuleError       (also a ValueError)
          an operation that the current state does not allow
"""

from __future__ import annotations


class DartsClubError(Exception):
    """Base class for every error raised by dartsclub."""


class NotFoundError(DartsClubError, LookupError):
    pass


class MatchNotFoundError(NotFoundError):
    def __init__(self, match_id: str) -> None:
        super().__init__(f"Match was not found: {match_id}")
        self.match_id = match_id


class TournamentNotFoundError(NotFoundError):
    def __init__(self, tournament_id: str) -> None:
        super().__init__(f"Tournament was not found: {tournament_id}")
        self.tournament_id = tournament_id


class RoundNotFoundError(NotFoundError):
    def __init__(self, round_number: int) -> None:
        super().__init__(f"Round was not found: {round_number}")
        self.round_number = round_number


class FixtureNotFoundError(NotFoundError):
    def __init__(self, round_number: int, fixture_index: int) -> None:
        super().__init__(f"Fixture was not found: round {round_number}, index {fixture_index}")
        self.round_number = round_number
        self.fixture_index = fixture_index


class RuleError(DartsClubError, ValueError):
    pass


class MatchRuleError(RuleError):
    """Invalid match set-up or an illegal match operation (e.g. bull-off outsider)."""


class TournamentRuleError(RuleError):
    """Invalid tournament set-up."""


class RoundModeLockedError(RuleError):
    def __init__(self) -> None:
        super().__init__("Round mode changes are disabled for this tournament.")


class FixtureAlreadyLinkedError(RuleError):
    def __init__(self) -> None:
        super().__init__("Fixture already linked to a match.")


class FixtureAlreadyDecidedError(RuleError):
    def __init__(self) -> None:
        super().__init__("Fixture already has a winner.")


class FixtureNotReadyError(RuleError):
    def __init__(self, detail: str = "Fixture is not start-ready.") -> None:
        super().__init__(detail)


class InvalidFixtureWinnerError(RuleError):
    def __init__(self) -> None:
        super().__init__("Winner must be one of fixture participants.")


class ByeResolutionError(RuleError):
    def __init__(self) -> None:
        super().__init__("BYE fixtures are auto-resolved only.")
