"""
Typed event dataclasses: the shared language between the match engine and any consumer.

The match aggregate appends these to its pending queue; the application service
drains the queue after every mutation and forwards each event to its sinks
(logger, Rich console, tests…).  All events are frozen (immutable) so they're
safe to pass across async boundaries and can be trivially serialized to JSON
via dataclasses.asdict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Literal

EventName = Literal["game.leg_won"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LegWonEvent:
    """Raised when one player closes a leg (or wins a cricket game)."""

    match_id: str
    winner_player_id: str
    leg_number: int
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def event_name(self) -> EventName:
        return "game.leg_won"


# Union type for type-safe pattern matching in consumers.  Only one event
# kind exists today; new kinds get added here.
MatchEvent = LegWonEvent

# Anything that wants to observe drained events: called once per event, in
# occurrence order.
EventSink = Callable[[MatchEvent], None]
