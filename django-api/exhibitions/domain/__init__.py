from exhibitions.domain.lifecycle import EventLifecycle, LifecycleAction
from exhibitions.domain.models import Event, Scan, StallInfo, TransitionResult
from exhibitions.domain.scoring import ScoringEngine
from exhibitions.domain.sessions import SessionReconstructor
from exhibitions.domain.value_objects import (
    Actor,
    Capacity,
    EventFilter,
    EventId,
    EventStatus,
    EventType,
    Money,
    Role,
)

__all__ = [
    "Event",
    "Scan",
    "StallInfo",
    "TransitionResult",
    "EventLifecycle",
    "LifecycleAction",
    "ScoringEngine",
    "SessionReconstructor",
    "Actor",
    "Capacity",
    "EventFilter",
    "EventId",
    "EventStatus",
    "EventType",
    "Money",
    "Role",
]
