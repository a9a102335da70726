"""Events — notifications the simulation sends to its collaborators.

Two channels leave the core:

- ``GameEvent`` values go to an injected ``EventSink`` (typically a sound
  player).  Emission is fire-and-forget.
- Human-readable lines go to the ``MessageLog``, which keeps only the most
  recent entries.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator


class GameEvent(Enum):
    """Discrete happenings worth a sound cue."""

    MINE = auto()
    CHOP = auto()
    BUILD = auto()
    EAT = auto()
    SLEEP = auto()
    ALERT = auto()
    SELECT = auto()
    TASK_COMPLETE = auto()


class EventSink(Protocol):
    """Anything that accepts game events."""

    def emit(self, event: GameEvent) -> None: ...


class NullEventSink:
    """Discards every event."""

    def emit(self, event: GameEvent) -> None:
        pass


@dataclass
class RecordingEventSink:
    """Keeps emitted events in order; handy for tests and replays."""

    events: list[GameEvent] = field(default_factory=list)

    def emit(self, event: GameEvent) -> None:
        self.events.append(event)


class MessageLog:
    """Ring buffer of the most recent colony messages.

    Attributes:
        capacity: Number of messages kept.
    """

    def __init__(self, capacity: int = 10) -> None:
        self.capacity = capacity
        self._messages: deque[str] = deque(maxlen=capacity)

    def append(self, message: str) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        self._messages.clear()

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> str:
        return self._messages[index]

    def as_list(self) -> list[str]:
        return list(self._messages)
