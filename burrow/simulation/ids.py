"""IdSequence — per-kind identifier counters owned by one simulation.

Tasks, colonists, stockpiles and beds each get ids of the form
``"task-1"``, ``"colonist-3"``...  The counters belong to the engine that
created them, so every new engine starts counting from 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class IdSequence:
    """Monotonic id generator keyed by entity kind.

    Attributes:
        counters: Last issued number per kind.
    """

    counters: dict[str, int] = field(default_factory=dict)

    def next(self, kind: str) -> str:
        """Issue the next id for ``kind``."""
        value = self.counters.get(kind, 0) + 1
        self.counters[kind] = value
        return f"{kind}-{value}"

    def reset(self) -> None:
        self.counters.clear()
