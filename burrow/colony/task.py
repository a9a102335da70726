"""Task — a unit of colony work and the helpers that query task lists.

A task targets one tile, accumulates work-ticks while a colonist is
assigned to it and is complete once its progress reaches the work time
for its type (build tasks are timed per structure).

Two priority conventions coexist: ``highest_priority_task`` treats a
*larger* number as more important, while the colonist AI picks among
designated tasks in *ascending* priority order.  Both are intentional
call-site behaviour and are kept as they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from burrow.economy.building import BuildType

if TYPE_CHECKING:
    from burrow.simulation.ids import IdSequence
    from burrow.world.world import Position

DEFAULT_PRIORITY = 5


class TaskType(Enum):
    """Kinds of work a colonist can perform."""

    MINE = "MINE"
    CHOP = "CHOP"
    HAUL = "HAUL"
    BUILD = "BUILD"
    COOK = "COOK"
    EAT = "EAT"
    SLEEP = "SLEEP"


# Work-ticks to complete, at 10 ticks per simulated second
WORK_TIMES: dict[TaskType, float] = {
    TaskType.MINE: 100,
    TaskType.CHOP: 80,
    TaskType.HAUL: 20,
    TaskType.BUILD: 50,
    TaskType.COOK: 40,
    TaskType.EAT: 30,
    TaskType.SLEEP: 0,
}

BUILD_WORK_TIMES: dict[BuildType, float] = {
    BuildType.WALL: 50,
    BuildType.FLOOR: 30,
    BuildType.DOOR: 40,
    BuildType.BED: 60,
    BuildType.STOCKPILE: 0,
}


@dataclass
class Task:
    """A piece of work queued for the colony.

    Attributes:
        id: Unique identifier.
        type: What kind of work this is.
        pos: Target tile.
        priority: Urgency; see the module docstring for ordering.
        assigned_to: Id of the colonist working on it, if any.
        progress: Accumulated work-ticks.
        build_type: Structure to build, for BUILD tasks.
    """

    id: str
    type: TaskType
    pos: Position
    priority: int = DEFAULT_PRIORITY
    assigned_to: str | None = None
    progress: float = 0.0
    build_type: BuildType | None = None

    @property
    def work_time(self) -> float:
        return task_work_time(self.type, self.build_type)

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.work_time

    def assign(self, colonist_id: str) -> None:
        """Give the task to a colonist, replacing any previous assignee."""
        self.assigned_to = colonist_id

    def unassign(self) -> None:
        self.assigned_to = None

    def advance(self, amount: float) -> bool:
        """Add work-ticks and report whether the task is now complete."""
        self.progress += amount
        return self.is_complete


def create_task(
    ids: IdSequence,
    task_type: TaskType,
    pos: Position,
    priority: int = DEFAULT_PRIORITY,
    build_type: BuildType | None = None,
) -> Task:
    """Create an unassigned task with zero progress."""
    return Task(
        id=ids.next("task"),
        type=task_type,
        pos=(pos[0], pos[1]),
        priority=priority,
        build_type=build_type,
    )


def task_work_time(task_type: TaskType, build_type: BuildType | None = None) -> float:
    """Return the work-ticks needed to finish a task.

    BUILD tasks use the per-structure time when ``build_type`` is given and
    the generic BUILD time otherwise.
    """
    if task_type is TaskType.BUILD and build_type is not None:
        return BUILD_WORK_TIMES[build_type]
    return WORK_TIMES[task_type]


def unassigned_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.assigned_to is None]


def tasks_by_type(tasks: list[Task], task_type: TaskType) -> list[Task]:
    return [t for t in tasks if t.type is task_type]


def highest_priority_task(tasks: list[Task]) -> Task | None:
    """Return the unassigned task with the largest priority number.

    The first such task wins on ties.
    """
    best: Task | None = None
    for task in unassigned_tasks(tasks):
        if best is None or task.priority > best.priority:
            best = task
    return best


def remove_task(tasks: list[Task], task_id: str) -> list[Task]:
    """Return ``tasks`` without the task ``task_id`` (unchanged if absent)."""
    return [t for t in tasks if t.id != task_id]


def find_task(tasks: list[Task], task_id: str | None) -> Task | None:
    if task_id is None:
        return None
    return next((t for t in tasks if t.id == task_id), None)
