from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

COLOR_SUCCESS = "var(--color-success)"
COLOR_INFO = "var(--color-info)"
COLOR_WARNING = "var(--color-warning)"
COLOR_DANGER = "var(--color-danger)"

SEVERITIES = ("low", "medium", "high")
STATS_VARIANTS = ("default", "success", "info", "danger")


class StatusCategory(str, Enum):
    DONE = "Done"
    IN_PROGRESS = "InProgress"
    TODO = "ToDo"
    OTHER = "Other"


@dataclass(frozen=True)
class NormalizedTask:
    status_category: StatusCategory
    status_label: str
    priority_label: str
    team_label: str
    story_points: int = 0


@dataclass(frozen=True)
class StatusSegment:
    label: str
    percentage: int
    color: str
    count: Optional[int] = None


@dataclass(frozen=True)
class PriorityCounts:
    done: int = 0
    in_progress: int = 0
    todo: int = 0

    @property
    def total(self) -> int:
        return self.done + self.in_progress + self.todo


@dataclass(frozen=True)
class PriorityCrossTab:
    label: str
    counts: PriorityCounts = field(default_factory=PriorityCounts)


@dataclass(frozen=True)
class TeamCapacity:
    name: str
    completed_units: int
    total_units: int

    @property
    def completion(self) -> int:
        if self.total_units <= 0:
            return 0
        return round(100 * self.completed_units / self.total_units)


@dataclass(frozen=True)
class FlaggedItem:
    id: str
    title: str
    severity: str
    description: Optional[str] = None
    meta: Optional[str] = None


@dataclass(frozen=True)
class StatsCounter:
    icon: str
    title: str
    value: Union[int, float, str]
    subtitle: Optional[str] = None
    variant: str = "default"


@dataclass(frozen=True)
class SprintOverview:
    segments: List[StatusSegment] = field(default_factory=list)
    priorities: List[PriorityCrossTab] = field(default_factory=list)
    teams: List[TeamCapacity] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardView:
    project: Optional[str]
    stats: List[StatsCounter] = field(default_factory=list)
    sprint: SprintOverview = field(default_factory=SprintOverview)
    blocked_items: List[FlaggedItem] = field(default_factory=list)
    overdue_items: List[FlaggedItem] = field(default_factory=list)
