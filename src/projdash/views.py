"""Read-only projections of the project collection for dashboard and reports."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta

from .constants import DUE_SOON_DAYS, UNASSIGNED_AGENT
from .models import Project, ProjectStatus, StatusFilter


@dataclass
class ProjectReport:
    total: int = 0
    by_status: dict[ProjectStatus, int] = field(default_factory=dict)
    overdue: int = 0
    due_soon: int = 0
    without_deadline: int = 0
    total_tasks: int = 0
    by_agent: dict[str, int] = field(default_factory=dict)
    completion_rate: float = 0.0


def filter_projects(
    projects: list[Project],
    status_filter: StatusFilter | str = StatusFilter.ALL,
    search: str = "",
) -> list[Project]:
    """Return projects matching the status filter and title search, in source order.

    The search is a case-insensitive substring match on the title; an empty
    search matches everything.
    """
    wanted = StatusFilter(status_filter)
    needle = search.casefold()
    return [
        p
        for p in projects
        if (wanted is StatusFilter.ALL or p.status.value == wanted.value)
        and needle in p.title.casefold()
    ]


def build_report(projects: list[Project], today: date | None = None) -> ProjectReport:
    """Aggregate statistics over the full collection.

    Overdue: not done and deadline strictly before today.
    Due soon: not done and deadline within the next DUE_SOON_DAYS days,
    today included. Empty or unparsable deadlines count as no deadline.
    """
    today = today or date.today()
    horizon = today + timedelta(days=DUE_SOON_DAYS)

    status_counts = Counter(p.status for p in projects)
    agent_counts = Counter(p.agent.strip() or UNASSIGNED_AGENT for p in projects)

    overdue = 0
    due_soon = 0
    without_deadline = 0
    for p in projects:
        deadline = parse_deadline(p.deadline)
        if deadline is None:
            without_deadline += 1
            continue
        if p.status == ProjectStatus.DONE:
            continue
        if deadline < today:
            overdue += 1
        elif deadline < horizon:
            due_soon += 1

    total = len(projects)
    return ProjectReport(
        total=total,
        by_status={status: status_counts.get(status, 0) for status in ProjectStatus},
        overdue=overdue,
        due_soon=due_soon,
        without_deadline=without_deadline,
        total_tasks=sum(len(p.tasks) for p in projects),
        by_agent=dict(sorted(agent_counts.items())),
        completion_rate=status_counts.get(ProjectStatus.DONE, 0) / total if total else 0.0,
    )


def parse_deadline(value: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
