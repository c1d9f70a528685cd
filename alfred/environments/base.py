"""
Base classes and interfaces for knowledge-base backends.

Every store the assistant can talk to (Notion in production, an in-memory
store for development and tests) implements KnowledgeBaseClient.

Design Pattern: Template Method + Strategy Pattern
==================================================
- Backends implement the primitive reads and writes (create, update,
  search, list).
- Aggregates (dashboard summary, productivity stats) are implemented once
  here, on top of those primitives, by listing and counting. They are
  always computed live; nothing is cached.

Error contract:
    Backends raise KnowledgeBaseError subclasses, never return malformed
    success payloads. The command dispatcher turns them into failed
    CommandResults.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from alfred.environments.schemas import (
    DashboardSummary,
    Note,
    NoteCreate,
    Priority,
    ProductivityStats,
    Project,
    ProjectCreate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger("alfred.environments")


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------

class KnowledgeBaseError(Exception):
    """Base exception for all knowledge-base errors."""
    pass


class ConfigurationError(KnowledgeBaseError):
    """Raised when the backend is missing a token or database id."""
    pass


class NotFoundError(KnowledgeBaseError):
    """Raised when a page or database does not exist."""
    pass


class StoreValidationError(KnowledgeBaseError):
    """Raised when the store rejects a request as invalid."""
    pass


class APIError(KnowledgeBaseError):
    """Raised when an API call to the store fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


# Days covered by each analytics period
PERIOD_DAYS: Dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
}


# ---------------------------------------------------------------------------
# ABSTRACT BASE CLASS
# ---------------------------------------------------------------------------

class KnowledgeBaseClient(ABC):
    """
    Abstract base class for knowledge-base backends.

    Example Implementation:
        class NotionKnowledgeBase(KnowledgeBaseClient):
            backend_name = "notion"

            async def create_task(self, data: TaskCreate) -> Task:
                ...
    """

    backend_name: str = ""

    # -----------------------------------------------------------------------
    # TASKS
    # -----------------------------------------------------------------------

    @abstractmethod
    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task and return the stored record."""
        pass

    @abstractmethod
    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        """
        Apply a partial update to a task.

        Raises:
            NotFoundError: If the task does not exist
        """
        pass

    async def complete_task(self, task_id: str) -> Task:
        """Mark a task as done."""
        return await self.update_task(task_id, TaskUpdate(status=TaskStatus.DONE))

    @abstractmethod
    async def search_tasks(
        self,
        title: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        project_id: Optional[str] = None,
    ) -> List[Task]:
        """
        Find tasks matching every given filter, in the store's native order.

        Args:
            title: Case-insensitive substring of the task title
            status: Exact status
            priority: Exact priority
            project_id: Related project page id
        """
        pass

    # -----------------------------------------------------------------------
    # NOTES
    # -----------------------------------------------------------------------

    @abstractmethod
    async def create_note(self, data: NoteCreate) -> Note:
        pass

    @abstractmethod
    async def search_notes(
        self,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
        include_content: bool = True,
    ) -> List[Note]:
        """
        Find notes carrying every tag in `tags` whose title, content or tags
        contain `query` (case-insensitive). No arguments lists every note.

        With include_content=False a backend may skip loading note bodies;
        content is then empty and `query` only matches titles and tags.
        """
        pass

    # -----------------------------------------------------------------------
    # PROJECTS
    # -----------------------------------------------------------------------

    @abstractmethod
    async def create_project(self, data: ProjectCreate) -> Project:
        pass

    @abstractmethod
    async def list_projects(self) -> List[Project]:
        pass

    async def find_project(self, name: str) -> Optional[Project]:
        """Resolve a project by name: exact match first, then substring."""
        needle = name.strip().casefold()
        if not needle:
            return None

        projects = await self.list_projects()
        for project in projects:
            if project.name.strip().casefold() == needle:
                return project
        for project in projects:
            if needle in project.name.casefold():
                return project
        return None

    # -----------------------------------------------------------------------
    # AGGREGATES
    # -----------------------------------------------------------------------

    async def get_dashboard_summary(self, today: Optional[date] = None) -> DashboardSummary:
        """Count tasks by status and due date, active projects and notes."""
        today = today or date.today()

        tasks, projects, notes = await asyncio.gather(
            self.search_tasks(),
            self.list_projects(),
            self.search_notes(include_content=False),
        )

        return DashboardSummary(
            total_tasks=len(tasks),
            pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.TODO),
            in_progress_tasks=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.DONE),
            overdue_tasks=sum(1 for t in tasks if t.is_overdue(today)),
            today_tasks=sum(1 for t in tasks if t.due_date == today),
            completed_today=sum(1 for t in tasks if t.is_done() and t.updated_at.astimezone().date() == today),
            total_projects=len(projects),
            active_projects=sum(1 for p in projects if p.is_active()),
            total_notes=len(notes),
        )

    async def get_productivity_stats(
        self,
        period: str = "week",
        now: Optional[datetime] = None,
    ) -> ProductivityStats:
        """
        Count activity in the last day, week or month.

        A task counts as completed in the period when it is done and was last
        edited after the cutoff.

        Raises:
            StoreValidationError: If the period is not day, week or month
        """
        if period not in PERIOD_DAYS:
            raise StoreValidationError(f"Unsupported period: {period}")

        days = PERIOD_DAYS[period]
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=days)

        tasks, notes, projects = await asyncio.gather(
            self.search_tasks(),
            self.search_notes(include_content=False),
            self.list_projects(),
        )

        completed = sum(1 for t in tasks if t.is_done() and t.updated_at >= cutoff)

        return ProductivityStats(
            period=period,
            days=days,
            tasks_completed=completed,
            tasks_created=sum(1 for t in tasks if t.created_at >= cutoff),
            notes_created=sum(1 for n in notes if n.created_at >= cutoff),
            projects_created=sum(1 for p in projects if p.created_at >= cutoff),
            average_tasks_per_day=round(completed / days, 1),
        )

    async def aclose(self) -> None:
        """Release network resources. Backends without any keep the default."""
        return None
