"""
Knowledge Base Schemas - domain records shared by every store backend.

Enum values are the select option names used in the Notion databases
("Alta", "A Fazer", ...), so a value can be written to the store as-is.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# ENUMS
# ---------------------------------------------------------------------------

class Priority(str, Enum):
    """Task priority, stored as the 'Prioridade' select."""
    HIGH = "Alta"
    MEDIUM = "Média"
    LOW = "Baixa"


class TaskStatus(str, Enum):
    """Task status, stored as the 'Status' select."""
    TODO = "A Fazer"
    IN_PROGRESS = "Em Andamento"
    DONE = "Concluído"


class ProjectStatus(str, Enum):
    """Project status, stored as the project 'Status' select."""
    PLANNING = "Planejamento"
    ACTIVE = "Em Andamento"
    DONE = "Concluído"
    PAUSED = "Pausado"


# ---------------------------------------------------------------------------
# RECORDS
# ---------------------------------------------------------------------------

class Task(BaseModel):
    """A task page."""
    id: str
    title: str
    description: Optional[str] = None
    status: Optional[TaskStatus] = TaskStatus.TODO
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    project_id: Optional[str] = None
    url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    def is_overdue(self, today: date) -> bool:
        return self.due_date is not None and self.due_date < today and not self.is_done()


class Note(BaseModel):
    """A note page; content is the concatenated paragraph blocks."""
    id: str
    title: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Project(BaseModel):
    """A project page."""
    id: str
    name: str
    description: Optional[str] = None
    status: Optional[ProjectStatus] = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def is_active(self) -> bool:
        return self.status in (ProjectStatus.PLANNING, ProjectStatus.ACTIVE)


# ---------------------------------------------------------------------------
# WRITE MODELS
# ---------------------------------------------------------------------------

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[date] = None
    project_id: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial update; only fields that are set are written."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""
    tags: List[str] = Field(default_factory=list)


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None


# ---------------------------------------------------------------------------
# AGGREGATES
# ---------------------------------------------------------------------------

class DashboardSummary(BaseModel):
    """Live counts over every task, project and note."""
    total_tasks: int = 0
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    today_tasks: int = 0
    completed_today: int = 0
    total_projects: int = 0
    active_projects: int = 0
    total_notes: int = 0


class ProductivityStats(BaseModel):
    """Activity counts for the last `days` days."""
    period: str = "week"
    days: int = 7
    tasks_completed: int = 0
    tasks_created: int = 0
    notes_created: int = 0
    projects_created: int = 0
    average_tasks_per_day: float = 0.0
