"""
In-memory knowledge base - process-local store for development and tests.

Records live in insertion-ordered dicts, so "native order" is creation
order. Nothing survives a restart.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from alfred.environments.base import KnowledgeBaseClient, NotFoundError
from alfred.environments.schemas import (
    Note,
    NoteCreate,
    Priority,
    Project,
    ProjectCreate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger("alfred.environments.memory")


class InMemoryKnowledgeBase(KnowledgeBaseClient):
    """
    KnowledgeBaseClient backed by plain dictionaries.

    Usage:
        kb = InMemoryKnowledgeBase()
        task = await kb.create_task(TaskCreate(title="Revisar relatório"))
    """

    backend_name = "memory"

    def __init__(self):
        self.tasks: Dict[str, Task] = {}
        self.notes: Dict[str, Note] = {}
        self.projects: Dict[str, Project] = {}

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # -----------------------------------------------------------------------
    # TASKS
    # -----------------------------------------------------------------------

    async def create_task(self, data: TaskCreate) -> Task:
        task = Task(id=self._new_id(), **data.model_dump())
        self.tasks[task.id] = task
        logger.debug(f"Created task {task.id}: {task.title}")
        return task

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        updated = task.model_copy(
            update={
                **changes.model_dump(exclude_none=True),
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self.tasks[task_id] = updated
        return updated

    async def search_tasks(
        self,
        title: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        project_id: Optional[str] = None,
    ) -> List[Task]:
        needle = title.casefold() if title else None
        return [
            task for task in self.tasks.values()
            if (needle is None or needle in task.title.casefold())
            and (status is None or task.status == status)
            and (priority is None or task.priority == priority)
            and (project_id is None or task.project_id == project_id)
        ]

    # -----------------------------------------------------------------------
    # NOTES
    # -----------------------------------------------------------------------

    async def create_note(self, data: NoteCreate) -> Note:
        note = Note(id=self._new_id(), **data.model_dump())
        self.notes[note.id] = note
        return note

    async def search_notes(
        self,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
        include_content: bool = True,
    ) -> List[Note]:
        wanted_tags = {tag.casefold() for tag in tags or []}
        needle = query.casefold() if query else None

        results = []
        for note in self.notes.values():
            note_tags = {tag.casefold() for tag in note.tags}
            if not wanted_tags.issubset(note_tags):
                continue
            if needle and not (
                needle in note.title.casefold()
                or needle in note.content.casefold()
                or any(needle in tag for tag in note_tags)
            ):
                continue
            results.append(note)
        return results

    # -----------------------------------------------------------------------
    # PROJECTS
    # -----------------------------------------------------------------------

    async def create_project(self, data: ProjectCreate) -> Project:
        project = Project(id=self._new_id(), **data.model_dump())
        self.projects[project.id] = project
        return project

    async def list_projects(self) -> List[Project]:
        return list(self.projects.values())
