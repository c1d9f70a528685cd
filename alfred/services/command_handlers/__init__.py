"""
Command Handlers Package - Strategy pattern for command execution.

One handler per family of routes:

    TaskHandler      create/update/complete/list tasks
    NoteHandler      create/search notes
    ProjectHandler   create projects
    InsightsHandler  dashboard summary, productivity analytics

CommandDispatcher acts as the context that delegates to the handler whose
supported_routes contain the command's (kind, target, action).
"""

from alfred.services.command_handlers.base import CommandHandler, Route
from alfred.services.command_handlers.task_handler import TaskHandler
from alfred.services.command_handlers.note_handler import NoteHandler
from alfred.services.command_handlers.project_handler import ProjectHandler
from alfred.services.command_handlers.insights_handler import InsightsHandler

__all__ = [
    "CommandHandler",
    "Route",
    "TaskHandler",
    "NoteHandler",
    "ProjectHandler",
    "InsightsHandler",
]
