"""
Base Command Handler - abstract interface for all command handlers.

Design Pattern: Strategy Pattern
================================
Each handler owns a family of routes, (kind, target, action) triples, and
executes them against the knowledge base. CommandDispatcher looks up the
handler for a command's route and delegates to it.

Example:
    handler = TaskHandler(store, formatter)
    if handler.can_handle(command):
        result = await handler.handle(command, request_id)

Handlers may let KnowledgeBaseError escape: the dispatcher converts store
failures into STORE_ERROR results in one place. Everything the handler
can check locally (missing references, unknown titles) is returned as a
USER_ERROR result instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from alfred.ai.intent.schemas import CommandAction, CommandKind, CommandTarget, TypedCommand
from alfred.environments.base import KnowledgeBaseClient
from alfred.services.command_result import CommandResult
from alfred.services.response_formatter import ResponseFormatter

logger = logging.getLogger("alfred.services.command_handlers")

Route = Tuple[CommandKind, CommandTarget, CommandAction]


class CommandHandler(ABC):
    """
    Abstract base class for command handlers.

    Responsibilities:
    - Declare the routes it serves (supported_routes)
    - Validate parameters that can be checked without the store
    - Call the store and word the result for the user

    NOT Responsible For:
    - Building commands from text (CommandExtractor's job)
    - Catching store failures (CommandDispatcher's job)
    - Session context (AssistantService's job)
    """

    def __init__(
        self,
        store: KnowledgeBaseClient,
        formatter: Optional[ResponseFormatter] = None,
        list_limit: int = 10,
    ):
        self.store = store
        self.formatter = formatter or ResponseFormatter()
        self.list_limit = list_limit

    @property
    @abstractmethod
    def handler_name(self) -> str:
        """Unique identifier used in logs (e.g. "task_handler")."""
        pass

    @property
    @abstractmethod
    def supported_routes(self) -> List[Route]:
        pass

    def can_handle(self, command: TypedCommand) -> bool:
        return command.route in self.supported_routes

    @abstractmethod
    async def handle(self, command: TypedCommand, request_id: Optional[str] = None) -> CommandResult:
        """
        Execute the command.

        Raises:
            KnowledgeBaseError: Store failures, converted by the dispatcher
        """
        pass

    def _log_entry(self, command: TypedCommand, request_id: Optional[str]) -> None:
        logger.info(
            f"[{request_id}] {self.handler_name}.handle({command.action.value}) called",
            extra={"handler": self.handler_name, "action": command.action.value},
        )

    def _log_exit(self, request_id: Optional[str], result: CommandResult) -> None:
        logger.info(
            f"[{request_id}] {self.handler_name} completed: success={result.success}",
            extra={
                "handler": self.handler_name,
                "success": result.success,
                "error_kind": result.error_kind.value if result.error_kind else None,
            },
        )
