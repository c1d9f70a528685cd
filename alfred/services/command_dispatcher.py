"""
Command Dispatcher - executes TypedCommands against the knowledge base.

The dispatcher owns all success/failure framing for command execution:

    no command            -> success, relay the classifier's reply
    unknown route         -> USER_ERROR "Comando não reconhecido."
    KnowledgeBaseError    -> STORE_ERROR with a per-action message
    any other exception   -> INTERNAL_ERROR

execute() never raises. It does not touch conversation context; the
assistant service decides what a result means for the session.
"""

import logging
from typing import Dict, List, Optional

from alfred.ai.intent.schemas import CommandAction, TypedCommand
from alfred.environments.base import KnowledgeBaseClient, KnowledgeBaseError
from alfred.services.command_handlers import (
    CommandHandler,
    InsightsHandler,
    NoteHandler,
    ProjectHandler,
    TaskHandler,
)
from alfred.services.command_result import CommandResult, ErrorKind
from alfred.services.response_formatter import ResponseFormatter

logger = logging.getLogger("alfred.services.dispatcher")

DEFAULT_REPLY = "Como posso ajudar você?"
UNRECOGNIZED_MESSAGE = "Comando não reconhecido."
GENERIC_FAILURE_MESSAGE = "Ocorreu um erro ao executar o comando."

FAILURE_MESSAGES: Dict[CommandAction, str] = {
    CommandAction.CREATE_TASK: "Não foi possível criar a tarefa.",
    CommandAction.UPDATE_TASK: "Não foi possível atualizar a tarefa.",
    CommandAction.COMPLETE_TASK: "Não foi possível completar a tarefa.",
    CommandAction.LIST_TASKS: "Não foi possível listar as tarefas.",
    CommandAction.CREATE_NOTE: "Não foi possível criar a nota.",
    CommandAction.SEARCH_NOTES: "Não foi possível buscar as notas.",
    CommandAction.CREATE_PROJECT: "Não foi possível criar o projeto.",
    CommandAction.GET_SUMMARY: "Não foi possível obter o dashboard.",
    CommandAction.GET_STATS: "Não foi possível obter as estatísticas.",
}


class CommandDispatcher:
    """
    Routes commands to handlers.

    Usage:
        dispatcher = CommandDispatcher(store)
        result = await dispatcher.execute(command, reply=intent.reply)
    """

    def __init__(
        self,
        store: KnowledgeBaseClient,
        formatter: Optional[ResponseFormatter] = None,
        list_limit: int = 10,
        handlers: Optional[List[CommandHandler]] = None,
    ):
        self.store = store
        formatter = formatter or ResponseFormatter()
        self.handlers: List[CommandHandler] = handlers if handlers is not None else [
            TaskHandler(store, formatter, list_limit),
            NoteHandler(store, formatter, list_limit),
            ProjectHandler(store, formatter, list_limit),
            InsightsHandler(store, formatter, list_limit),
        ]
        logger.info(f"Command dispatcher initialized with {len(self.handlers)} handlers")

    def find_handler(self, command: TypedCommand) -> Optional[CommandHandler]:
        for handler in self.handlers:
            if handler.can_handle(command):
                return handler
        return None

    async def execute(
        self,
        command: Optional[TypedCommand],
        reply: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> CommandResult:
        """
        Execute a command, or relay the classifier's reply when there is none.

        Args:
            command: The command to run (None for help/conversation)
            reply: Classifier reply used when command is None
            request_id: Correlation id for logs

        Returns:
            CommandResult (never raises)
        """
        if command is None:
            return CommandResult.ok(reply or DEFAULT_REPLY)

        action = command.action
        handler = self.find_handler(command)
        if handler is None:
            logger.warning(f"[{request_id}] No handler for route {[part.value for part in command.route]}")
            return CommandResult.fail(
                UNRECOGNIZED_MESSAGE,
                error=f"Ação '{action.value}' não implementada",
                error_kind=ErrorKind.USER_ERROR,
                action=action.value,
            )

        try:
            return await handler.handle(command, request_id)

        except KnowledgeBaseError as e:
            logger.warning(f"[{request_id}] Store failure in {action.value}: {e}")
            return CommandResult.fail(
                FAILURE_MESSAGES.get(action, GENERIC_FAILURE_MESSAGE),
                error=str(e) or type(e).__name__,
                error_kind=ErrorKind.STORE_ERROR,
                action=action.value,
            )

        except Exception as e:
            logger.error(f"[{request_id}] Unexpected error in {action.value}: {e}", exc_info=True)
            return CommandResult.fail(
                GENERIC_FAILURE_MESSAGE,
                error=str(e) or type(e).__name__,
                error_kind=ErrorKind.INTERNAL_ERROR,
                action=action.value,
            )
