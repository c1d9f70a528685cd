"""
Task Handler - create, update, complete and list tasks.

Update and complete accept either a task id or a title. A title is
resolved with a store search; when several tasks match, the first one in
the store's order is used and the ambiguity is logged.
"""

import logging
from typing import List, Optional, Union

from alfred.ai.intent.schemas import (
    CommandAction,
    CommandKind,
    CommandTarget,
    CompleteTaskParameters,
    CreateTaskParameters,
    ListTasksParameters,
    TypedCommand,
    UpdateTaskParameters,
)
from alfred.environments.schemas import Priority, Task, TaskCreate, TaskUpdate
from alfred.services.command_handlers.base import CommandHandler, Route
from alfred.services.command_result import CommandResult, ErrorKind

logger = logging.getLogger("alfred.services.command_handlers.task")


class TaskHandler(CommandHandler):
    """Handles every command targeting tasks."""

    @property
    def handler_name(self) -> str:
        return "task_handler"

    @property
    def supported_routes(self) -> List[Route]:
        return [
            (CommandKind.CREATE, CommandTarget.TASK, CommandAction.CREATE_TASK),
            (CommandKind.UPDATE, CommandTarget.TASK, CommandAction.UPDATE_TASK),
            (CommandKind.UPDATE, CommandTarget.TASK, CommandAction.COMPLETE_TASK),
            (CommandKind.READ, CommandTarget.TASK, CommandAction.LIST_TASKS),
        ]

    async def handle(self, command: TypedCommand, request_id: Optional[str] = None) -> CommandResult:
        self._log_entry(command, request_id)

        if command.action == CommandAction.CREATE_TASK:
            result = await self._create(command.parameters, request_id)
        elif command.action == CommandAction.UPDATE_TASK:
            result = await self._update(command.parameters, request_id)
        elif command.action == CommandAction.COMPLETE_TASK:
            result = await self._complete(command.parameters, request_id)
        else:
            result = await self._list(command.parameters)

        self._log_exit(request_id, result)
        return result

    # -----------------------------------------------------------------------
    # ACTIONS
    # -----------------------------------------------------------------------

    async def _create(self, params: CreateTaskParameters, request_id: Optional[str]) -> CommandResult:
        action = CommandAction.CREATE_TASK.value

        project_id = None
        if params.project:
            project = await self.store.find_project(params.project)
            if project is None:
                return self._project_not_found(params.project, action)
            project_id = project.id

        if params.tags:
            # The tasks database has no tag property
            logger.debug(f"[{request_id}] Ignoring task tags: {params.tags}")

        task = await self.store.create_task(
            TaskCreate(
                title=params.title,
                description=params.description,
                priority=params.priority or Priority.MEDIUM,
                due_date=params.due_date,
                project_id=project_id,
            )
        )
        return CommandResult.ok(f"✅ Tarefa \"{task.title}\" criada com sucesso!", data=task, action=action)

    async def _update(self, params: UpdateTaskParameters, request_id: Optional[str]) -> CommandResult:
        action = CommandAction.UPDATE_TASK.value

        if not params.task_id and not params.title:
            return CommandResult.fail(
                "É necessário especificar qual tarefa atualizar.",
                error="ID ou título da tarefa não fornecido",
                error_kind=ErrorKind.USER_ERROR,
                action=action,
            )
        if params.changes.is_empty():
            return CommandResult.fail(
                "Não entendi o que devo alterar na tarefa.",
                error="Nenhuma alteração informada",
                error_kind=ErrorKind.USER_ERROR,
                action=action,
            )

        resolved = await self._resolve_task_id(params, action, request_id)
        if isinstance(resolved, CommandResult):
            return resolved

        task = await self.store.update_task(resolved, TaskUpdate(**params.changes.model_dump()))
        return CommandResult.ok(f"✅ Tarefa \"{task.title}\" atualizada com sucesso!", data=task, action=action)

    async def _complete(self, params: CompleteTaskParameters, request_id: Optional[str]) -> CommandResult:
        action = CommandAction.COMPLETE_TASK.value

        if not params.task_id and not params.title:
            return CommandResult.fail(
                "É necessário especificar qual tarefa completar.",
                error="ID ou título da tarefa não fornecido",
                error_kind=ErrorKind.USER_ERROR,
                action=action,
            )

        resolved = await self._resolve_task_id(params, action, request_id)
        if isinstance(resolved, CommandResult):
            return resolved

        task = await self.store.complete_task(resolved)
        return CommandResult.ok(f"🎉 Tarefa \"{task.title}\" marcada como concluída!", data=task, action=action)

    async def _list(self, params: ListTasksParameters) -> CommandResult:
        action = CommandAction.LIST_TASKS.value

        project_id = None
        if params.project:
            project = await self.store.find_project(params.project)
            if project is None:
                return self._project_not_found(params.project, action)
            project_id = project.id

        tasks = await self.store.search_tasks(
            status=params.status,
            priority=params.priority,
            project_id=project_id,
        )
        if not tasks:
            return CommandResult.ok("Nenhuma tarefa encontrada com os filtros especificados.", data=[], action=action)

        limited = tasks[:params.limit]
        return CommandResult.ok(
            self.formatter.task_list_text(len(tasks), limited),
            data=limited,
            action=action,
        )

    # -----------------------------------------------------------------------
    # HELPERS
    # -----------------------------------------------------------------------

    async def _resolve_task_id(
        self,
        params: Union[UpdateTaskParameters, CompleteTaskParameters],
        action: str,
        request_id: Optional[str],
    ) -> Union[str, CommandResult]:
        """The task id to act on, or a USER_ERROR result when no task matches."""
        if params.task_id:
            return params.task_id

        matches: List[Task] = await self.store.search_tasks(title=params.title)
        if not matches:
            return CommandResult.fail(
                f"Tarefa \"{params.title}\" não encontrada.",
                error="Tarefa não encontrada",
                error_kind=ErrorKind.USER_ERROR,
                action=action,
            )
        if len(matches) > 1:
            logger.warning(
                f"[{request_id}] {len(matches)} tasks match title {params.title!r}; "
                f"using the first ({matches[0].id})"
            )
        return matches[0].id

    @staticmethod
    def _project_not_found(name: str, action: str) -> CommandResult:
        return CommandResult.fail(
            f"Projeto \"{name}\" não encontrado.",
            error="Projeto não encontrado",
            error_kind=ErrorKind.USER_ERROR,
            action=action,
        )
