"""
Project Handler - create projects.
"""

from typing import List, Optional

from alfred.ai.intent.schemas import CommandAction, CommandKind, CommandTarget, TypedCommand
from alfred.environments.schemas import ProjectCreate
from alfred.services.command_handlers.base import CommandHandler, Route
from alfred.services.command_result import CommandResult


class ProjectHandler(CommandHandler):

    @property
    def handler_name(self) -> str:
        return "project_handler"

    @property
    def supported_routes(self) -> List[Route]:
        return [(CommandKind.CREATE, CommandTarget.PROJECT, CommandAction.CREATE_PROJECT)]

    async def handle(self, command: TypedCommand, request_id: Optional[str] = None) -> CommandResult:
        self._log_entry(command, request_id)
        params = command.parameters

        project = await self.store.create_project(
            ProjectCreate(name=params.name, description=params.description, status=params.status)
        )
        result = CommandResult.ok(
            f"🚀 Projeto \"{project.name}\" criado com sucesso!",
            data=project,
            action=CommandAction.CREATE_PROJECT.value,
        )

        self._log_exit(request_id, result)
        return result
