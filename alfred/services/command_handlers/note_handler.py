"""
Note Handler - create and search notes.
"""

from typing import List, Optional

from alfred.ai.intent.schemas import (
    CommandAction,
    CommandKind,
    CommandTarget,
    CreateNoteParameters,
    SearchNotesParameters,
    TypedCommand,
)
from alfred.environments.schemas import NoteCreate
from alfred.services.command_handlers.base import CommandHandler, Route
from alfred.services.command_result import CommandResult


class NoteHandler(CommandHandler):
    """Handles create_note and search_notes."""

    @property
    def handler_name(self) -> str:
        return "note_handler"

    @property
    def supported_routes(self) -> List[Route]:
        return [
            (CommandKind.CREATE, CommandTarget.NOTE, CommandAction.CREATE_NOTE),
            (CommandKind.READ, CommandTarget.NOTE, CommandAction.SEARCH_NOTES),
        ]

    async def handle(self, command: TypedCommand, request_id: Optional[str] = None) -> CommandResult:
        self._log_entry(command, request_id)

        if command.action == CommandAction.CREATE_NOTE:
            result = await self._create(command.parameters)
        else:
            result = await self._search(command.parameters)

        self._log_exit(request_id, result)
        return result

    async def _create(self, params: CreateNoteParameters) -> CommandResult:
        note = await self.store.create_note(
            NoteCreate(title=params.title, content=params.content or "", tags=params.tags)
        )
        return CommandResult.ok(
            f"📝 Nota \"{note.title}\" criada com sucesso!",
            data=note,
            action=CommandAction.CREATE_NOTE.value,
        )

    async def _search(self, params: SearchNotesParameters) -> CommandResult:
        action = CommandAction.SEARCH_NOTES.value

        # Bodies are only needed to match a text query
        notes = await self.store.search_notes(
            query=params.query,
            tags=params.tags or None,
            include_content=bool(params.query),
        )
        if not notes:
            return CommandResult.ok("Nenhuma nota encontrada com os critérios especificados.", data=[], action=action)

        limited = notes[:self.list_limit]
        return CommandResult.ok(
            self.formatter.note_list_text(len(notes), limited),
            data=limited,
            action=action,
        )
