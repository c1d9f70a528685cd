"""
Insights Handler - dashboard summary and productivity analytics.

Both are computed live from the store on every request.
"""

from typing import List, Optional

from alfred.ai.intent.schemas import CommandAction, CommandKind, CommandTarget, TypedCommand
from alfred.services.command_handlers.base import CommandHandler, Route
from alfred.services.command_result import CommandResult


class InsightsHandler(CommandHandler):
    """Handles get_summary (dashboard) and get_stats (analytics)."""

    @property
    def handler_name(self) -> str:
        return "insights_handler"

    @property
    def supported_routes(self) -> List[Route]:
        return [
            (CommandKind.READ, CommandTarget.DASHBOARD, CommandAction.GET_SUMMARY),
            (CommandKind.READ, CommandTarget.ANALYTICS, CommandAction.GET_STATS),
        ]

    async def handle(self, command: TypedCommand, request_id: Optional[str] = None) -> CommandResult:
        self._log_entry(command, request_id)

        if command.action == CommandAction.GET_SUMMARY:
            summary = await self.store.get_dashboard_summary()
            result = CommandResult.ok(
                self.formatter.dashboard_text(summary),
                data=summary,
                action=CommandAction.GET_SUMMARY.value,
            )
        else:
            stats = await self.store.get_productivity_stats(command.parameters.period)
            result = CommandResult.ok(
                self.formatter.analytics_text(stats),
                data=stats,
                action=CommandAction.GET_STATS.value,
            )

        self._log_exit(request_id, result)
        return result
