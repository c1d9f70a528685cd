"""
Command Extractor - turns a ClassifiedIntent into a TypedCommand.

Deterministic and free of I/O: the same text, intent and reference date
always give the same command. This is where loose classifier output gets
normalized:

    "amanhã"            -> date(today + 1 day)
    "urgente"           -> Priority.HIGH
    "em andamento"      -> TaskStatus.IN_PROGRESS
    "criar tarefa: X"   -> title "X" (when the classifier gave no title)

Intents that carry no command (help, conversation, unknown labels) map to
None and the dispatcher relays the classifier's reply instead.
"""

import logging
import re
from datetime import date, timedelta
from typing import Callable, Dict, Optional

from alfred.ai.intent.schemas import (
    ENTITY_MODELS,
    AnalyticsEntities,
    AnalyticsParameters,
    ClassifiedIntent,
    CommandAction,
    CommandKind,
    CommandTarget,
    CompleteTaskEntities,
    CompleteTaskParameters,
    CreateNoteEntities,
    CreateNoteParameters,
    CreateProjectEntities,
    CreateProjectParameters,
    CreateTaskEntities,
    CreateTaskParameters,
    DashboardParameters,
    IntentType,
    ListTasksEntities,
    ListTasksParameters,
    SearchNotesEntities,
    SearchNotesParameters,
    TaskChanges,
    TypedCommand,
    UpdateTaskEntities,
    UpdateTaskParameters,
)
from alfred.environments.schemas import Priority, ProjectStatus, TaskStatus

logger = logging.getLogger("alfred.ai.intent.extractor")


# ---------------------------------------------------------------------------
# NORMALIZATION TABLES
# ---------------------------------------------------------------------------

HIGH_PRIORITY_WORDS = ("alta", "high", "urgente")
LOW_PRIORITY_WORDS = ("baixa", "low")

DEFAULT_TITLES: Dict[CommandTarget, str] = {
    CommandTarget.TASK: "Nova tarefa",
    CommandTarget.NOTE: "Nova nota",
    CommandTarget.PROJECT: "Novo projeto",
}

LEADING_VERB = re.compile(r"^(?:criar|adicionar|nova|novo)\s+", re.IGNORECASE)
LEADING_NOUN = re.compile(r"^(?:tarefa|nota|projeto)\b\s*:?\s*", re.IGNORECASE)
TRAILING_NOUN = re.compile(r"\s+(?:tarefa|nota|projeto)\s*$", re.IGNORECASE)
TRAILING_DUE = re.compile(r"\s+(?:at[ée]|para)\s+(?:hoje|amanh[ãa])\s*$", re.IGNORECASE)

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
DAY_MONTH = re.compile(r"^(\d{1,2})/(\d{1,2})$")

STATUS_PATTERNS = (
    (TaskStatus.DONE, re.compile(r"conclu|feit[oa]|done|complet", re.IGNORECASE)),
    (TaskStatus.IN_PROGRESS, re.compile(r"andamento|in[ _]progress|fazendo|progresso", re.IGNORECASE)),
    (TaskStatus.TODO, re.compile(r"pendente|a fazer|to ?do|aberta", re.IGNORECASE)),
)

PERIOD_PATTERNS = (
    ("day", re.compile(r"\b(?:dia|hoje|day|di[áa]ri[oa])\b", re.IGNORECASE)),
    ("week", re.compile(r"\b(?:semana|week|semanal)\b", re.IGNORECASE)),
    ("month", re.compile(r"\b(?:m[êe]s|month|mensal)\b", re.IGNORECASE)),
)


# ---------------------------------------------------------------------------
# NORMALIZERS
# ---------------------------------------------------------------------------

def normalize_priority(value: Optional[str]) -> Optional[Priority]:
    """
    Map free text onto a Priority.

    Substring match, case-insensitive: alta/high/urgente -> HIGH,
    baixa/low -> LOW, any other non-empty text -> MEDIUM, absent -> None.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    if any(word in text for word in HIGH_PRIORITY_WORDS):
        return Priority.HIGH
    if any(word in text for word in LOW_PRIORITY_WORDS):
        return Priority.LOW
    return Priority.MEDIUM


def parse_date(value: Optional[str], today: date) -> Optional[date]:
    """
    Resolve a due date relative to `today`.

    Recognizes hoje, amanhã/amanha and semana (+7 days) anywhere in the
    text, then ISO dates, dd/mm/yyyy and dd/mm (current year). Returns None
    for anything else.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None

    if "hoje" in text:
        return today
    if "amanhã" in text or "amanha" in text:
        return today + timedelta(days=1)
    if "semana" in text:
        return today + timedelta(days=7)

    try:
        if ISO_DATE.match(text):
            # a time part, if any, is ignored
            return date.fromisoformat(text[:10])

        match = DAY_MONTH_YEAR.match(text)
        if match:
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)

        match = DAY_MONTH.match(text)
        if match:
            day, month = (int(part) for part in match.groups())
            return date(today.year, month, day)
    except ValueError:
        logger.debug(f"Unparseable date: {value!r}")
        return None

    return None


def normalize_status(value: Optional[str]) -> Optional[TaskStatus]:
    if not value:
        return None
    for status, pattern in STATUS_PATTERNS:
        if pattern.search(value):
            return status
    return None


def normalize_period(value: Optional[str]) -> str:
    """day, week or month; anything unrecognized means week."""
    if value:
        for period, pattern in PERIOD_PATTERNS:
            if pattern.search(value):
                return period
    return "week"


def derive_title(raw_input: str, target: CommandTarget) -> str:
    """
    Derive a title from the raw request when the classifier gave none.

    Strips a leading verb (criar, adicionar, nova, novo), a type noun right
    after it with an optional colon, a trailing "até amanhã"-style due phrase
    and a trailing type noun. Falls back to the target's default title.
    """
    title = raw_input.strip()
    title = LEADING_VERB.sub("", title)
    title = LEADING_NOUN.sub("", title)
    title = TRAILING_DUE.sub("", title)
    title = TRAILING_NOUN.sub("", title)
    title = title.strip(" \t\"'“”:.-")
    return title or DEFAULT_TITLES[target]


def trailing_due_phrase(raw_input: str) -> Optional[str]:
    """The "até amanhã"-style phrase derive_title strips, if the input ends with one."""
    match = TRAILING_DUE.search(raw_input.strip())
    return match.group(0).strip() if match else None


def parse_limit(value: Optional[str], default: int) -> int:
    try:
        limit = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default


# ---------------------------------------------------------------------------
# EXTRACTOR
# ---------------------------------------------------------------------------

class CommandExtractor:
    """
    Builds TypedCommands from classified intents.

    Usage:
        extractor = CommandExtractor()
        command = extractor.extract("criar tarefa revisar relatório", intent)
        if command is None:
            ...  # nothing to execute, relay the classifier's reply
    """

    def __init__(
        self,
        default_list_limit: int = 10,
        today_provider: Callable[[], date] = date.today,
    ):
        self.default_list_limit = default_list_limit
        self.today_provider = today_provider

    def extract(self, raw_input: str, classified: ClassifiedIntent) -> Optional[TypedCommand]:
        intent_type = classified.intent_type
        if intent_type is None:
            logger.info(f"No command for unknown intent label: {classified.intent!r}")
            return None

        builder = self._builders().get(intent_type)
        if builder is None:
            return None

        model = ENTITY_MODELS.get(intent_type)
        entities = model.model_validate(classified.entities) if model else None
        command = builder(raw_input, entities)
        logger.debug(f"Extracted {command.action.value}: {command.parameters.model_dump(mode='json')}")
        return command

    def _builders(self) -> Dict[IntentType, Callable]:
        return {
            IntentType.CREATE_TASK: self._create_task,
            IntentType.UPDATE_TASK: self._update_task,
            IntentType.COMPLETE_TASK: self._complete_task,
            IntentType.LIST_TASKS: self._list_tasks,
            IntentType.CREATE_NOTE: self._create_note,
            IntentType.SEARCH_NOTES: self._search_notes,
            IntentType.CREATE_PROJECT: self._create_project,
            IntentType.DASHBOARD: self._dashboard,
            IntentType.ANALYTICS: self._analytics,
        }

    # -----------------------------------------------------------------------
    # PER-INTENT BUILDERS
    # -----------------------------------------------------------------------

    def _create_task(self, raw_input: str, entities: CreateTaskEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.CREATE,
            target=CommandTarget.TASK,
            action=CommandAction.CREATE_TASK,
            parameters=CreateTaskParameters(
                title=entities.title or derive_title(raw_input, CommandTarget.TASK),
                description=entities.description,
                priority=normalize_priority(entities.priority),
                due_date=parse_date(
                    entities.due_date or trailing_due_phrase(raw_input),
                    self.today_provider(),
                ),
                tags=entities.tags,
                project=entities.project_name,
            ),
        )

    def _update_task(self, raw_input: str, entities: UpdateTaskEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.UPDATE,
            target=CommandTarget.TASK,
            action=CommandAction.UPDATE_TASK,
            parameters=UpdateTaskParameters(
                task_id=entities.task_id,
                title=entities.title,
                changes=TaskChanges(
                    title=entities.new_title,
                    description=entities.description,
                    priority=normalize_priority(entities.priority),
                    status=normalize_status(entities.status),
                    due_date=parse_date(entities.due_date, self.today_provider()),
                ),
            ),
        )

    def _complete_task(self, raw_input: str, entities: CompleteTaskEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.UPDATE,
            target=CommandTarget.TASK,
            action=CommandAction.COMPLETE_TASK,
            parameters=CompleteTaskParameters(task_id=entities.task_id, title=entities.title),
        )

    def _list_tasks(self, raw_input: str, entities: ListTasksEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.READ,
            target=CommandTarget.TASK,
            action=CommandAction.LIST_TASKS,
            parameters=ListTasksParameters(
                status=normalize_status(entities.status),
                priority=normalize_priority(entities.priority),
                project=entities.project_name,
                limit=parse_limit(entities.limit, self.default_list_limit),
            ),
        )

    def _create_note(self, raw_input: str, entities: CreateNoteEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.CREATE,
            target=CommandTarget.NOTE,
            action=CommandAction.CREATE_NOTE,
            parameters=CreateNoteParameters(
                title=entities.title or derive_title(raw_input, CommandTarget.NOTE),
                content=entities.description or raw_input.strip() or None,
                tags=entities.tags,
            ),
        )

    def _search_notes(self, raw_input: str, entities: SearchNotesEntities) -> TypedCommand:
        # A tag-only search must not also require the whole sentence to match
        query = entities.search_query
        if query is None and not entities.tags:
            query = raw_input.strip() or None
        return TypedCommand(
            kind=CommandKind.READ,
            target=CommandTarget.NOTE,
            action=CommandAction.SEARCH_NOTES,
            parameters=SearchNotesParameters(query=query, tags=entities.tags),
        )

    def _create_project(self, raw_input: str, entities: CreateProjectEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.CREATE,
            target=CommandTarget.PROJECT,
            action=CommandAction.CREATE_PROJECT,
            parameters=CreateProjectParameters(
                name=entities.project_name or entities.title or derive_title(raw_input, CommandTarget.PROJECT),
                description=entities.description,
                status=ProjectStatus.PLANNING,
            ),
        )

    def _dashboard(self, raw_input: str, entities: None) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.READ,
            target=CommandTarget.DASHBOARD,
            action=CommandAction.GET_SUMMARY,
            parameters=DashboardParameters(),
        )

    def _analytics(self, raw_input: str, entities: AnalyticsEntities) -> TypedCommand:
        return TypedCommand(
            kind=CommandKind.READ,
            target=CommandTarget.ANALYTICS,
            action=CommandAction.GET_STATS,
            parameters=AnalyticsParameters(period=normalize_period(entities.period)),
        )
