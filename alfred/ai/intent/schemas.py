"""
Intent Schemas - Pydantic models for classified intents and typed commands.

Two stages, two kinds of models:

1. ClassifiedIntent is what the LLM said: a raw label, a loose entity
   mapping, a confidence and an optional reply.
2. TypedCommand is what will be executed: a (kind, target, action) route
   plus one typed parameter model per action.

Between them sit the entity models: one closed model per intent that
validates the loose mapping at the extraction boundary. Unknown keys are
dropped and scalar values are coerced to trimmed strings.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from alfred.environments.schemas import Priority, ProjectStatus, TaskStatus

# Bump when an entity model gains, loses or reinterprets a field
ENTITY_SCHEMA_VERSION = 1


class IntentType(str, Enum):
    """
    Intents the classifier may return.

    HELP and CONVERSATION never produce a command; the dispatcher relays the
    classifier's reply instead.
    """
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    COMPLETE_TASK = "complete_task"
    LIST_TASKS = "list_tasks"
    CREATE_NOTE = "create_note"
    SEARCH_NOTES = "search_notes"
    CREATE_PROJECT = "create_project"
    DASHBOARD = "dashboard"
    ANALYTICS = "analytics"
    HELP = "help"
    CONVERSATION = "conversation"


class CommandKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    READ = "read"


class CommandTarget(str, Enum):
    TASK = "task"
    NOTE = "note"
    PROJECT = "project"
    DASHBOARD = "dashboard"
    ANALYTICS = "analytics"


class CommandAction(str, Enum):
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    COMPLETE_TASK = "complete_task"
    LIST_TASKS = "list_tasks"
    CREATE_NOTE = "create_note"
    SEARCH_NOTES = "search_notes"
    CREATE_PROJECT = "create_project"
    GET_SUMMARY = "get_summary"
    GET_STATS = "get_stats"


# ---------------------------------------------------------------------------
# CLASSIFIER OUTPUT
# ---------------------------------------------------------------------------

class ClassifiedIntent(BaseModel):
    """
    Classifier output for one input.

    `intent` keeps the label exactly as returned; `intent_type` is set only
    when that label belongs to IntentType.
    """
    intent: str = IntentType.CONVERSATION.value
    intent_type: Optional[IntentType] = None
    entities: Dict[str, Any] = Field(default_factory=dict)
    confidence: float = 0.0
    reply: Optional[str] = None

    @field_validator("intent", mode="before")
    @classmethod
    def _normalize_label(cls, value: Any) -> str:
        if value is None:
            return IntentType.CONVERSATION.value
        return str(value).strip().lower()

    @field_validator("entities", mode="before")
    @classmethod
    def _entities_mapping(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
        if number != number:  # NaN
            return 0.0
        return min(max(number, 0.0), 1.0)

    @field_validator("reply", mode="before")
    @classmethod
    def _reply_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @model_validator(mode="after")
    def _resolve_intent_type(self) -> "ClassifiedIntent":
        if self.intent_type is None:
            try:
                self.intent_type = IntentType(self.intent)
            except ValueError:
                self.intent_type = None
        return self


# ---------------------------------------------------------------------------
# ENTITY MODELS (one per intent)
# ---------------------------------------------------------------------------

def _scalar_to_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item) for item in value if item is not None)
    text = str(value).strip()
    return text or None


def _to_tag_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None and not isinstance(item, dict)]
    else:
        items = [str(value)]

    tags: List[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class _Entities(BaseModel):
    """Shared coercion rules for every entity model."""
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name == "tags":
            return _to_tag_list(value)
        return _scalar_to_text(value)


class CreateTaskEntities(_Entities):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    project_name: Optional[str] = None


class UpdateTaskEntities(_Entities):
    task_id: Optional[str] = None
    title: Optional[str] = None
    new_title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None


class CompleteTaskEntities(_Entities):
    task_id: Optional[str] = None
    title: Optional[str] = None


class ListTasksEntities(_Entities):
    status: Optional[str] = None
    priority: Optional[str] = None
    project_name: Optional[str] = None
    limit: Optional[str] = None


class CreateNoteEntities(_Entities):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class SearchNotesEntities(_Entities):
    search_query: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class CreateProjectEntities(_Entities):
    title: Optional[str] = None
    project_name: Optional[str] = None
    description: Optional[str] = None


class AnalyticsEntities(_Entities):
    period: Optional[str] = None


ENTITY_MODELS: Dict[IntentType, Type[_Entities]] = {
    IntentType.CREATE_TASK: CreateTaskEntities,
    IntentType.UPDATE_TASK: UpdateTaskEntities,
    IntentType.COMPLETE_TASK: CompleteTaskEntities,
    IntentType.LIST_TASKS: ListTasksEntities,
    IntentType.CREATE_NOTE: CreateNoteEntities,
    IntentType.SEARCH_NOTES: SearchNotesEntities,
    IntentType.CREATE_PROJECT: CreateProjectEntities,
    IntentType.ANALYTICS: AnalyticsEntities,
}


# ---------------------------------------------------------------------------
# COMMAND PARAMETERS (one per action)
# ---------------------------------------------------------------------------

class CreateTaskParameters(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    tags: List[str] = Field(default_factory=list)
    project: Optional[str] = None


class TaskChanges(BaseModel):
    """Fields an update_task command wants to change."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class UpdateTaskParameters(BaseModel):
    task_id: Optional[str] = None
    title: Optional[str] = None
    changes: TaskChanges = Field(default_factory=TaskChanges)


class CompleteTaskParameters(BaseModel):
    task_id: Optional[str] = None
    title: Optional[str] = None


class ListTasksParameters(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    project: Optional[str] = None
    limit: int = Field(default=10, ge=1)


class CreateNoteParameters(BaseModel):
    title: str = Field(..., min_length=1)
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class SearchNotesParameters(BaseModel):
    query: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class CreateProjectParameters(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING


class DashboardParameters(BaseModel):
    pass


class AnalyticsParameters(BaseModel):
    period: Literal["day", "week", "month"] = "week"


CommandParameters = Union[
    CreateTaskParameters,
    UpdateTaskParameters,
    CompleteTaskParameters,
    ListTasksParameters,
    CreateNoteParameters,
    SearchNotesParameters,
    CreateProjectParameters,
    AnalyticsParameters,
    DashboardParameters,
]


class TypedCommand(BaseModel):
    """
    A validated instruction ready for the dispatcher.

    Example:
        TypedCommand(
            kind=CommandKind.CREATE,
            target=CommandTarget.TASK,
            action=CommandAction.CREATE_TASK,
            parameters=CreateTaskParameters(title="Revisar relatório"),
        )
    """
    kind: CommandKind
    target: CommandTarget
    action: CommandAction
    parameters: CommandParameters = Field(default_factory=DashboardParameters)

    @property
    def route(self) -> tuple:
        return (self.kind, self.target, self.action)
