"""
Intent Module - from free text to an executable command.

Example Flow:
============
User says: "criar tarefa: revisar relatório até amanhã"

IntentClassifier returns:
{
    "intent": "create_task",
    "entities": {"title": "revisar relatório", "due_date": "amanhã"},
    "confidence": 0.95
}

CommandExtractor builds:
TypedCommand(create, task, create_task,
             CreateTaskParameters(title="revisar relatório", due_date=<tomorrow>))
"""

from alfred.ai.intent.schemas import (
    ENTITY_SCHEMA_VERSION,
    ClassifiedIntent,
    CommandAction,
    CommandKind,
    CommandTarget,
    IntentType,
    TypedCommand,
)
from alfred.ai.intent.classifier import ClassifierUnavailableError, IntentClassifier
from alfred.ai.intent.extractor import (
    CommandExtractor,
    derive_title,
    normalize_period,
    normalize_priority,
    normalize_status,
    parse_date,
)

__all__ = [
    "ENTITY_SCHEMA_VERSION",
    "ClassifiedIntent",
    "CommandAction",
    "CommandKind",
    "CommandTarget",
    "IntentType",
    "TypedCommand",
    "ClassifierUnavailableError",
    "IntentClassifier",
    "CommandExtractor",
    "derive_title",
    "normalize_period",
    "normalize_priority",
    "normalize_status",
    "parse_date",
]
