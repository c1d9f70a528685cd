"""
Command Result Types - shared data structures for command execution.

Kept apart from command_dispatcher.py so the command handlers can import
them without a circular import.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """
    Why a command failed.

    USER_ERROR: missing or unresolvable reference, bad input. The message
        is shown to the user as-is.
    CLASSIFIER_ERROR: the language-understanding step failed.
    STORE_ERROR: the knowledge base rejected or failed the call.
    INTERNAL_ERROR: anything unexpected.
    """
    USER_ERROR = "user_error"
    CLASSIFIER_ERROR = "classifier_error"
    STORE_ERROR = "store_error"
    INTERNAL_ERROR = "internal_error"


@dataclass
class CommandResult:
    """
    Outcome of executing one command.

    Attributes:
        success: Whether the command did what was asked
        message: User-displayable text, never empty
        data: Domain payload (Task, Note, list of records, summary...)
        error: Diagnostic detail for logs; set whenever success is False
        error_kind: Failure category; set whenever success is False
        action: The CommandAction value that produced this result
    """
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    action: Optional[str] = None

    def __post_init__(self):
        if not self.message:
            raise ValueError("CommandResult.message must not be empty")
        if not self.success and (self.error is None or self.error_kind is None):
            raise ValueError("A failed CommandResult needs error and error_kind")

    @classmethod
    def ok(cls, message: str, data: Any = None, action: Optional[str] = None) -> "CommandResult":
        return cls(success=True, message=message, data=data, action=action)

    @classmethod
    def fail(
        cls,
        message: str,
        error: str,
        error_kind: ErrorKind,
        action: Optional[str] = None,
    ) -> "CommandResult":
        return cls(success=False, message=message, error=error, error_kind=error_kind, action=action)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the HTTP response."""
        return {
            "success": self.success,
            "message": self.message,
            "data": _serialize(self.data),
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "action": self.action,
        }


def _serialize(data: Any) -> Any:
    """Make pydantic records (or lists of them) JSON friendly."""
    if data is None:
        return None
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_serialize(item) for item in data]
    if isinstance(data, dict):
        return {key: _serialize(value) for key, value in data.items()}
    return data
