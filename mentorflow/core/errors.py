"""Error Hierarchy — typed, categorized exceptions for all mentorflow failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are client errors; infrastructure errors (500-level) are server errors
    - to_response() produces the uniform envelope {success: false, error, code}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with MentorflowError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    TOOL = "tool"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    student_id: str | None = None
    message_id: str | None = None
    tool_name: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class MentorflowError(Exception):
    """Base exception for all mentorflow errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500

    def to_response(self) -> dict:
        """Convert to the uniform failure envelope."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(MentorflowError):
    """Required input missing or malformed."""
    def __init__(self, message: str, fields: list[str] | None = None,
                 context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.fields = fields or []


class NotFoundError(MentorflowError):
    """Referenced student, conversation or message does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} {resource_id} not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AlreadyInTargetPhaseError(MentorflowError):
    """Phase transition requested for a student already in the target phase."""
    def __init__(self, phase: str, context: ErrorContext | None = None):
        label = "Phase II" if phase == "phase2" else "Phase I"
        super().__init__(
            f"Student is already in {label}",
            "ALREADY_IN_TARGET_PHASE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.phase = phase


class UnknownToolError(MentorflowError):
    """Invocation of a tool name that is not registered."""
    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            f"Tool {tool_name} not found",
            "UNKNOWN_TOOL", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.tool_name = tool_name


class InvalidStateTransitionError(MentorflowError):
    """Message status change not allowed by the lifecycle graph."""
    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot move message from '{current}' to '{target}'",
            "INVALID_STATE_TRANSITION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.current = current
        self.target = target


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(MentorflowError):
    """Underlying store operation failed. Not retried by this core."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class ToolExecutionError(MentorflowError):
    """A registered tool reported failure."""
    def __init__(self, tool_name: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            message, "TOOL_EXECUTION_ERROR", ErrorCategory.TOOL,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.tool_name = tool_name


class AnthropicAPIError(MentorflowError):
    """Anthropic API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Anthropic API error ({api_error_type}): {message}",
            "ANTHROPIC_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type
