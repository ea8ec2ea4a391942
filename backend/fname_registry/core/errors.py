"""Error Hierarchy - typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Transfer rejections (400-level) are caller faults; infrastructure errors
      (500-level) are critical and never translated into the rejection taxonomy
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FnameRegistryError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - TransferValidationError carries an ErrorCode enum so callers branch on
      exc.code, never on the message text
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from fname_registry.core.domain_types import ErrorCode


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    username: str | None = None
    fid: int | None = None
    transfer_id: int | None = None


class FnameRegistryError(Exception):
    """Base exception for all registry errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "username": self.context.username,
                    "fid": self.context.fid,
                    "transfer_id": self.context.transfer_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

_REJECTION_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.UNAUTHORIZED: "Caller is not authorized to submit transfers",
    ErrorCode.INVALID_SIGNATURE: "Signature does not match the authorized verifier",
    ErrorCode.INVALID_USERNAME: "Username is not a valid fname",
    ErrorCode.TOO_MANY_NAMES: "Destination fid already holds a username",
    ErrorCode.USERNAME_TAKEN: "Username is already registered",
    ErrorCode.USERNAME_NOT_FOUND: "Username has no current holder",
    ErrorCode.INVALID_TIMESTAMP: "Timestamp is in the future or older than the latest transfer",
}


class TransferValidationError(FnameRegistryError):
    """Proposed transfer rejected by one of the validation checks."""
    def __init__(self, error_code: ErrorCode, context: ErrorContext | None = None):
        unauthorized = error_code == ErrorCode.UNAUTHORIZED
        super().__init__(
            f"Validation error: {error_code.value}",
            error_code.value,
            ErrorCategory.AUTHORIZATION if unauthorized else ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 401 if unauthorized else 400,
        )
        self.error_code = error_code
        self.detail = _REJECTION_MESSAGES[error_code]

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["detail"] = self.detail
        return response


class ResourceNotFoundError(FnameRegistryError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class QueryParameterError(FnameRegistryError):
    """Query string is missing a required selector."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(FnameRegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConfigurationError(FnameRegistryError):
    """Required process configuration is missing or invalid."""
    def __init__(self, setting: str, context: ErrorContext | None = None):
        super().__init__(
            f"{setting} missing or invalid",
            "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting
