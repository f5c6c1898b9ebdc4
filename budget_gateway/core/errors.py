"""Error Hierarchy: typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors (400) are raised before the client is touched
    - to_response() produces the flat envelope {"error": <message>, ...extras}
    - Client operation messages are forwarded verbatim; internal faults never are

Design Decisions:
    - Single hierarchy with GatewayError base: one FastAPI handler catches all
    - Flat {"error": "..."} envelope: existing Actual REST consumers parse this shape
"""

from dataclasses import dataclass
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and logging."""
    VALIDATION = "validation"
    BOOTSTRAP = "bootstrap"
    EXTERNAL_CLIENT = "external_client"
    ROUTING = "routing"


@dataclass
class ErrorContext:
    """Request context attached to an error for logging."""
    operation: str | None = None
    path: str | None = None
    method: str | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

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
        """Convert to the REST error envelope."""
        return {"error": self.message}


# ─── Validation Errors (400-level) ──────────────────────────────

class MissingParameterError(GatewayError):
    """One or more required request parameters were absent."""
    def __init__(self, required: list[str], context: ErrorContext | None = None):
        noun = "parameter" if len(required) == 1 else "parameters"
        super().__init__(
            f"Missing required {noun}: {', '.join(required)}",
            "MISSING_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.required = required


class InvalidParameterError(GatewayError):
    """A request parameter had the wrong type."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class PayloadTooLargeError(GatewayError):
    """Request body exceeds the configured limit."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request body exceeds {limit} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit = limit


class EndpointNotFoundError(GatewayError):
    """No route matches the request path and method."""
    def __init__(self, path: str, method: str, context: ErrorContext | None = None):
        super().__init__(
            "Endpoint not found", "ENDPOINT_NOT_FOUND", ErrorCategory.ROUTING,
            ErrorSeverity.INFO, context, 404,
        )
        self.path = path
        self.method = method

    def to_response(self) -> dict:
        return {"error": self.message, "path": self.path, "method": self.method}


# ─── Client Errors (500-level) ──────────────────────────────────

class BudgetClientError(Exception):
    """Raised by BudgetClient implementations for domain failures.

    Kept outside the GatewayError hierarchy: adapters know nothing about
    HTTP, the forwarder turns these into ClientOperationError.
    """


class BootstrapError(GatewayError):
    """The budget client could not be started."""
    def __init__(self, details: str, context: ErrorContext | None = None):
        super().__init__(
            "Failed to initialize API", "BOOTSTRAP_FAILED",
            ErrorCategory.BOOTSTRAP, ErrorSeverity.CRITICAL, context, 500,
        )
        self.details = details

    def to_response(self) -> dict:
        return {"error": self.message, "details": self.details}


class ClientOperationError(GatewayError):
    """A forwarded client operation raised."""
    def __init__(self, operation: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            message, "CLIENT_OPERATION_FAILED", ErrorCategory.EXTERNAL_CLIENT,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.operation = operation


def describe_exception(exc: BaseException) -> str:
    """Message text for an exception, falling back to its type name."""
    return str(exc) or type(exc).__name__
