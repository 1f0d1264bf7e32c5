"""
Error classes for opsynth.

The taxonomy separates problems the caller can fix from problems in the
downstream call:
- RequestError: fix your request (bad descriptor, wrong call order, unknown op)
- ExecutionError: the generator or the generated call broke

Error handling contract:
- Errors are exceptions, not values
- Validation and initialization errors are raised before any side effect
- ExecutionError messages carry only the underlying cause text
- Binding problems are never raised (see opsynth.engine.binder.BindingWarning)
"""


class OpsynthError(Exception):
    """Base exception for opsynth."""
    pass


class RequestError(OpsynthError):
    """
    Client-input or state error - fix the request and try again.

    Examples:
    - Missing or malformed URL
    - Missing operationId
    - Invoking before the catalog was built
    - Operation id that matches nothing in the catalog
    """
    pass


class ExecutionError(OpsynthError):
    """
    Execution error - the downstream call or generator failed.

    Reported once; opsynth performs no retries.
    """
    pass


class ValidationError(RequestError):
    """Raised when a descriptor is malformed (URL, operationId)."""
    pass


class NotInitialized(RequestError):
    """Raised when invoking before the catalog and transport are built."""

    def __init__(self, message: str = "Surface catalog not built. Call generate first."):
        super().__init__(message)


class SurfaceNotFound(RequestError):
    """Raised when the generated client package cannot be located or loaded."""
    pass


class OperationNotFound(RequestError):
    """
    Raised when an operation id matches no catalog entry.

    Attributes:
        operation_id: The id that was requested
        available: Every catalog name, for diagnostics
    """

    def __init__(self, operation_id: str, available: list[str]):
        self.operation_id = operation_id
        self.available = list(available)
        super().__init__(
            f"No operation found for operationId: {operation_id}. "
            f"Available: {self.available}"
        )


class InvocationFailed(ExecutionError):
    """
    Raised when the underlying generated call raises.

    The message is the innermost cause text, never a stack trace.
    """

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        super().__init__(message)


class GenerationError(ExecutionError):
    """Raised when the external code generator exits with an error."""

    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)
