"""
Custom Exceptions.

Probe-specific exception classes for consistent error handling.
Every failure the probe reports to the operator derives from ApplicationError;
the entry point turns them into an UNKNOWN exit status.
"""


class ApplicationError(Exception):
    """Base exception for all probe errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class MalformedInputError(ApplicationError):
    """Raised when command-line input, a service URL or an object name is malformed."""

    def __init__(self, message: str = "Malformed input") -> None:
        super().__init__(message, code="VAL_MALFORMED_INPUT")


class EndpointConnectionError(ApplicationError):
    """Raised when the management endpoint cannot be reached."""

    def __init__(
        self, message: str = "Error opening connection", code: str = "SYS_CONNECTION_ERROR",
    ) -> None:
        super().__init__(message, code=code)


class AuthenticationError(EndpointConnectionError):
    """Raised when the management endpoint rejects the credentials."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class NotFoundError(ApplicationError):
    """Raised when an object name pattern matches no MBean."""

    def __init__(self, message: str = "Resource not found", code: str = "RES_NOT_FOUND") -> None:
        super().__init__(message, code=code)


class InstanceNotFoundError(NotFoundError):
    """Raised when the target MBean is not registered at invocation time."""

    def __init__(self, message: str = "MBean instance not found") -> None:
        super().__init__(message, code="RES_INSTANCE_NOT_FOUND")


class AmbiguousTargetError(ApplicationError):
    """Raised when an object name pattern matches more than one MBean."""

    def __init__(self, message: str = "Object name not unique") -> None:
        super().__init__(message, code="RES_AMBIGUOUS")


class InvocationError(ApplicationError):
    """Raised when the remote operation fails on the endpoint."""

    def __init__(self, message: str = "Error invoking operation", error_type: str | None = None) -> None:
        self.error_type = error_type
        super().__init__(message, code="SYS_INVOCATION_ERROR")


class UnsupportedResultTypeError(ApplicationError):
    """Raised when an operation returns a value the interpreter cannot classify."""

    def __init__(self, message: str = "Type of return value not supported") -> None:
        super().__init__(message, code="VAL_UNSUPPORTED_RESULT")
