"""
Custom exception hierarchy for Release Tour.

Every failure category of an execution has its own exception class and an
``ErrorKind``. The executor captures these into the returned result; only
environment-level errors (``ScratchDirectoryError``, ``ConfigurationError``)
propagate to the caller.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Failure taxonomy reported on execution results."""
    NOT_SUPPORTED = "not_supported"
    UNAVAILABLE = "unavailable"
    VERSION_INDETERMINATE = "version_indeterminate"
    VERSION_MISMATCH = "version_mismatch"
    VERSION_FEATURE_MISMATCH = "version_feature_mismatch"
    FORBIDDEN_CONSTRUCT = "forbidden_construct"
    EMPTY_SOURCE = "empty_source"
    IO_FAILURE = "io_failure"
    SPAWN_FAILURE = "spawn_failure"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"


class ReleaseTourError(Exception):
    """Base exception for all Release Tour errors."""

    kind: Optional[ErrorKind] = None
    exit_code: int = 1

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(ReleaseTourError):
    """Raised when a toolchain table or versions file is invalid."""
    pass


class ScratchDirectoryError(ReleaseTourError):
    """Raised when the scratch directory itself cannot be used."""

    def __init__(self, directory: str, cause: Optional[str] = None):
        message = f"Scratch directory unusable: {directory}"
        if cause:
            message = f"{message} - {cause}"
        super().__init__(message, {"directory": directory})
        self.directory = directory


class ToolchainError(ReleaseTourError):
    """Base exception for toolchain registry errors."""
    pass


class NotSupportedError(ToolchainError):
    kind = ErrorKind.NOT_SUPPORTED

    def __init__(self, version: str):
        super().__init__(f"Unsupported Go version: {version}", {"version": version})
        self.version = version


class UnavailableError(ToolchainError):
    kind = ErrorKind.UNAVAILABLE

    def __init__(self, version: str, path: Optional[str] = None):
        details = {"version": version}
        if path:
            details["path"] = path
        super().__init__(f"Go version {version} is not installed", details)
        self.version = version
        self.path = path


class ResolutionError(ReleaseTourError):
    """Base exception for version resolution errors."""
    pass


class VersionIndeterminateError(ResolutionError):
    kind = ErrorKind.VERSION_INDETERMINATE

    def __init__(self, reason: Optional[str] = None):
        message = "Could not determine Go version; an explicit version or a lesson path is required"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.reason = reason


class VersionMismatchError(ResolutionError):
    kind = ErrorKind.VERSION_MISMATCH

    def __init__(self, requested: str, resolved: str):
        super().__init__(
            f"Strict mode: requested version {requested} does not match resolved version {resolved}",
            {"requested": requested, "resolved": resolved},
        )
        self.requested = requested
        self.resolved = resolved


class ValidationError(ReleaseTourError):
    """Base exception for pre-execution validation errors."""
    pass


class EmptySourceError(ValidationError):
    kind = ErrorKind.EMPTY_SOURCE

    def __init__(self):
        super().__init__("Empty source code cannot be executed")


class ForbiddenConstructError(ValidationError):
    kind = ErrorKind.FORBIDDEN_CONSTRUCT

    def __init__(self, token: str):
        super().__init__(
            f"Code containing '{token}' cannot be executed for security reasons",
            {"token": token},
        )
        self.token = token


class VersionFeatureMismatchError(ValidationError):
    kind = ErrorKind.VERSION_FEATURE_MISMATCH

    def __init__(self, feature: str, required: str, resolved: str):
        super().__init__(
            f"Feature '{feature}' requires Go {required} or later (resolved: {resolved})",
            {"feature": feature, "required": required, "resolved": resolved},
        )
        self.feature = feature
        self.required = required
        self.resolved = resolved


class ExecutionError(ReleaseTourError):
    """Base exception for errors raised while running a submission."""
    pass


class ScratchIOError(ExecutionError):
    kind = ErrorKind.IO_FAILURE

    def __init__(self, path: str, operation: str, cause: Optional[str] = None):
        message = f"Scratch file {operation} failed: {path}"
        if cause:
            message = f"{message} - {cause}"
        super().__init__(message, {"path": path, "operation": operation})
        self.path = path
        self.operation = operation


class SpawnFailureError(ExecutionError):
    kind = ErrorKind.SPAWN_FAILURE

    def __init__(self, path: str, cause: Optional[str] = None):
        message = f"Failed to start toolchain: {path}"
        if cause:
            message = f"{message} - {cause}"
        super().__init__(message, {"path": path})
        self.path = path


class ExecutionTimeoutError(ExecutionError):
    kind = ErrorKind.TIMEOUT
    exit_code = 124

    def __init__(self, timeout: float):
        super().__init__(f"Execution timed out ({timeout:g}s)", {"timeout": timeout})
        self.timeout = timeout


class NonZeroExitError(ExecutionError):
    kind = ErrorKind.NON_ZERO_EXIT

    def __init__(self, exit_code: int):
        super().__init__(f"exit status {exit_code}")
        self.exit_code = exit_code
