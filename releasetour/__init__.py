"""
Release Tour - run Go code under any of several installed Go versions.
"""
from releasetour.executor import (
    Executor,
    ExecutionRequest,
    ExecutionResult,
    SafetyValidator,
)
from releasetour.resolver import VersionResolver
from releasetour.toolchain import ToolchainRegistry, ToolchainEntry, VersionToken

__version__ = "1.0.0"

__all__ = [
    "Executor",
    "ExecutionRequest",
    "ExecutionResult",
    "SafetyValidator",
    "VersionResolver",
    "ToolchainRegistry",
    "ToolchainEntry",
    "VersionToken",
]
