"""
Executor module for Release Tour.

Resolves a Go version for each request, validates the submission and runs it
under the matching toolchain with a hard timeout.
"""
from releasetour.executor.base import (
    ExecutionRequest,
    ExecutionResult,
    ProcessOutcome,
)
from releasetour.executor.validator import (
    SafetyValidator,
    DENY_LIST,
    FEATURE_REQUIREMENTS,
    check_feature_support,
    detect_features,
)
from releasetour.executor.scratch import scratch_file, scratch_filename, ensure_scratch_dir
from releasetour.executor.sandbox import SubprocessSandbox, build_environment, parse_env_vars
from releasetour.executor.executor import Executor

__all__ = [
    "ExecutionRequest",
    "ExecutionResult",
    "ProcessOutcome",
    "SafetyValidator",
    "DENY_LIST",
    "FEATURE_REQUIREMENTS",
    "check_feature_support",
    "detect_features",
    "scratch_file",
    "scratch_filename",
    "ensure_scratch_dir",
    "SubprocessSandbox",
    "build_environment",
    "parse_env_vars",
    "Executor",
]
