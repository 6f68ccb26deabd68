"""
Multi-version Go code executor.

``Executor.run`` takes a request through resolution, toolchain lookup,
strict-version check, validation and a timeout-bound child process, and
always answers with an ``ExecutionResult``. Failures of any stage are
reported in the result instead of being raised, so callers can tell "could
not run the submission" (error set, no output) apart from "the submission
ran and failed" (non-zero exit, output present).
"""
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from releasetour.config.defaults import EXECUTOR_DEFAULTS
from releasetour.exceptions import (
    ErrorKind,
    NonZeroExitError,
    ReleaseTourError,
    VersionMismatchError,
)
from releasetour.executor.base import ExecutionRequest, ExecutionResult
from releasetour.executor.sandbox import SubprocessSandbox, build_environment
from releasetour.executor.scratch import ensure_scratch_dir, scratch_file
from releasetour.executor.validator import SafetyValidator
from releasetour.observability import metrics
from releasetour.resolver.resolver import VersionResolver
from releasetour.toolchain.registry import ToolchainEntry, ToolchainRegistry

logger = logging.getLogger(__name__)


@dataclass
class _RunState:
    """Fields of the result collected while a run progresses."""
    output: str = ""
    exit_code: int = 0
    used_version: str = ""
    go_version: str = ""
    version_path: str = ""
    detected_version: str = ""
    error: str = ""
    error_kind: Optional[ErrorKind] = None

    def fail(self, exc: ReleaseTourError) -> None:
        self.error = exc.message
        self.error_kind = exc.kind
        self.exit_code = exc.exit_code
        if exc.kind != ErrorKind.NON_ZERO_EXIT:
            self.output = ""

    def to_result(self, elapsed: float) -> ExecutionResult:
        return ExecutionResult(
            output=self.output,
            error=self.error,
            exit_code=self.exit_code,
            execution_time=elapsed,
            used_version=self.used_version,
            go_version=self.go_version,
            version_path=self.version_path,
            detected_version=self.detected_version,
            error_kind=self.error_kind,
        )


class Executor:
    """Runs Go code with the toolchain version a request resolves to.

    Holds no per-call state; one instance serves any number of concurrent
    callers. Each call gets its own scratch file and child process.
    """

    def __init__(
        self,
        registry: ToolchainRegistry,
        resolver: Optional[VersionResolver] = None,
        validator: Optional[SafetyValidator] = None,
        scratch_dir: Optional[str] = None,
        default_timeout: float = EXECUTOR_DEFAULTS.timeout,
    ):
        self.registry = registry
        self.resolver = resolver or VersionResolver(registry)
        self.validator = validator or SafetyValidator()
        self.scratch_dir = ensure_scratch_dir(scratch_dir or EXECUTOR_DEFAULTS.scratch_dir)
        self.default_timeout = default_timeout

    def run(self, request: ExecutionRequest) -> ExecutionResult:
        start = time.monotonic()
        state = _RunState()
        try:
            self._run(request, state)
        except ReleaseTourError as e:
            state.fail(e)
        elapsed = time.monotonic() - start

        if state.error:
            logger.info(
                f"Execution failed ({state.error_kind.value}) "
                f"version={state.used_version or '-'}: {state.error}"
            )
        else:
            logger.info(f"Execution succeeded version={state.used_version} in {elapsed:.3f}s")
        metrics.record_execution(
            state.used_version,
            state.error_kind.value if state.error_kind else "success",
            elapsed,
        )
        return state.to_result(elapsed)

    def _run(self, request: ExecutionRequest, state: _RunState) -> None:
        if request.auto_detect:
            state.detected_version = self.resolver.detect_from_code(request.code) or ""

        resolution = self.resolver.resolve(request)
        state.used_version = resolution.version

        entry = self.registry.get_entry(resolution.version)
        state.version_path = entry.path
        state.go_version = entry.full_version

        if request.strict_version and request.version and request.version != resolution.version:
            raise VersionMismatchError(request.version, resolution.version)

        self.validator.validate(request.code, resolution.version)

        self._execute(request, entry, state)

    def _execute(self, request: ExecutionRequest, entry: ToolchainEntry, state: _RunState) -> None:
        timeout = request.timeout if request.timeout is not None else self.default_timeout
        sandbox = SubprocessSandbox(timeout=timeout)
        env = build_environment(request.environment, request.env_vars)

        with scratch_file(self.scratch_dir, request.code) as path:
            logger.debug(f"Running {path} with Go {entry.version} ({entry.path})")
            with metrics.ExecutionTimer():
                # the child always runs in the scratch directory, never in working_dir
                outcome = sandbox.run(entry.path, path, env=env, cwd=self.scratch_dir)

        state.output = outcome.output
        state.exit_code = outcome.exit_code
        if outcome.exit_code != 0:
            state.fail(NonZeroExitError(outcome.exit_code))

    def run_with_version(self, code: str, version: str) -> ExecutionResult:
        return self.run(ExecutionRequest(
            code=code,
            version=version,
            timeout=EXECUTOR_DEFAULTS.timeout,
            strict_version=True,
        ))

    def run_with_auto_detect(self, code: str) -> ExecutionResult:
        return self.run(ExecutionRequest(
            code=code,
            auto_detect=True,
            timeout=EXECUTOR_DEFAULTS.timeout,
        ))

    def supported_versions(self) -> List[str]:
        return self.registry.list_available()

    def version_info(self) -> Dict[str, ToolchainEntry]:
        return self.registry.all_entries()
