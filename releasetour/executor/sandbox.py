"""
Subprocess-based execution of Go source files.

Runs ``<go> run <file>`` as a child process in its own process group and
races it against a wall-clock deadline. When the deadline wins, the whole
group is killed (``go run`` forks the compiled binary, so killing only the
direct child is not enough) and any partial output is discarded.

This provides a hard timeout only; there are no resource limits, syscall
filtering or namespace isolation here.
"""
import logging
import os
import signal
import subprocess
import time
from typing import Dict, List, Mapping, Optional

from releasetour.config.defaults import EXECUTOR_DEFAULTS
from releasetour.exceptions import ExecutionTimeoutError, SpawnFailureError
from releasetour.executor.base import ProcessOutcome

logger = logging.getLogger(__name__)

# Grace period for draining pipes after the process group is killed.
_REAP_TIMEOUT = 5.0


def parse_env_vars(env_vars: str) -> List[str]:
    """Split a raw ``"A=1,B=2"`` string into ``KEY=VALUE`` pairs."""
    if not env_vars:
        return []
    return [pair.strip() for pair in env_vars.split(",") if pair.strip()]


def _is_legal_entry(key: str, value: str) -> bool:
    """Names must be non-empty without ``=``; neither part may hold a NUL."""
    return bool(key) and "=" not in key and "\0" not in key and "\0" not in value


def build_environment(
    environment: Optional[Mapping[str, str]] = None,
    env_vars: str = "",
    base: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Parent environment, then key/value overrides, then raw pairs.

    Later entries win, so a raw ``KEY=VALUE`` pair overrides both the parent
    environment and ``environment``. Entries the OS would refuse are skipped
    with a warning.
    """
    env = dict(os.environ if base is None else base)
    for key, value in (environment or {}).items():
        key, value = str(key), str(value)
        if not _is_legal_entry(key, value):
            logger.warning(f"Ignoring illegal environment override {key!r}")
            continue
        env[key] = value
    for pair in parse_env_vars(env_vars):
        key, sep, value = pair.partition("=")
        if not sep or not _is_legal_entry(key, value):
            logger.warning(f"Ignoring malformed environment entry {pair!r}")
            continue
        env[key] = value
        logger.debug(f"Added environment variable: {pair}")
    return env


class SubprocessSandbox:
    """Run a toolchain against a source file with a hard timeout."""

    def __init__(self, timeout: float = EXECUTOR_DEFAULTS.timeout):
        self.timeout = timeout

    def run(
        self,
        toolchain_path: str,
        source_path: str,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> ProcessOutcome:
        """Execute ``<toolchain_path> run <source_path>``.

        Returns:
            Combined stdout/stderr, exit code and elapsed time. A child killed
            by a signal reports exit code 1.

        Raises:
            SpawnFailureError: If the child could not be started.
            ExecutionTimeoutError: If the deadline expired first.
        """
        start = time.monotonic()
        try:
            process = subprocess.Popen(
                [toolchain_path, "run", source_path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                env=dict(env) if env is not None else None,
                cwd=cwd,
                start_new_session=hasattr(os, "setsid"),
            )
        except (OSError, ValueError) as e:
            raise SpawnFailureError(toolchain_path, str(e)) from e

        with process:
            try:
                output, _ = process.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired:
                self._kill(process)
                logger.info(f"Killed {source_path} after {self.timeout:g}s timeout")
                raise ExecutionTimeoutError(self.timeout)

        exit_code = process.returncode
        if exit_code is None or exit_code < 0:
            exit_code = EXECUTOR_DEFAULTS.failure_exit_code
        return ProcessOutcome(
            output=output or "",
            exit_code=exit_code,
            elapsed=time.monotonic() - start,
        )

    def _kill(self, process: subprocess.Popen) -> None:
        try:
            if hasattr(os, "killpg"):
                os.killpg(os.getpgid(process.pid), signal.SIGKILL)
            else:
                process.kill()
        except ProcessLookupError:
            pass
        try:
            process.communicate(timeout=_REAP_TIMEOUT)
        except subprocess.TimeoutExpired:
            # something outside the group still holds the pipe open
            process.kill()
        process.wait()
