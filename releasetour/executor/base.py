"""
Request and result types for Go code execution.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from releasetour.exceptions import ErrorKind


@dataclass
class ExecutionRequest:
    code: str
    version: Optional[str] = None
    auto_detect: bool = False
    timeout: Optional[float] = None  # seconds; None means the executor default
    environment: Dict[str, str] = None
    env_vars: str = ""  # "GOEXPERIMENT=jsonv2,FOO=bar"
    working_dir: Optional[str] = None  # only used for version inference
    strict_version: bool = False

    def __post_init__(self):
        if self.environment is None:
            self.environment = {}


@dataclass(frozen=True)
class ExecutionResult:
    output: str = ""
    error: str = ""
    exit_code: int = 0
    execution_time: float = 0.0  # seconds
    used_version: str = ""
    go_version: str = ""
    version_path: str = ""
    detected_version: str = ""
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return not self.error

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "output": self.output,
            "exit_code": self.exit_code,
            "execution_time": self.execution_time,
            "go_version": self.go_version,
            "used_version": self.used_version,
        }
        if self.error:
            data["error"] = self.error
            data["error_kind"] = self.error_kind.value if self.error_kind else None
        if self.detected_version:
            data["detected_version"] = self.detected_version
        if self.version_path:
            data["version_path"] = self.version_path
        return data


@dataclass
class ProcessOutcome:
    """What a finished child process produced."""
    output: str
    exit_code: int
    elapsed: float
