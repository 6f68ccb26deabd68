"""
Centralized configuration defaults for Release Tour.

This module provides a single source of truth for all default configurations
used by the execution engine.
"""
import tempfile
from dataclasses import dataclass, field
from typing import Dict


def _default_toolchains() -> Dict[str, str]:
    return {
        "1.18": "/opt/go1.18/bin/go",
        "1.19": "/opt/go1.19/bin/go",
        "1.20": "/opt/go1.20/bin/go",
        "1.21": "/opt/go1.21/bin/go",
        "1.22": "/opt/go1.22/bin/go",
        "1.23": "/opt/go1.23/bin/go",
        "1.24": "/opt/go1.24/bin/go",
        "1.25": "/opt/go1.25/bin/go",
    }


@dataclass(frozen=True)
class ExecutorDefaults:
    """Default execution configuration."""
    timeout: float = 30.0  # seconds
    scratch_dir: str = field(default_factory=tempfile.gettempdir)
    file_prefix: str = "gocode_"
    file_suffix: str = ".go"
    timeout_exit_code: int = 124
    failure_exit_code: int = 1


@dataclass(frozen=True)
class ToolchainDefaults:
    """Default toolchain discovery configuration."""
    probe_timeout: float = 10.0  # seconds for `go version`
    toolchains: Dict[str, str] = field(default_factory=_default_toolchains)


@dataclass(frozen=True)
class ServerDefaults:
    """Default process-level configuration."""
    log_level: str = "INFO"
    metrics_exporter: str = "none"
    service_name: str = "releasetour"


# Global default instances
EXECUTOR_DEFAULTS = ExecutorDefaults()
TOOLCHAIN_DEFAULTS = ToolchainDefaults()
SERVER_DEFAULTS = ServerDefaults()


def get_default_toolchains() -> Dict[str, str]:
    """Get the default version token -> toolchain path table as a new dict."""
    return dict(TOOLCHAIN_DEFAULTS.toolchains)
