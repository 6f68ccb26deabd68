"""
Configuration module for Release Tour.
"""
from releasetour.config.logging import setup_logging
from releasetour.config.defaults import (
    EXECUTOR_DEFAULTS,
    TOOLCHAIN_DEFAULTS,
    SERVER_DEFAULTS,
    ExecutorDefaults,
    ToolchainDefaults,
    get_default_toolchains,
)

__all__ = [
    "setup_logging",
    "EXECUTOR_DEFAULTS",
    "TOOLCHAIN_DEFAULTS",
    "SERVER_DEFAULTS",
    "ExecutorDefaults",
    "ToolchainDefaults",
    "get_default_toolchains",
]
