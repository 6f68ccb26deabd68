"""
Go toolchain discovery and version tokens.
"""
from releasetour.toolchain.version import (
    VersionToken,
    is_valid_token,
    parse_token,
    compare_tokens,
    is_at_least,
    sort_tokens,
)
from releasetour.toolchain.registry import (
    ToolchainEntry,
    ToolchainRegistry,
    probe_toolchain,
    parse_full_version,
)

__all__ = [
    "VersionToken",
    "is_valid_token",
    "parse_token",
    "compare_tokens",
    "is_at_least",
    "sort_tokens",
    "ToolchainEntry",
    "ToolchainRegistry",
    "probe_toolchain",
    "parse_full_version",
]
