"""
Toolchain registry for multi-version Go execution.

Discovers the installed Go toolchains once, then serves concurrent lookups.
A toolchain counts as available only if its binary exists and actually runs
``<path> version`` successfully.
"""
import logging
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from releasetour.config.defaults import TOOLCHAIN_DEFAULTS, get_default_toolchains
from releasetour.exceptions import NotSupportedError, UnavailableError
from releasetour.toolchain.version import sort_tokens, is_valid_token
from releasetour.utils.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

# "go version go1.18.10 linux/amd64" -> "1.18.10"
FULL_VERSION_PATTERN = re.compile(r"go(\d+\.\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class ToolchainEntry:
    version: str
    path: str
    full_version: str = ""
    available: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "path": self.path,
            "full_version": self.full_version,
            "available": self.available,
        }


def probe_toolchain(path: str, timeout: float) -> Optional[str]:
    """Run ``<path> version`` and return its output, or None if it does not run."""
    if not os.path.exists(path):
        return None
    try:
        completed = subprocess.run(
            [path, "version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Toolchain probe timed out after {timeout}s: {path}")
        return None
    except OSError as e:
        logger.warning(f"Toolchain probe failed to start {path}: {e}")
        return None
    if completed.returncode != 0:
        logger.warning(f"Toolchain probe exited with {completed.returncode}: {path}")
        return None
    return completed.stdout


def parse_full_version(output: str) -> str:
    match = FULL_VERSION_PATTERN.search(output or "")
    return match.group(1) if match else ""


class ToolchainRegistry:
    """Thread-safe registry of Go toolchains keyed by version token.

    Discovery runs once, lazily on first lookup or explicitly through
    ``initialize()``; ``reload()`` repeats it.
    """

    def __init__(
        self,
        candidates: Optional[Mapping[str, str]] = None,
        probe_timeout: float = TOOLCHAIN_DEFAULTS.probe_timeout,
    ):
        self._candidates: Dict[str, str] = dict(
            candidates if candidates is not None else get_default_toolchains()
        )
        self._probe_timeout = probe_timeout
        self._entries: Dict[str, ToolchainEntry] = {}
        self._lock = ReadWriteLock()
        self._initialized = False

    @classmethod
    def from_versions_file(cls, path: str, **kwargs) -> "ToolchainRegistry":
        from releasetour.config.versions import load_versions_file
        return cls(load_versions_file(path).toolchain_table(), **kwargs)

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def candidates(self) -> Dict[str, str]:
        return dict(self._candidates)

    def initialize(self) -> None:
        """Discover toolchains. Only the first call does any work."""
        with self._lock.write_locked():
            if self._initialized:
                return
            self._discover()

    def reload(self) -> None:
        """Re-run discovery, replacing every entry."""
        with self._lock.write_locked():
            self._discover()

    def _discover(self) -> None:
        entries = {}
        for version, path in self._candidates.items():
            if not is_valid_token(version):
                logger.warning(f"Skipping malformed version token {version!r}")
                continue
            output = probe_toolchain(path, self._probe_timeout)
            entry = ToolchainEntry(
                version=version,
                path=path,
                full_version=parse_full_version(output) if output is not None else "",
                available=output is not None,
            )
            if entry.available and not entry.full_version:
                logger.warning(f"Could not parse version output of {path}: {output!r}")
            entries[version] = entry
        self._entries = entries
        self._initialized = True

        available = [v for v, e in entries.items() if e.available]
        logger.info(
            f"Toolchain discovery complete: {len(available)}/{len(entries)} available "
            f"({', '.join(sort_tokens(available)) or 'none'})"
        )

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def get_entry(self, version: str) -> ToolchainEntry:
        """Look up a toolchain.

        Raises:
            NotSupportedError: If the token is not configured.
            UnavailableError: If the toolchain is configured but does not run.
        """
        self._ensure_initialized()
        with self._lock.read_locked():
            entry = self._entries.get(version)
        if entry is None:
            raise NotSupportedError(version)
        if not entry.available:
            raise UnavailableError(version, entry.path)
        return entry

    def list_available(self) -> List[str]:
        self._ensure_initialized()
        with self._lock.read_locked():
            available = [v for v, e in self._entries.items() if e.available]
        return sort_tokens(available)

    def all_entries(self) -> Dict[str, ToolchainEntry]:
        self._ensure_initialized()
        with self._lock.read_locked():
            return dict(self._entries)

    def status(self) -> Dict[str, Any]:
        entries = self.all_entries()
        return {
            "total_versions": len(entries),
            "available_versions": sum(1 for e in entries.values() if e.available),
            "multi_version_support": True,
            "explicit_version_required": True,
            "versions": {v: e.to_dict() for v, e in entries.items()},
        }
