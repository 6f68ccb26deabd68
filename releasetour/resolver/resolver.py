"""
Version resolution policy.

Exactly one version token is chosen per request by trying strategies in a
fixed order, first match wins:

1. the explicit version on the request, verbatim;
2. the path hint (``working_dir``), matched against the lesson layout;
3. only when auto-detection is requested, markers in the source text.

Results of different strategies are never merged.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from releasetour.exceptions import VersionIndeterminateError
from releasetour.resolver.detectors import CodeDetector, PathDetector

if TYPE_CHECKING:
    from releasetour.executor.base import ExecutionRequest
    from releasetour.toolchain.registry import ToolchainEntry, ToolchainRegistry

logger = logging.getLogger(__name__)


class ResolutionSource(str, Enum):
    EXPLICIT = "explicit"
    PATH = "path"
    CODE = "code"


@dataclass(frozen=True)
class Resolution:
    version: str
    source: ResolutionSource


class VersionResolver:
    """Picks the Go version for a request.

    The registry, when given, is only consulted by ``resolve_entry`` to check
    that the chosen token exists; ``resolve`` itself is pure text analysis.
    """

    def __init__(
        self,
        registry: Optional["ToolchainRegistry"] = None,
        path_detector: Optional[PathDetector] = None,
        code_detector: Optional[CodeDetector] = None,
    ):
        self._registry = registry
        self._paths = path_detector or PathDetector()
        self._code = code_detector or CodeDetector()

    def resolve(self, request: "ExecutionRequest") -> Resolution:
        if request.version:
            logger.debug(f"Using explicit version {request.version}")
            return Resolution(request.version, ResolutionSource.EXPLICIT)

        if request.working_dir:
            try:
                version = self._paths.extract_version_from_path(request.working_dir)
                logger.debug(f"Version {version} from path hint {request.working_dir}")
                return Resolution(version, ResolutionSource.PATH)
            except VersionIndeterminateError as e:
                logger.debug(f"Path hint gave no version: {e}")

        if request.auto_detect:
            version = self.detect_from_code(request.code)
            if version is not None:
                return Resolution(version, ResolutionSource.CODE)
        else:
            logger.debug("Auto-detection disabled")

        raise VersionIndeterminateError()

    def detect_from_code(self, code: str) -> Optional[str]:
        found = self._code.match(code)
        if found is None:
            logger.debug(f"No version marker in code ({len(code or '')} chars)")
            return None
        pattern_name, version = found
        logger.debug(f"Version {version} from code ({pattern_name})")
        return version

    def resolve_entry(self, request: "ExecutionRequest") -> Tuple[Resolution, "ToolchainEntry"]:
        """Resolve a token and look up its toolchain.

        Raises:
            VersionIndeterminateError, NotSupportedError, UnavailableError
        """
        if self._registry is None:
            raise RuntimeError("VersionResolver has no registry to look up toolchains")
        resolution = self.resolve(request)
        return resolution, self._registry.get_entry(resolution.version)
