"""
Version resolution: path and code detectors plus the precedence policy.
"""
from releasetour.resolver.detectors import (
    CodeDetector,
    PathDetector,
    LessonInfo,
)
from releasetour.resolver.resolver import (
    Resolution,
    ResolutionSource,
    VersionResolver,
)

__all__ = [
    "CodeDetector",
    "PathDetector",
    "LessonInfo",
    "Resolution",
    "ResolutionSource",
    "VersionResolver",
]
