"""
Pre-execution safety validation for submitted Go code.

This is a heuristic textual filter that rejects obviously dangerous or
version-incompatible submissions before any process is spawned. It is not an
isolation boundary: a determined submission can get around substring checks,
and real isolation (restricted user, namespaces, resource limits) has to come
from the environment the executor runs in.
"""
import logging
import re
from typing import Iterable, List, Optional, Tuple

from releasetour.exceptions import (
    EmptySourceError,
    ForbiddenConstructError,
    VersionFeatureMismatchError,
)
from releasetour.toolchain.version import is_at_least, parse_token

logger = logging.getLogger(__name__)

# Matched case-insensitively, in this order, so the more specific token is
# reported when one contains another.
DENY_LIST = [
    "os.RemoveAll",
    "os.Remove",
    "exec.Command",
    "os.StartProcess",
    "syscall",
    "unsafe",
    "//go:linkname",
]

# Minimum Go version per named feature. "structured-logging" names the
# lesson topic; importing log/slog itself only needs "slog-package".
FEATURE_REQUIREMENTS = {
    "generics": "1.18",
    "workspace": "1.18",
    "type-parameters": "1.18",
    "atomic-types": "1.19",
    "memory-arenas": "1.19",
    "comparable-types": "1.20",
    "slice-to-array": "1.20",
    "errors-join": "1.20",
    "builtin-functions": "1.21",
    "slices-package": "1.21",
    "maps-package": "1.21",
    "slog-package": "1.21",
    "for-range-int": "1.22",
    "enhanced-routing": "1.22",
    "loop-variables": "1.22",
    "math-rand-v2": "1.22",
    "structured-logging": "1.23",
    "iterators": "1.23",
    "generic-aliases": "1.24",
    "swiss-tables": "1.24",
    "weak-pointers": "1.24",
    "crypto-mlkem": "1.24",
    "container-gomaxprocs": "1.25",
    "synctest": "1.25",
    "json-v2": "1.25",
}

# Features that can be recognized in source text.
FEATURE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("generics", re.compile(r"\[\s*\w+(?:\s*,\s*\w+)*\s+(?:any|comparable|interface\s*\{|~|constraints\.)")),
    ("generics", re.compile(r"\[\s*\w+\s+\w+(?:\s*\|\s*~?\w+)+\s*\]")),
    # func Max[T Ordered](a, b T) T
    ("generics", re.compile(r"\bfunc\s+(?:\([^)]*\)\s*)?\w+\s*\[[^\]\n]+\]\s*\(")),
    # type Set[T Key] map[T]struct{}
    ("generics", re.compile(r"\btype\s+\w+\s*\[\s*\w+(?:\s*,\s*\w+)*\s+[\w.]+\s*(?:,[^\]\n]*)?\]")),
    ("atomic-types", re.compile(r"\batomic\.(?:Bool|Int32|Int64|Uint32|Uint64|Uintptr|Pointer)\b")),
    ("errors-join", re.compile(r"\berrors\.Join\(")),
    ("slices-package", re.compile(r'"slices"')),
    ("maps-package", re.compile(r'"maps"')),
    ("slog-package", re.compile(r'"log/slog"')),
    ("for-range-int", re.compile(r"\bfor\s+(?:\w+\s*:=\s*)?range\s+\d+\s*\{")),
    ("math-rand-v2", re.compile(r'"math/rand/v2"')),
    ("iterators", re.compile(r'"iter"')),
    ("weak-pointers", re.compile(r'"weak"')),
    ("crypto-mlkem", re.compile(r'"crypto/mlkem"')),
    ("synctest", re.compile(r'"testing/synctest"')),
    ("json-v2", re.compile(r'"encoding/json/v2"')),
]


def detect_features(code: str) -> List[str]:
    """Names of the version-dependent features used in ``code``, in table order."""
    found = []
    for feature, pattern in FEATURE_PATTERNS:
        if feature not in found and pattern.search(code):
            found.append(feature)
    return found


def find_forbidden(code: str, deny_list: Iterable[str] = DENY_LIST) -> Optional[str]:
    lowered = code.lower()
    for token in deny_list:
        if token.lower() in lowered:
            return token
    return None


def check_feature_support(version: str, features: Iterable[str]) -> None:
    """Fail if any named feature needs a newer Go than ``version``.

    Unknown feature names are treated as supported.

    Raises:
        VersionFeatureMismatchError: For the first unsupported feature.
    """
    for feature in features:
        required = FEATURE_REQUIREMENTS.get(feature)
        if required is None:
            continue
        if not is_at_least(version, required):
            raise VersionFeatureMismatchError(feature, required, version)


class SafetyValidator:
    """Rejects unsafe or malformed submissions.

    Checks, in order: empty source, deny-listed constructs, and features
    newer than the resolved version.
    """

    def __init__(self, deny_list: Optional[Iterable[str]] = None):
        self.deny_list = list(deny_list) if deny_list is not None else list(DENY_LIST)

    def validate(self, code: str, version: Optional[str] = None) -> None:
        if not code or not code.strip():
            raise EmptySourceError()

        token = find_forbidden(code, self.deny_list)
        if token is not None:
            logger.warning(f"Rejected submission containing forbidden construct '{token}'")
            raise ForbiddenConstructError(token)

        # Tokens that do not parse cannot be compared; the registry rejects them.
        if version and parse_token(version) is not None:
            check_feature_support(version, detect_features(code))
