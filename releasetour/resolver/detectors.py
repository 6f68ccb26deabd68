"""
Version detection from lesson paths and from Go source text.

Lessons live under ``releases/v/<major.minor>/<file>.go``, so the directory
layout alone identifies the Go version a lesson targets. Source text can be
sniffed as a fallback, but free text is ambiguous: the first pattern that
matches decides, using its first matching line. A comment line naming several
versions yields the last one on that line.
"""
import glob
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from releasetour.exceptions import VersionIndeterminateError
from releasetour.toolchain.version import TOKEN_PATTERN, is_valid_token, sort_tokens

RELEASE_PATH_PATTERN = re.compile(r"(?:^|/)releases/v/(\d+\.\d+)(?:/|$)")

# Tried in order; the first pattern with any match wins.
CODE_PATTERNS = [
    # releases/v/1.18/01_generics.go mentioned anywhere
    ("release_path", re.compile(r"releases/v/(\d+\.\d+)/")),
    # // Go 1.24 新機能: Generic Type Aliases
    ("qualified_comment", re.compile(r"//[^\n]*\bGo\s+(\d+\.\d+)(?=[\s:]|新機能)")),
    # // Go 1.18 generics
    ("comment", re.compile(r"//[^\n]*\bGo\s+(\d+\.\d+)")),
    # // GO_VERSION: 1.18
    ("legacy_tag", re.compile(r"//\s*GO_VERSION:\s*(\d+\.\d+)")),
]


@dataclass(frozen=True)
class LessonInfo:
    version: str
    filename: str
    lesson_name: str
    full_path: str


class PathDetector:
    """Detects Go versions from lesson file paths and identifiers."""

    def extract_version_from_path(self, file_path: str) -> str:
        if not file_path:
            raise VersionIndeterminateError("empty path")
        normalized = file_path.replace("\\", "/")
        match = RELEASE_PATH_PATTERN.search(normalized)
        if match is None or not is_valid_token(match.group(1)):
            raise VersionIndeterminateError(f"no version in path: {file_path}")
        return match.group(1)

    def extract_version_from_lesson_id(self, lesson_id: str) -> str:
        """Version of a lesson id such as ``"1.18/01_generics"``."""
        if not lesson_id:
            raise VersionIndeterminateError("empty lesson id")
        version = lesson_id.split("/")[0]
        if not is_valid_token(version):
            raise VersionIndeterminateError(f"no version in lesson id: {lesson_id}")
        return version

    def is_valid_version_path(self, file_path: str) -> bool:
        try:
            self.extract_version_from_path(file_path)
        except VersionIndeterminateError:
            return False
        return True

    def version_from_directory(self, dir_path: str) -> str:
        """``"1.18"`` -> ``"1.18"``, ``"releases/v/1.18"`` -> ``"1.18"``."""
        name = os.path.basename(os.path.normpath(dir_path))
        if TOKEN_PATTERN.match(name):
            return name
        return self.extract_version_from_path(dir_path)

    def build_lesson_path(self, version: str, filename: str) -> str:
        return f"releases/v/{version}/{filename}"

    def versions_in_directory(self, base_dir: str) -> List[str]:
        """Tokens of every version directory under ``<base_dir>/releases/v``."""
        versions = []
        for entry in glob.glob(os.path.join(base_dir, "releases", "v", "*")):
            if not os.path.isdir(entry):
                continue
            try:
                versions.append(self.version_from_directory(entry))
            except VersionIndeterminateError:
                continue
        return sort_tokens(versions)

    def parse_lesson_path(self, file_path: str) -> LessonInfo:
        version = self.extract_version_from_path(file_path)
        filename = os.path.basename(file_path.replace("\\", "/"))
        return LessonInfo(
            version=version,
            filename=filename,
            lesson_name=os.path.splitext(filename)[0],
            full_path=file_path,
        )


class CodeDetector:
    """Detects a Go version from markers inside the source text."""

    def match(self, code: str) -> Optional[tuple]:
        """Return ``(pattern_name, token)`` for the first matching pattern."""
        for name, pattern in CODE_PATTERNS:
            match = pattern.search(code or "")
            if match and is_valid_token(match.group(1)):
                return name, match.group(1)
        return None

    def extract_version_from_code(self, code: str) -> str:
        found = self.match(code)
        if found is None:
            raise VersionIndeterminateError("no version marker in code")
        return found[1]
