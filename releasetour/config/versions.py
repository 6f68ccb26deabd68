"""
Loader for the versions file that maps Go version tokens to toolchains.

The file has the shape::

    {
      "versions": {
        "1.18": {"full_version": "1.18.10", "path": "/opt/go1.18/bin/go",
                 "lessons": {"01_generics.go": {"title": "Generics", "stars": 5}}}
      }
    }
"""
import json
import logging
import os
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from releasetour.exceptions import ConfigurationError
from releasetour.toolchain.version import is_valid_token, sort_tokens

logger = logging.getLogger(__name__)


class LessonMeta(BaseModel):
    title: str
    stars: int = 0


class VersionSpec(BaseModel):
    path: str
    full_version: str = ""
    lessons: Dict[str, LessonMeta] = Field(default_factory=dict)


class VersionsFile(BaseModel):
    versions: Dict[str, VersionSpec]

    @field_validator("versions")
    @classmethod
    def _check_tokens(cls, value: Dict[str, VersionSpec]) -> Dict[str, VersionSpec]:
        bad = [token for token in value if not is_valid_token(token)]
        if bad:
            raise ValueError(f"invalid version tokens: {', '.join(sorted(bad))}")
        return value

    def toolchain_table(self) -> Dict[str, str]:
        """Version token -> toolchain executable path."""
        return {token: spec.path for token, spec in self.versions.items()}

    def tokens(self) -> List[str]:
        """Configured tokens, newest first."""
        return sort_tokens(self.versions, reverse=True)


def load_versions_file(path: str) -> VersionsFile:
    """Read and validate a versions file.

    Raises:
        ConfigurationError: If the file is missing, not JSON, or malformed.
    """
    abs_path = os.path.abspath(path)
    try:
        with open(abs_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Versions file not found: {abs_path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read versions file: {abs_path}", {"cause": str(e)}) from e

    try:
        config = VersionsFile.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid versions file: {abs_path}", {"cause": str(e)}) from e

    logger.info(f"Loaded {len(config.versions)} toolchain versions from {abs_path}")
    return config
