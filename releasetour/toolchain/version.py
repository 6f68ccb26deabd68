"""
Version tokens.

A token is a normalized ``"major.minor"`` string such as ``"1.21"``. Tokens
are compared as ``(major, minor)`` integer pairs, so ``"1.30"`` sorts after
``"1.3"`` and ``"1.9"`` before ``"1.10"``.
"""
import re
from typing import Iterable, List, NamedTuple, Optional

TOKEN_PATTERN = re.compile(r"^(\d+)\.(\d+)$")


class VersionToken(NamedTuple):
    major: int
    minor: int

    @classmethod
    def parse(cls, token: str) -> "VersionToken":
        match = TOKEN_PATTERN.match(token or "")
        if match is None:
            raise ValueError(f"Invalid version token: {token!r}")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def is_valid_token(token: Optional[str]) -> bool:
    return bool(token) and TOKEN_PATTERN.match(token) is not None


def parse_token(token: str) -> Optional[VersionToken]:
    """Parse a token, returning None instead of raising on bad input."""
    if not is_valid_token(token):
        return None
    return VersionToken.parse(token)


def compare_tokens(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""
    left, right = VersionToken.parse(a), VersionToken.parse(b)
    return (left > right) - (left < right)


def is_at_least(token: str, minimum: str) -> bool:
    return VersionToken.parse(token) >= VersionToken.parse(minimum)


def sort_tokens(tokens: Iterable[str], reverse: bool = False) -> List[str]:
    return sorted(tokens, key=VersionToken.parse, reverse=reverse)
