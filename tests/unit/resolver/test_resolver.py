"""
Unit tests for resolver/resolver module (VersionResolver).
"""
import pytest

from releasetour.exceptions import NotSupportedError, VersionIndeterminateError
from releasetour.executor.base import ExecutionRequest
from releasetour.resolver.resolver import Resolution, ResolutionSource, VersionResolver


class TestVersionResolver:
    def setup_method(self):
        self.resolver = VersionResolver()

    def test_explicit_beats_path_hint(self):
        request = ExecutionRequest(code="", version="1.21", working_dir="releases/v/1.18/01_generics.go")
        assert self.resolver.resolve(request) == Resolution("1.21", ResolutionSource.EXPLICIT)

    def test_explicit_used_verbatim(self):
        request = ExecutionRequest(code="", version="latest")
        assert self.resolver.resolve(request).version == "latest"

    def test_path_hint_beats_code(self):
        request = ExecutionRequest(
            code="// Go 1.18\npackage main\n",
            auto_detect=True,
            working_dir="/srv/releases/v/1.22/01_for_range_integers.go",
        )
        assert self.resolver.resolve(request) == Resolution("1.22", ResolutionSource.PATH)

    def test_code_used_when_hint_does_not_match(self):
        request = ExecutionRequest(code="// Go 1.18 generics\n", auto_detect=True, working_dir="/tmp/work")
        assert self.resolver.resolve(request) == Resolution("1.18", ResolutionSource.CODE)

    def test_code_ignored_without_auto_detect(self):
        request = ExecutionRequest(code="// Go 1.18 generics\n")
        with pytest.raises(VersionIndeterminateError):
            self.resolver.resolve(request)

    def test_nothing_matches(self):
        request = ExecutionRequest(code="package main\n", auto_detect=True)
        with pytest.raises(VersionIndeterminateError, match="explicit version"):
            self.resolver.resolve(request)

    def test_detect_from_code(self):
        assert self.resolver.detect_from_code("// GO_VERSION: 1.19") == "1.19"
        assert self.resolver.detect_from_code("package main") is None


class TestResolveEntry:
    def test_resolves_and_looks_up(self, registry):
        resolver = VersionResolver(registry)
        resolution, entry = resolver.resolve_entry(ExecutionRequest(code="", working_dir="releases/v/1.22/x.go"))
        assert resolution.version == "1.22"
        assert entry.full_version == "1.22.3"

    def test_unknown_version(self, registry):
        resolver = VersionResolver(registry)
        with pytest.raises(NotSupportedError):
            resolver.resolve_entry(ExecutionRequest(code="", version="1.5"))

    def test_requires_registry(self):
        with pytest.raises(RuntimeError):
            VersionResolver().resolve_entry(ExecutionRequest(code="", version="1.21"))
