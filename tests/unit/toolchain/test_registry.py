"""
Unit tests for toolchain/registry module (ToolchainRegistry).
"""
import threading
from unittest.mock import patch

import pytest

from releasetour.exceptions import NotSupportedError, UnavailableError
from releasetour.toolchain.registry import (
    ToolchainEntry,
    ToolchainRegistry,
    parse_full_version,
    probe_toolchain,
)


class TestParseFullVersion:
    def test_release(self):
        assert parse_full_version("go version go1.18.10 linux/amd64\n") == "1.18.10"

    def test_minor_only(self):
        assert parse_full_version("go version go1.21 darwin/arm64") == "1.21"

    def test_unparseable(self):
        assert parse_full_version("garbage") == ""


class TestProbeToolchain:
    def test_missing_binary(self, tmp_path):
        assert probe_toolchain(str(tmp_path / "nope"), timeout=5) is None

    def test_broken_binary(self, fake_go_factory):
        assert probe_toolchain(fake_go_factory("1.20.1", broken=True), timeout=5) is None

    def test_working_binary(self, fake_go_factory):
        output = probe_toolchain(fake_go_factory("1.21.5"), timeout=5)
        assert "go1.21.5" in output


class TestToolchainRegistry:
    def test_every_configured_available_version_round_trips(self, registry):
        for version in ("1.17", "1.18", "1.21", "1.22"):
            entry = registry.get_entry(version)
            assert entry.version == version
            assert entry.available

    def test_full_version_parsed(self, registry):
        assert registry.get_entry("1.18").full_version == "1.18.10"
        assert registry.get_entry("1.21").full_version == "1.21.5"

    def test_unknown_version_not_supported(self, registry):
        with pytest.raises(NotSupportedError, match="Unsupported Go version: 1.99"):
            registry.get_entry("1.99")

    def test_missing_binary_unavailable(self, registry):
        with pytest.raises(UnavailableError):
            registry.get_entry("1.19")

    def test_present_but_broken_binary_unavailable(self, registry):
        with pytest.raises(UnavailableError) as exc_info:
            registry.get_entry("1.20")
        assert exc_info.value.version == "1.20"

    def test_list_available(self, registry):
        assert sorted(registry.list_available()) == ["1.17", "1.18", "1.21", "1.22"]

    def test_lazy_initialization(self, fake_toolchains):
        registry = ToolchainRegistry(fake_toolchains)
        assert not registry.initialized
        assert registry.get_entry("1.21").version == "1.21"
        assert registry.initialized

    def test_initialize_runs_once(self, fake_toolchains):
        registry = ToolchainRegistry(fake_toolchains)
        with patch("releasetour.toolchain.registry.probe_toolchain", return_value="go version go1.21.5") as probe:
            registry.initialize()
            registry.initialize()
            registry.list_available()
        assert probe.call_count == len(fake_toolchains)

    def test_reload_rediscovers(self, fake_toolchains):
        registry = ToolchainRegistry(fake_toolchains)
        with patch("releasetour.toolchain.registry.probe_toolchain", return_value=None):
            registry.initialize()
        assert registry.list_available() == []

        registry.reload()
        assert "1.21" in registry.list_available()

    def test_malformed_candidate_skipped(self, fake_go_factory):
        registry = ToolchainRegistry({"latest": fake_go_factory("1.22.0"), "1.22": fake_go_factory("1.22.0")})
        assert registry.list_available() == ["1.22"]
        with pytest.raises(NotSupportedError):
            registry.get_entry("latest")

    def test_status(self, registry):
        status = registry.status()
        assert status["total_versions"] == 6
        assert status["available_versions"] == 4
        assert status["multi_version_support"] is True
        assert status["versions"]["1.19"]["available"] is False

    def test_all_entries_is_a_copy(self, registry):
        entries = registry.all_entries()
        entries.clear()
        assert len(registry.all_entries()) == 6

    def test_concurrent_lookups(self, registry):
        errors = []

        def lookup():
            try:
                for _ in range(50):
                    assert registry.get_entry("1.21").version == "1.21"
            except Exception as e:  # collected for the assertion below
                errors.append(e)

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        threads.append(threading.Thread(target=registry.reload))
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []

    def test_from_versions_file(self, tmp_path, fake_go_factory):
        path = tmp_path / "versions.json"
        path.write_text(
            '{"versions": {"1.21": {"path": "%s", "full_version": "1.21.5"}}}' % fake_go_factory("1.21.5")
        )
        registry = ToolchainRegistry.from_versions_file(str(path))
        assert registry.list_available() == ["1.21"]


class TestToolchainEntry:
    def test_to_dict(self):
        entry = ToolchainEntry(version="1.18", path="/opt/go1.18/bin/go", full_version="1.18.10", available=True)
        assert entry.to_dict() == {
            "version": "1.18",
            "path": "/opt/go1.18/bin/go",
            "full_version": "1.18.10",
            "available": True,
        }

    def test_immutable(self):
        entry = ToolchainEntry(version="1.18", path="/x")
        with pytest.raises(AttributeError):
            entry.version = "1.19"
