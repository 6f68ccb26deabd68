"""
Unit tests for config module (versions file loader and defaults).
"""
import json

import pytest

from releasetour.config.defaults import EXECUTOR_DEFAULTS, get_default_toolchains
from releasetour.config.versions import VersionsFile, load_versions_file
from releasetour.exceptions import ConfigurationError


def _write(tmp_path, data):
    path = tmp_path / "versions.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


class TestLoadVersionsFile:
    def test_valid_file(self, tmp_path):
        path = _write(tmp_path, {
            "versions": {
                "1.18": {
                    "full_version": "1.18.10",
                    "path": "/opt/go1.18/bin/go",
                    "lessons": {"01_generics.go": {"title": "Generics", "stars": 5}},
                },
                "1.25": {"path": "/opt/go1.25/bin/go"},
            }
        })
        config = load_versions_file(path)
        assert config.toolchain_table() == {
            "1.18": "/opt/go1.18/bin/go",
            "1.25": "/opt/go1.25/bin/go",
        }
        assert config.versions["1.18"].lessons["01_generics.go"].stars == 5
        assert config.versions["1.25"].full_version == ""

    def test_tokens_newest_first(self):
        config = VersionsFile.model_validate({
            "versions": {t: {"path": f"/opt/go{t}/bin/go"} for t in ["1.9", "1.21", "1.10"]}
        })
        assert config.tokens() == ["1.21", "1.10", "1.9"]

    def test_invalid_token_rejected(self, tmp_path):
        path = _write(tmp_path, {"versions": {"go1.21": {"path": "/opt/go1.21/bin/go"}}})
        with pytest.raises(ConfigurationError, match="Invalid versions file"):
            load_versions_file(path)

    def test_missing_path_rejected(self, tmp_path):
        path = _write(tmp_path, {"versions": {"1.21": {"full_version": "1.21.5"}}})
        with pytest.raises(ConfigurationError):
            load_versions_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_versions_file(str(tmp_path / "nope.json"))

    def test_bad_json(self, tmp_path):
        path = _write(tmp_path, "{not json")
        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_versions_file(path)


class TestDefaults:
    def test_default_toolchains(self):
        table = get_default_toolchains()
        assert table["1.18"] == "/opt/go1.18/bin/go"
        assert table["1.25"] == "/opt/go1.25/bin/go"
        assert len(table) == 8

    def test_default_toolchains_is_a_copy(self):
        get_default_toolchains()["1.99"] = "/tmp/go"
        assert "1.99" not in get_default_toolchains()

    def test_executor_defaults(self):
        assert EXECUTOR_DEFAULTS.timeout == 30.0
        assert EXECUTOR_DEFAULTS.timeout_exit_code == 124
        assert EXECUTOR_DEFAULTS.file_prefix == "gocode_"
        assert EXECUTOR_DEFAULTS.file_suffix == ".go"
