"""
Shared test fixtures for releasetour tests.
"""
import os
import stat
import sys

import pytest

from releasetour.executor import Executor
from releasetour.toolchain import ToolchainRegistry

FAKE_GO = os.path.join(os.path.dirname(__file__), "fixtures", "fake_go.py")

HELLO_WORLD = 'package main; import "fmt"; func main(){ fmt.Println("Hello, World!") }'


def _write_executable(path, content):
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def fake_go_factory(tmp_path):
    """Create fake `go` binaries reporting a given full version."""
    bin_dir = tmp_path / "toolchains"
    bin_dir.mkdir()

    def make(full_version, broken=False):
        name = f"go{full_version}{'-broken' if broken else ''}"
        if broken:
            script = "#!/bin/sh\necho 'error while loading shared libraries' >&2\nexit 127\n"
        else:
            script = f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_GO}" {full_version} "$@"\n'
        return _write_executable(bin_dir / name, script)

    return make


@pytest.fixture
def fake_toolchains(fake_go_factory, tmp_path):
    return {
        "1.17": fake_go_factory("1.17.13"),
        "1.18": fake_go_factory("1.18.10"),
        "1.19": str(tmp_path / "missing" / "go"),
        "1.20": fake_go_factory("1.20.14", broken=True),
        "1.21": fake_go_factory("1.21.5"),
        "1.22": fake_go_factory("1.22.3"),
    }


@pytest.fixture
def registry(fake_toolchains):
    registry = ToolchainRegistry(fake_toolchains)
    registry.initialize()
    return registry


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return str(path)


@pytest.fixture
def executor(registry, scratch_dir):
    return Executor(registry, scratch_dir=scratch_dir)


@pytest.fixture
def hello_world():
    return HELLO_WORLD
