import json
from pathlib import Path

import pytest

from element_cli.config import BLOCK_SETTINGS_FILE, BUILT_FILE_PATH
from element_cli.core.settings_store import SettingsStore
from element_cli.lifecycle.engine import LifecycleEngine
from tests.utils.fakes import FakeBranches, FakeRegistry
from tests.utils.fixture_data import PUBLISHED_SETTINGS, SAMPLE_CODE


@pytest.fixture
def temp_workspace(tmp_path):
    """Create a temporary workspace directory with a built block"""
    workspace = tmp_path / "workspace"
    built = workspace / BUILT_FILE_PATH
    built.parent.mkdir(parents=True)
    built.write_text(SAMPLE_CODE, encoding="utf-8")
    return workspace


@pytest.fixture
def write_settings(temp_workspace):
    """Write a raw settings payload into the workspace"""

    def _write(payload: dict) -> Path:
        path = temp_workspace / BLOCK_SETTINGS_FILE
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def published_settings():
    """Settings of a block published at version 1"""
    return dict(PUBLISHED_SETTINGS)


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def branches():
    return FakeBranches()


@pytest.fixture
def store(temp_workspace):
    return SettingsStore(temp_workspace)


@pytest.fixture
def engine(temp_workspace, store, registry, branches):
    return LifecycleEngine(temp_workspace, store, registry, branches)
