"""
Test Suite for filesystem layout constants.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from splatstrap.core.paths import (
    DEFAULT_MANIFEST_NAME,
    DEFAULT_REPO_DIR,
    DEFAULT_REPO_URL,
    DEFAULT_VENV_DIR,
    LOCK_FILENAME,
    STATE_DIRNAME,
    state_dir,
)


@pytest.mark.unit
def test_state_dir_is_anchored_to_workdir(tmp_path):
    assert state_dir(tmp_path) == tmp_path / ".splatstrap"
    assert not state_dir(tmp_path).exists()


@pytest.mark.unit
def test_state_dir_keeps_relative_anchor():
    assert state_dir(Path("build")) == Path("build") / STATE_DIRNAME


@pytest.mark.unit
def test_repo_dir_matches_url_tail():
    assert DEFAULT_REPO_URL.rstrip("/").rsplit("/", 1)[-1] == DEFAULT_REPO_DIR


@pytest.mark.unit
@pytest.mark.parametrize(
    "fragment", [STATE_DIRNAME, LOCK_FILENAME, DEFAULT_MANIFEST_NAME, DEFAULT_VENV_DIR]
)
def test_fragments_are_relative(fragment):
    assert not Path(fragment).is_absolute()
    assert "/" not in fragment
