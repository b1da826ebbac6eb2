"""
Test Suite for backend selection and the numbered menu.
"""

from __future__ import annotations

import pytest

from splatstrap.backends import (
    CondaBackend,
    MicromambaBackend,
    VenvBackend,
    backend_menu,
    get_backend,
    parse_backend_choice,
)
from splatstrap.core.config import BackendKind, EnvironmentConfig
from splatstrap.exceptions import InvalidChoiceError


@pytest.mark.unit
class TestParseBackendChoice:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1", BackendKind.VENV),
            (" 2 ", BackendKind.MICROMAMBA),
            ("3\n", BackendKind.CONDA),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_backend_choice(raw) is expected

    @pytest.mark.parametrize("raw", ["4", "0", "", "abc", "venv", "1 2", None])
    def test_invalid(self, raw):
        with pytest.raises(InvalidChoiceError, match="Invalid choice"):
            parse_backend_choice(raw)


@pytest.mark.unit
class TestMenu:
    def test_lists_three_numbered_choices(self):
        lines = backend_menu().splitlines()

        assert lines[0] == "Choose the Python environment backend:"
        assert [line.strip()[:2] for line in lines[1:]] == ["1)", "2)", "3)"]


@pytest.mark.unit
class TestGetBackend:
    @pytest.mark.parametrize(
        "kind, cls",
        [
            (BackendKind.VENV, VenvBackend),
            (BackendKind.MICROMAMBA, MicromambaBackend),
            (BackendKind.CONDA, CondaBackend),
            ("conda", CondaBackend),
        ],
    )
    def test_resolves_class(self, kind, cls, fake_runner):
        backend = get_backend(kind, EnvironmentConfig(), fake_runner)

        assert isinstance(backend, cls)
        assert backend.runner is fake_runner
