"""
Test Suite for the Environment Reporting Engine.

Tests LogStyle constants and the Reporter's start-of-run sections.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from splatstrap.core.config import BackendKind, Config
from splatstrap.core.logger import Logger, LogStyle, Reporter

HOST = {
    "system": "Linux",
    "release": "6.8.0",
    "machine": "x86_64",
    "python": "3.11.9",
    "cpu_physical_cores": 8,
    "cpu_logical_cores": 16,
    "ram_gib": 31.2,
    "is_root": False,
}


def _output(mock_logger: MagicMock) -> str:
    return "\n".join(str(c.args[0]) for c in mock_logger.info.call_args_list if c.args)


# LOGSTYLE: CONSTANTS
@pytest.mark.unit
def test_logstyle_separators():
    """Separators are 80 characters wide."""
    assert LogStyle.HEAVY == "━" * 80
    assert LogStyle.DOUBLE == "═" * 80
    assert LogStyle.LIGHT == "─" * 80


@pytest.mark.unit
def test_logstyle_symbols():
    assert LogStyle.ARROW == "»"
    assert LogStyle.SUCCESS == "✓"
    assert LogStyle.FAILURE == "✗"
    assert LogStyle.SKIP == "↷"
    assert len(LogStyle.DOUBLE_INDENT) == 2 * len(LogStyle.INDENT)


@pytest.mark.unit
def test_logstyle_kv_alignment():
    assert LogStyle.kv("Backend", "venv") == f"  » {'Backend':<18}: venv"


@pytest.mark.unit
def test_log_phase_header_centers_title():
    mock_logger = MagicMock()

    LogStyle.log_phase_header(mock_logger, "SETUP COMPLETE", LogStyle.DOUBLE)

    lines = [c.args[0] for c in mock_logger.info.call_args_list]
    assert lines == ["", LogStyle.DOUBLE, f"{'SETUP COMPLETE':^80}", LogStyle.DOUBLE]


# REPORTER
@pytest.mark.unit
def test_reporter_sections_for_venv(tmp_path):
    """All four sections are logged and venv details are shown."""
    cfg = Config.from_overrides({"workdir": str(tmp_path), "backend": "venv"})
    mock_logger = MagicMock()

    Reporter().log_initial_status(logger_instance=mock_logger, cfg=cfg, host=HOST)

    out = _output(mock_logger)
    for section in ("ENVIRONMENT INITIALIZATION", "[HOST]", "[BACKEND]", "[REPOSITORY]"):
        assert section in out
    assert "[FILESYSTEM]" in out
    assert "Linux 6.8.0 (x86_64)" in out
    assert "8 physical / 16 logical" in out
    assert str(tmp_path / "triangle-splatting" / "venv") in out
    assert "submodules/simple-knn (pip)" in out


@pytest.mark.unit
def test_reporter_micromamba_root(tmp_path):
    cfg = Config.from_overrides(
        {"workdir": str(tmp_path), "backend": "micromamba"},
        {"environment.micromamba_root": str(tmp_path / "mm")},
    )
    mock_logger = MagicMock()

    Reporter().log_initial_status(mock_logger, cfg, host=HOST)

    out = _output(mock_logger)
    assert "Root Prefix" in out
    assert "triangle-splatting" in out


@pytest.mark.unit
def test_reporter_undecided_backend_and_disabled_packages(base_config):
    cfg = Config.from_overrides(
        {"workdir": str(base_config.workdir)}, {"system.enabled": False}
    )
    mock_logger = MagicMock()

    Reporter().log_initial_status(mock_logger, cfg, host=HOST)

    out = _output(mock_logger)
    assert "undecided" in out
    assert f"{'OS Packages':<18}: disabled" in out


@pytest.mark.unit
def test_reporter_collects_host_when_not_given(base_config):
    mock_logger = MagicMock()
    cfg = base_config.with_backend(BackendKind.CONDA)

    with patch("splatstrap.core.logger.reporter.host_summary", return_value=HOST) as summary:
        Reporter().log_initial_status(mock_logger, cfg)

    summary.assert_called_once()


@pytest.mark.unit
def test_reporter_shows_log_file(base_config, tmp_path):
    mock_logger = MagicMock()
    log_file = tmp_path / "run.log"

    with patch.object(Logger, "get_log_file", return_value=log_file):
        Reporter().log_initial_status(mock_logger, base_config, host=HOST)

    assert str(log_file) in _output(mock_logger)
