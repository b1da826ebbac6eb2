"""
Test Suite for step progress and the final provisioning summary.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from splatstrap.backends.base import EnvironmentHandle
from splatstrap.core.config import BackendKind
from splatstrap.core.logger import log_provision_summary, log_step_header, log_step_result
from splatstrap.pipeline import ProvisionReport, StepResult, StepStatus


def _lines(method) -> list[str]:
    return [str(c.args[0]) for c in method.call_args_list if c.args]


@pytest.fixture
def handle() -> EnvironmentHandle:
    return EnvironmentHandle(
        backend=BackendKind.MICROMAMBA,
        name="triangle-splatting",
        prefix=None,
        run_prefix=("micromamba", "run", "-n", "triangle-splatting"),
        python="python",
        activation_hint="micromamba activate triangle-splatting",
    )


@pytest.mark.unit
def test_step_header():
    log = MagicMock()

    log_step_header(3, 7, "Setting up environment backend", log)

    assert "[Step 3/7] Setting up environment backend" in _lines(log.info)


@pytest.mark.unit
@pytest.mark.parametrize(
    "status, method",
    [
        (StepStatus.OK, "info"),
        (StepStatus.SKIPPED, "info"),
        (StepStatus.WARNING, "warning"),
        (StepStatus.FAILED, "error"),
    ],
)
def test_step_result_level(status, method):
    log = MagicMock()

    log_step_result(StepResult("ManifestWriter", status, "detail"), log)

    line = _lines(getattr(log, method))[0]
    assert f"ManifestWriter {status.value}: detail" in line


@pytest.mark.unit
def test_summary_success_prints_usage(handle):
    log = MagicMock()
    report = ProvisionReport([StepResult("Verifier", StepStatus.OK)])

    log_provision_summary(
        report, "2m 05s", handle=handle, checkout=Path("/w/ts"), logger_instance=log
    )

    out = "\n".join(_lines(log.info))
    assert "SETUP COMPLETE" in out
    assert "micromamba activate triangle-splatting" in out
    assert "python train.py -s <path_to_scenes> -m <output_model_path> --eval" in out
    assert "python render.py -m <path_to_model>" in out
    assert "--name=triangle-splatting" in out
    assert "2m 05s" in out


@pytest.mark.unit
def test_summary_failure_names_step(handle):
    log = MagicMock()
    report = ProvisionReport(
        [
            StepResult("ToolchainProbe", StepStatus.WARNING),
            StepResult("RepositoryFetcher", StepStatus.FAILED, "dirty"),
        ]
    )

    log_provision_summary(report, "4.2s", handle=handle, logger_instance=log)

    out = "\n".join(_lines(log.info))
    assert "SETUP FAILED" in out
    assert "RepositoryFetcher" in out
    assert "[Usage]" not in out
