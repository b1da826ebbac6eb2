"""
Installation Verifier.

Imports the deep-learning framework inside the new environment and reports
its version and whether a GPU is usable.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from ..backends.base import EnvironmentHandle
from ..core.environment import CommandRunnerProtocol
from ..core.paths import LOGGER_NAME
from ..exceptions import VerificationError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "Verifier"

PROBE_SCRIPT = (
    "import json, torch; "
    "print(json.dumps({'version': torch.__version__, "
    "'cuda': bool(torch.cuda.is_available())}))"
)


@dataclass(frozen=True)
class FrameworkStatus:
    """Framework facts reported from inside the environment."""

    version: str
    cuda: bool


def parse_probe_output(stdout: str) -> FrameworkStatus:
    """
    Decode the probe's JSON line.

    Wrappers such as ``conda run`` may print around the probe, so the last
    line that looks like a JSON object is used.

    Raises:
        VerificationError: If no well-formed status line is present.
    """
    candidates = [line.strip() for line in stdout.splitlines() if line.strip().startswith("{")]
    if not candidates:
        raise VerificationError(f"Framework probe produced no status line: {stdout.strip()!r}")
    try:
        data = json.loads(candidates[-1])
    except ValueError as e:
        raise VerificationError(f"Unreadable framework probe output: {candidates[-1]!r}") from e

    version, cuda = data.get("version"), data.get("cuda")
    if not isinstance(version, str) or not isinstance(cuda, bool):
        raise VerificationError(f"Unexpected framework probe payload: {data!r}")
    return FrameworkStatus(version=version, cuda=cuda)


def verify_framework(
    handle: EnvironmentHandle, runner: CommandRunnerProtocol, cwd: Path | None = None
) -> tuple[FrameworkStatus, StepResult]:
    """
    Import the framework in the environment and report its status.

    Args:
        handle: Environment to probe.
        runner: Process boundary.
        cwd: Working directory for the probe (the checkout).

    Returns:
        Framework status and an OK result.

    Raises:
        VerificationError: If the import fails or the output is malformed.
    """
    result = runner.run(
        handle.python_command("-c", PROBE_SCRIPT),
        cwd=cwd,
        env=handle.env,
        capture=True,
        check=False,
    )
    if not result.ok:
        tail = result.stderr.strip().splitlines()[-1:] or ["no error output"]
        raise VerificationError(
            f"Framework import failed with exit status {result.returncode}: {tail[0]}"
        )

    status = parse_probe_output(result.stdout)
    logger.info(f"PyTorch version: {status.version}")
    logger.info(f"CUDA available: {status.cuda}")
    return status, StepResult(
        STEP_NAME, StepStatus.OK, f"torch {status.version}, CUDA available: {status.cuda}"
    )
