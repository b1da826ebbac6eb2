"""
GPU Toolchain Probe.

Advisory check for the CUDA compiler. A missing or broken ``nvcc`` never
stops the run: the native submodules may still build against a toolkit the
deep-learning framework ships, so the operator only gets a warning and the
download link.
"""

from __future__ import annotations

import logging
import re

from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import CUDA_DOWNLOAD_URL, LOGGER_NAME
from ..exceptions import CommandNotFoundError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "ToolchainProbe"

_RELEASE_RE = re.compile(r"release\s+(\d+(?:\.\d+)+)")


def parse_nvcc_release(output: str) -> str | None:
    """
    Extract the toolkit release from ``nvcc --version`` output.

    Args:
        output: Captured stdout of ``nvcc --version``.

    Returns:
        Version such as ``12.1``, or None if no release line is present.
    """
    match = _RELEASE_RE.search(output)
    return match.group(1) if match else None


def _warn_missing(reason: str) -> StepResult:
    logger.warning(f"{LogStyle.WARNING} CUDA not found ({reason}).")
    logger.warning(f"{LogStyle.INDENT}Please ensure CUDA is installed.")
    logger.warning(f"{LogStyle.INDENT}You can install CUDA from: {CUDA_DOWNLOAD_URL}")
    logger.warning(f"{LogStyle.INDENT}Continuing setup anyway...")
    return StepResult(STEP_NAME, StepStatus.WARNING, reason)


def probe_toolchain(runner: CommandRunnerProtocol) -> StepResult:
    """
    Look for ``nvcc`` and report its version.

    Args:
        runner: Process boundary.

    Returns:
        OK with the detected release, or WARNING when the compiler is
        missing or does not answer. Never raises for toolchain problems.
    """
    nvcc = runner.which("nvcc")
    if nvcc is None:
        return _warn_missing("nvcc is not on PATH")

    try:
        result = runner.run([nvcc, "--version"], capture=True, check=False)
    except CommandNotFoundError:
        return _warn_missing("nvcc disappeared from PATH")

    if not result.ok:
        return _warn_missing(f"'nvcc --version' exited with status {result.returncode}")

    for line in result.stdout.strip().splitlines():
        logger.info(f"{LogStyle.INDENT}{line}")

    release = parse_nvcc_release(result.stdout)
    if release is None:
        logger.warning(f"{LogStyle.WARNING} Could not parse the CUDA release from nvcc output")
        return StepResult(STEP_NAME, StepStatus.OK, f"nvcc at {nvcc} (release unknown)")

    logger.info(LogStyle.kv("CUDA Release", release))
    return StepResult(STEP_NAME, StepStatus.OK, f"CUDA {release}")
