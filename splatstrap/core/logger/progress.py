"""
Provisioning Progress Logging.

Step headers, per-step outcome lines and the final run summary, including
the activation command and usage hints for the freshly provisioned
environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..paths import LOGGER_NAME
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ...backends.base import EnvironmentHandle
    from ...pipeline.results import ProvisionReport, StepResult

logger = logging.getLogger(LOGGER_NAME)

_STATUS_SYMBOLS = {
    "ok": LogStyle.SUCCESS,
    "skipped": LogStyle.SKIP,
    "warning": LogStyle.WARNING,
    "failed": LogStyle.FAILURE,
}


def log_step_header(
    index: int, total: int, title: str, logger_instance: logging.Logger | None = None
) -> None:
    """
    Log the banner that opens a provisioning step.

    Args:
        index: 1-based position of the step.
        total: Number of steps in the run.
        title: Human-readable step name.
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger
    log.info("")
    log.info(LogStyle.LIGHT)
    log.info(f"[Step {index}/{total}] {title}")
    log.info(LogStyle.LIGHT)


def log_step_result(result: "StepResult", logger_instance: logging.Logger | None = None) -> None:
    """Log the one-line outcome of a step at a level matching its status."""
    log = logger_instance or logger
    symbol = _STATUS_SYMBOLS.get(result.status.value, LogStyle.BULLET)
    detail = f": {result.detail}" if result.detail else ""
    line = f"{LogStyle.INDENT}{symbol} {result.step} {result.status.value}{detail}"

    if result.status.value == "failed":
        log.error(line)
    elif result.status.value == "warning":
        log.warning(line)
    else:
        log.info(line)


def log_provision_summary(
    report: "ProvisionReport",
    duration: str,
    handle: "EnvironmentHandle | None" = None,
    checkout: Path | None = None,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log final provisioning summary.

    Called once the runner has stopped, successful or not. Consolidates the
    per-step outcomes and, on success, tells the operator how to enter the
    environment and start working with the project.

    Args:
        report: Ordered step outcomes.
        duration: Human-readable duration string.
        handle: Environment handle produced by the dependency step, if any.
        checkout: Project checkout root, if the repository step ran.
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger
    title = "SETUP COMPLETE" if report.succeeded else "SETUP FAILED"

    LogStyle.log_phase_header(log, title, LogStyle.DOUBLE)
    for result in report.results:
        symbol = _STATUS_SYMBOLS.get(result.status.value, LogStyle.BULLET)
        log.info(f"{LogStyle.INDENT}{symbol} {result.step:<28}: {result.status.value}")
    log.info(LogStyle.kv("Duration", duration))

    failed = report.failed_step
    if failed is not None:
        log.info(LogStyle.kv("Failed Step", failed.step))
        log.info(LogStyle.DOUBLE)
        return

    if checkout is not None:
        log.info(LogStyle.kv("Checkout", checkout))
    if handle is not None:
        log.info("")
        log.info("[Usage]")
        log.info(f"{LogStyle.INDENT}1. Activate the environment: {handle.activation_hint}")
        log.info(
            f"{LogStyle.INDENT}2. Train a model: python train.py -s <path_to_scenes> "
            "-m <output_model_path> --eval"
        )
        log.info(f"{LogStyle.INDENT}3. Render: python render.py -m <path_to_model>")
        log.info("")
        log.info("[Jupyter]")
        log.info(
            f"{LogStyle.INDENT}1. Install kernel: python -m ipykernel install --user "
            f"--name={handle.name}"
        )
        log.info(f"{LogStyle.INDENT}2. Select '{handle.name}' kernel in Jupyter")
    log.info(LogStyle.DOUBLE)
