"""
Environment Backend Selector.

Turns the operator's choice into a concrete backend and makes its tool
usable (interpreter lookup, micromamba bootstrap, conda/mamba discovery)
before any repository or environment work begins.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..backends.base import EnvironmentBackend
from ..backends.factory import get_backend
from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "EnvironmentBackendSelector"

BackendFactory = Callable[
    [BackendKind, EnvironmentConfig, CommandRunnerProtocol], EnvironmentBackend
]


def select_backend(
    kind: BackendKind,
    cfg: EnvironmentConfig,
    runner: CommandRunnerProtocol,
    factory: BackendFactory = get_backend,
) -> tuple[EnvironmentBackend, StepResult]:
    """
    Build and prepare the chosen backend.

    Args:
        kind: Backend fixed for this run.
        cfg: Environment section of the run configuration.
        runner: Process boundary.
        factory: Backend factory (injected in tests).

    Returns:
        The prepared backend and an OK result.

    Raises:
        ProvisionError: If the backend tool cannot be made available.
    """
    logger.info(LogStyle.kv("Backend", kind.value))
    backend = factory(kind, cfg, runner)
    detail = backend.prepare()
    return backend, StepResult(STEP_NAME, StepStatus.OK, f"{kind.value}: {detail}")
