"""
Dependency Installer.

Materializes the environment through the selected backend, then builds
each native submodule from its own directory with the environment's
interpreter. Every command receives its working directory explicitly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..backends.base import EnvironmentBackend, EnvironmentHandle
from ..core.config.repository_config import SubmoduleConfig
from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import ProvisionError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "DependencyInstaller"


def submodule_command(handle: EnvironmentHandle, submodule: SubmoduleConfig) -> list[str]:
    """Install invocation for one submodule, run from the submodule directory."""
    if submodule.install == "setup_py":
        return handle.python_command("setup.py", "install")
    return handle.pip_command("install", ".")


def install_submodules(
    handle: EnvironmentHandle,
    checkout: Path,
    submodules: Sequence[SubmoduleConfig],
    runner: CommandRunnerProtocol,
) -> None:
    """
    Build and install the native submodules into the environment.

    Args:
        handle: Environment to install into.
        checkout: Project checkout root.
        submodules: Submodules in installation order.
        runner: Process boundary.

    Raises:
        ProvisionError: If a submodule directory is missing.
        CommandFailedError: If a build fails.
    """
    for sub in submodules:
        directory = checkout / sub.path
        if not directory.is_dir():
            raise ProvisionError(
                f"Submodule directory {directory} is missing; "
                "run 'git submodule update --init --recursive' in the checkout"
            )
        cmd = submodule_command(handle, sub)
        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Installing {sub.name}: {' '.join(cmd)}")
        runner.run(cmd, cwd=directory, env=handle.env)


def install_dependencies(
    backend: EnvironmentBackend,
    checkout: Path,
    manifest: Path,
    submodules: Sequence[SubmoduleConfig],
    runner: CommandRunnerProtocol,
) -> tuple[EnvironmentHandle, StepResult]:
    """
    Materialize the environment and install the native submodules.

    Args:
        backend: Prepared backend.
        checkout: Project checkout root.
        manifest: Dependency manifest file.
        submodules: Native submodules to build.
        runner: Process boundary.

    Returns:
        The environment handle and an OK result.

    Raises:
        ProvisionError: If environment creation or any installation fails.
    """
    handle = backend.materialize(checkout, manifest)
    install_submodules(handle, checkout, submodules, runner)
    names = ", ".join(sub.name for sub in submodules) or "no submodules"
    return handle, StepResult(
        STEP_NAME, StepStatus.OK, f"{handle.backend.value} env '{handle.name}' with {names}"
    )
