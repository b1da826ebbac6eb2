"""
Environment Backend Interface.

Defines the contract shared by the three isolated-environment strategies
(venv, micromamba, conda/mamba) and the handle they hand back. A handle
replaces shell "activation": every later command that must run inside the
environment is built from the handle's command prefix, so no step depends
on mutated shell state.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Mapping

from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandResult, CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class EnvironmentHandle:
    """
    Reference to a materialized environment.

    Attributes:
        backend: Strategy that created the environment.
        name: Environment name (venv directory name for venv).
        prefix: Filesystem location for venv, None for registry-managed envs.
        run_prefix: Command prefix that executes a program inside the env.
        python: Interpreter to invoke after ``run_prefix``.
        activation_hint: Shell command an operator types to enter the env.
        env: Extra process environment required by ``run_prefix``.
    """

    backend: BackendKind
    name: str
    prefix: Path | None
    run_prefix: tuple[str, ...]
    python: str
    activation_hint: str
    env: Mapping[str, str] = field(default_factory=dict)

    def command(self, *args: str) -> list[str]:
        """Argument list that runs *args* inside the environment."""
        return [*self.run_prefix, *args]

    def python_command(self, *args: str) -> list[str]:
        """Argument list that runs the environment's interpreter with *args*."""
        return [*self.run_prefix, self.python, *args]

    def pip_command(self, *args: str) -> list[str]:
        """Argument list that runs ``python -m pip`` inside the environment."""
        return self.python_command("-m", "pip", *args)


class EnvironmentBackend(ABC):
    """
    One strategy for creating an isolated Python environment.

    Subclasses are constructed with the environment section of the run
    configuration and the process boundary; they never call subprocess
    directly.
    """

    kind: ClassVar[BackendKind]

    def __init__(self, cfg: EnvironmentConfig, runner: CommandRunnerProtocol) -> None:
        self.cfg = cfg
        self.runner = runner

    @abstractmethod
    def prepare(self) -> str:
        """
        Make the backend's tool usable on this machine.

        Returns:
            Short description of what was found or installed.

        Raises:
            ProvisionError: If the tool cannot be made available.
        """

    @abstractmethod
    def materialize(self, checkout: Path, manifest: Path) -> EnvironmentHandle:
        """
        Materialize the environment and install the dependency set.

        Args:
            checkout: Project checkout root.
            manifest: Dependency manifest file inside the checkout.

        Returns:
            Handle used to run commands inside the new environment.

        Raises:
            ProvisionError: If creation or installation fails.
        """

    def _run(self, cmd: list[str], **kwargs) -> CommandResult:
        """Log and execute one backend command."""
        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {' '.join(str(c) for c in cmd)}")
        return self.runner.run(cmd, **kwargs)


def named_env_exists(
    runner: CommandRunnerProtocol,
    tool: str,
    name: str,
    env: Mapping[str, str] | None = None,
) -> bool:
    """
    Check a conda-family registry for an environment called *name*.

    Args:
        runner: Process boundary.
        tool: ``micromamba``, ``conda`` or ``mamba`` executable.
        name: Environment name to look for.
        env: Extra process environment (e.g. ``MAMBA_ROOT_PREFIX``).

    Returns:
        True if ``<tool> env list --json`` reports a prefix ending in *name*.
        An unreadable listing counts as "absent" so creation is attempted.
    """
    result = runner.run([tool, "env", "list", "--json"], capture=True, check=False, env=env)
    if not result.ok:
        logger.debug(f"'{tool} env list' exited with {result.returncode}; assuming no env")
        return False
    try:
        prefixes = json.loads(result.stdout).get("envs", [])
    except (ValueError, AttributeError):
        logger.debug(f"Unparseable '{tool} env list' output; assuming no env")
        return False
    return any(Path(p).name == name for p in prefixes)
