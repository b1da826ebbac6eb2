"""
Conda / Mamba Backend.

Uses an existing conda installation (mamba as a fallback) to create a named
environment, install the GPU-enabled framework and the auxiliary libraries
from the configured channels, and install the pip-only leftovers inside it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import BackendUnavailableError
from .base import EnvironmentBackend, EnvironmentHandle, named_env_exists

logger = logging.getLogger(LOGGER_NAME)

# Preference order
CONDA_TOOLS = ("conda", "mamba")

# Framework packages by their conda names
CONDA_FRAMEWORK = ("pytorch", "torchvision")


class CondaBackend(EnvironmentBackend):
    """Conda-or-mamba strategy (choice 3)."""

    kind = BackendKind.CONDA

    def __init__(self, cfg: EnvironmentConfig, runner: CommandRunnerProtocol) -> None:
        super().__init__(cfg, runner)
        self._tool: str | None = None
        self._tool_name: str = CONDA_TOOLS[0]

    @property
    def tool(self) -> str:
        """Resolved conda or mamba executable.

        Raises:
            BackendUnavailableError: If prepare has not found a tool.
        """
        if self._tool is None:
            raise BackendUnavailableError("Conda backend used before prepare()")
        return self._tool

    def prepare(self) -> str:
        for name in CONDA_TOOLS:
            found = self.runner.which(name)
            if found is not None:
                self._tool, self._tool_name = found, name
                logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Using {name} at {found}")
                return f"using {name}"
        raise BackendUnavailableError(
            "Neither conda nor mamba is on PATH. Install Miniconda/Miniforge or pick "
            "another backend."
        )

    def handle(self) -> EnvironmentHandle:
        """Handle for the named environment managed by the resolved tool."""
        name = self.cfg.name
        return EnvironmentHandle(
            backend=self.kind,
            name=name,
            prefix=None,
            run_prefix=(self.tool, "run", "-n", name),
            python="python",
            activation_hint=f"{self._tool_name} activate {name}",
        )

    def install_command(self) -> list[str]:
        """``install`` invocation for the framework and auxiliary libraries."""
        cmd = [self.tool, "install", "-n", self.cfg.name]
        for channel in self.cfg.conda_channels:
            cmd += ["-c", channel]
        cmd += [
            *CONDA_FRAMEWORK,
            f"pytorch-cuda={self.cfg.pytorch_cuda}",
            *self.cfg.conda_packages,
            "-y",
        ]
        return cmd

    def materialize(self, checkout: Path, manifest: Path) -> EnvironmentHandle:
        name = self.cfg.name
        if named_env_exists(self.runner, self.tool, name):
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Environment '{name}' already exists")
        else:
            self._run(
                [self.tool, "create", "-n", name, f"python={self.cfg.python_version}", "-y"],
                cwd=checkout,
            )

        self._run(self.install_command(), cwd=checkout)

        handle = self.handle()
        if self.cfg.pip_fallback:
            self._run(handle.pip_command("install", *self.cfg.pip_fallback), cwd=checkout)
        return handle
