"""
Virtual Environment Backend.

Creates a standard-library virtual environment inside the checkout and
installs the GPU-enabled framework from its wheel index, then the auxiliary
libraries, with the environment's own pip.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from .base import EnvironmentBackend, EnvironmentHandle

logger = logging.getLogger(LOGGER_NAME)


class VenvBackend(EnvironmentBackend):
    """``python -m venv`` strategy (choice 1)."""

    kind = BackendKind.VENV

    def __init__(self, cfg: EnvironmentConfig, runner: CommandRunnerProtocol) -> None:
        super().__init__(cfg, runner)
        self._interpreter: str | None = None

    @property
    def interpreter(self) -> str:
        """Interpreter used to create the venv (resolved by prepare)."""
        return self._interpreter or self.cfg.venv_python

    def prepare(self) -> str:
        found = self.runner.which(self.cfg.venv_python)
        if found is None:
            logger.warning(
                f"{self.cfg.venv_python} not found on PATH; "
                f"falling back to current interpreter {sys.executable}"
            )
            found = sys.executable
        self._interpreter = found
        return f"interpreter {found}"

    def handle_for(self, checkout: Path) -> EnvironmentHandle:
        """Handle describing the venv under *checkout* (existing or not)."""
        prefix = checkout / self.cfg.venv_dir
        return EnvironmentHandle(
            backend=self.kind,
            name=prefix.name,
            prefix=prefix,
            run_prefix=(),
            python=str(prefix / "bin" / "python"),
            activation_hint=f"source {prefix / 'bin' / 'activate'}",
        )

    def materialize(self, checkout: Path, manifest: Path) -> EnvironmentHandle:
        handle = self.handle_for(checkout)

        if Path(handle.python).exists():
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Reusing venv at {handle.prefix}")
        else:
            self._run([self.interpreter, "-m", "venv", str(handle.prefix)], cwd=checkout)

        self._run(handle.pip_command("install", "--upgrade", "pip"), cwd=checkout)
        self._run(
            handle.pip_command(
                "install", *self.cfg.torch_packages, "--index-url", self.cfg.torch_index_url
            ),
            cwd=checkout,
        )
        if self.cfg.pip_packages:
            self._run(handle.pip_command("install", *self.cfg.pip_packages), cwd=checkout)
        return handle
