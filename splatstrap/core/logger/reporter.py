"""
Environment Reporting Engine.

Provides formatted logging utilities for ProvisionOrchestrator. Centralizes
the heavy start-of-run logging so the orchestrator stays focused on
lifecycle management.

The reporter handles:
    - Host capability visualization (OS, interpreter, CPU, RAM, disk)
    - Backend and repository resolution reporting
    - Filesystem layout (checkout, manifest, log file)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict

from ..environment.host import disk_free_gib, host_summary
from ..paths import LOGGER_NAME
from .logger import Logger
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ..config import Config

logger = logging.getLogger(LOGGER_NAME)


class ReporterProtocol(Protocol):
    """Structural contract for the start-of-run environment report."""

    def log_initial_status(
        self,
        logger_instance: logging.Logger,
        cfg: "Config",
        host: dict[str, Any] | None = None,
    ) -> None: ...  # pragma: no cover


class Reporter(BaseModel):
    """
    Centralized reporting utility for provisioning lifecycle events.

    Transforms the configuration and host facts into human-readable logs.
    Called by ProvisionOrchestrator during initialization.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def log_initial_status(
        self,
        logger_instance: logging.Logger,
        cfg: "Config",
        host: dict[str, Any] | None = None,
    ) -> None:
        """
        Logs the verified baseline environment upon initialization.

        Args:
            logger_instance: Active run logger
            cfg: Validated run configuration
            host: Pre-collected host facts (collected via psutil when None)
        """
        facts = host if host is not None else host_summary()

        LogStyle.log_phase_header(logger_instance, "ENVIRONMENT INITIALIZATION")

        self._log_host_section(logger_instance, facts)
        logger_instance.info("")

        self._log_backend_section(logger_instance, cfg)
        logger_instance.info("")

        self._log_repository_section(logger_instance, cfg)
        logger_instance.info("")

        # Filesystem Section
        logger_instance.info("[FILESYSTEM]")
        logger_instance.info(LogStyle.kv("Working Dir", cfg.workdir))
        try:
            logger_instance.info(LogStyle.kv("Free Disk", f"{disk_free_gib(str(cfg.workdir))} GiB"))
        except OSError:
            logger.debug(f"Free space unavailable for {cfg.workdir}")
        logger_instance.info(LogStyle.kv("Checkout", cfg.checkout_dir))
        logger_instance.info(LogStyle.kv("Manifest", cfg.checkout_dir / cfg.manifest_path))
        log_file = Logger.get_log_file()
        if log_file is not None:
            logger_instance.info(LogStyle.kv("Log File", log_file))

        logger_instance.info(LogStyle.HEAVY)
        logger_instance.info("")

    def _log_host_section(self, logger_instance: logging.Logger, facts: dict[str, Any]) -> None:
        """Logs operating system, interpreter and hardware capacity."""
        logger_instance.info("[HOST]")
        logger_instance.info(
            LogStyle.kv("Platform", f"{facts['system']} {facts['release']} ({facts['machine']})")
        )
        logger_instance.info(LogStyle.kv("Python", facts["python"]))
        logger_instance.info(
            LogStyle.kv(
                "CPU Cores",
                f"{facts['cpu_physical_cores']} physical / {facts['cpu_logical_cores']} logical",
            )
        )
        logger_instance.info(LogStyle.kv("RAM", f"{facts['ram_gib']} GiB"))
        logger_instance.info(LogStyle.kv("Root", "yes" if facts["is_root"] else "no"))

    def _log_backend_section(self, logger_instance: logging.Logger, cfg: "Config") -> None:
        """Logs the selected environment strategy and its identity."""
        env = cfg.environment
        backend = cfg.backend.value if cfg.backend is not None else "undecided"

        logger_instance.info("[BACKEND]")
        logger_instance.info(LogStyle.kv("Strategy", backend))
        if backend == "venv":
            logger_instance.info(LogStyle.kv("Location", cfg.checkout_dir / env.venv_dir))
            logger_instance.info(LogStyle.kv("Interpreter", env.venv_python))
        else:
            logger_instance.info(LogStyle.kv("Env Name", env.name))
            logger_instance.info(LogStyle.kv("Python", env.python_version))
        if backend == "micromamba":
            logger_instance.info(LogStyle.kv("Root Prefix", env.micromamba_root_path))

    def _log_repository_section(self, logger_instance: logging.Logger, cfg: "Config") -> None:
        """Logs the remote project and its native submodules."""
        repo = cfg.repository

        logger_instance.info("[REPOSITORY]")
        logger_instance.info(LogStyle.kv("Remote", repo.url))
        logger_instance.info(LogStyle.kv("Dirty Policy", repo.dirty_policy))
        for sub in repo.submodules:
            logger_instance.info(
                f"{LogStyle.DOUBLE_INDENT}{LogStyle.BULLET} {sub.path} ({sub.install})"
            )
        if cfg.system.enabled:
            logger_instance.info(LogStyle.kv("OS Packages", " ".join(cfg.system.packages)))
        else:
            logger_instance.info(LogStyle.kv("OS Packages", "disabled"))
