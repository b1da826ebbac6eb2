"""
System Package Installer.

Refreshes the apt index and installs the OS-level build dependencies
(compiler toolchain, Python 3.11 headers and venv support, download tools).
Both commands are fatal on failure.
"""

from __future__ import annotations

import logging

from ..core.config.system_config import SystemConfig
from ..core.environment import CommandRunnerProtocol, is_root
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import CommandNotFoundError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "PackageInstaller"

NONINTERACTIVE = "DEBIAN_FRONTEND=noninteractive"


def apt_commands(packages: list[str], use_sudo: bool) -> list[list[str]]:
    """
    Build the ``apt-get update`` and ``apt-get install`` invocations.

    sudo resets the environment, so the non-interactive frontend is passed as
    a sudo variable assignment instead of through the process environment.

    Args:
        packages: Package names to install.
        use_sudo: Prefix both commands with sudo.

    Returns:
        The two argument lists, update first.
    """
    prefix = ["sudo", NONINTERACTIVE] if use_sudo else []
    return [
        [*prefix, "apt-get", "update"],
        [*prefix, "apt-get", "install", "-y", *packages],
    ]


def install_system_packages(
    cfg: SystemConfig,
    runner: CommandRunnerProtocol,
    running_as_root: bool | None = None,
) -> StepResult:
    """
    Install OS build dependencies with apt.

    Args:
        cfg: System package policy.
        runner: Process boundary.
        running_as_root: Override for the effective-uid check (host value when None).

    Returns:
        OK after both commands succeed, SKIPPED when disabled.

    Raises:
        CommandNotFoundError: If apt-get is not available.
        CommandFailedError: If either apt command fails.
    """
    if not cfg.enabled:
        logger.info(f"{LogStyle.INDENT}{LogStyle.SKIP} System package installation disabled")
        return StepResult(STEP_NAME, StepStatus.SKIPPED, "disabled by configuration")

    if runner.which("apt-get") is None:
        raise CommandNotFoundError("apt-get")

    root = is_root() if running_as_root is None else running_as_root
    use_sudo = cfg.resolve_sudo(root, runner.which("sudo") is not None)
    logger.info(LogStyle.kv("Sudo", "yes" if use_sudo else "no"))

    env = {"DEBIAN_FRONTEND": "noninteractive"}
    for cmd in apt_commands(cfg.packages, use_sudo):
        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {' '.join(cmd)}")
        runner.run(cmd, env=env)

    return StepResult(STEP_NAME, StepStatus.OK, f"{len(cfg.packages)} packages installed")
