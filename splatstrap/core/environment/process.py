"""
External Process Boundary.

Every package manager, version-control and build command issued by the
provisioner goes through :class:`CommandRunner`. Steps and backends receive
a runner instance instead of calling ``subprocess`` directly, so tests swap
in a recording fake and never touch the host.

Commands are always passed as argument lists (no shell), run to completion
synchronously, and by default stream their output straight to the
terminal, mirroring an interactive setup session.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from ...exceptions import CommandFailedError, CommandNotFoundError, ProvisionError
from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    cmd: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0


class CommandRunnerProtocol(Protocol):
    """Structural contract for the process-execution boundary."""

    def which(self, name: str, extra_paths: Sequence[Path] = ()) -> str | None:
        """Locate an executable on the search path."""
        ...  # pragma: no cover

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
        check: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command and wait for it to finish."""
        ...  # pragma: no cover


class CommandRunner:
    """
    Synchronous subprocess executor with PATH lookup and failure mapping.

    Args:
        base_env: Extra environment variables applied to every command
            (on top of ``os.environ``).
    """

    def __init__(self, base_env: Mapping[str, str] | None = None) -> None:
        self.base_env = dict(base_env or {})

    def which(self, name: str, extra_paths: Sequence[Path] = ()) -> str | None:
        """
        Locate *name* on PATH, optionally searching extra directories first.

        Args:
            name: Executable name.
            extra_paths: Directories prepended to PATH for this lookup.

        Returns:
            Absolute path of the executable, or None when absent.
        """
        search = os.pathsep.join(
            [str(p) for p in extra_paths] + [os.environ.get("PATH", os.defpath)]
        )
        return shutil.which(name, path=search)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
        check: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        """
        Execute *cmd* and block until it exits.

        Args:
            cmd: Program and arguments.
            cwd: Working directory for the child process.
            env: Variables layered over ``os.environ`` and ``base_env``.
            capture: Capture stdout/stderr as text instead of streaming them.
            check: Raise CommandFailedError on a non-zero exit status.
            timeout: Seconds before the child is killed (None = wait forever).

        Returns:
            CommandResult with exit status and captured output.

        Raises:
            CommandNotFoundError: If the executable does not exist.
            ProvisionError: If the working directory is unusable or the OS refuses
                to start the child.
            CommandFailedError: If ``check`` and the exit status is non-zero.
        """
        argv = [str(part) for part in cmd]
        merged_env = {**os.environ, **self.base_env, **(env or {})}

        where = f" (in {cwd})" if cwd else ""
        logger.debug(f"$ {' '.join(argv)}{where}")

        try:
            completed = subprocess.run(  # nosec B603
                argv,
                cwd=cwd,
                env=merged_env,
                capture_output=capture,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            if cwd is None or Path(cwd).is_dir():
                raise CommandNotFoundError(argv[0]) from e
            raise ProvisionError(f"Working directory {cwd} does not exist for: {argv[0]}") from e
        except OSError as e:
            raise ProvisionError(f"Cannot run {argv[0]}{where}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ProvisionError(f"{argv[0]} timed out after {timeout}s{where}") from e

        result = CommandResult(
            cmd=tuple(argv),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if check and not result.ok:
            raise CommandFailedError(argv, result.returncode, result.stderr)
        return result
