"""
Process & Resource Guarding Utilities.

Provides an exclusive, non-blocking advisory lock (``flock``) on a sentinel
file inside the working directory's state folder. Two provisioning runs on
the same working directory would race on the checkout, the manifest and the
environment registry; the second one aborts instead.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import IO

# Tentative import for Unix-specific file locking
try:
    import fcntl

    HAS_FCNTL = True
except ImportError:  # pragma: no cover
    HAS_FCNTL = False

from ...exceptions import ProvisionError
from ..logger.styles import LogStyle

# Global State
# Persistent file descriptor to prevent garbage collection from releasing locks
_lock_fd: IO | None = None


def ensure_single_instance(lock_file: Path, logger: logging.Logger) -> None:
    """
    Implements a cooperative advisory lock to guarantee singleton execution.

    Args:
        lock_file (Path): Filesystem path where the lock sentinel will reside.
        logger (logging.Logger): Active logger for reporting acquisition status.

    Raises:
        ProvisionError: If another run already holds the lock.
    """
    global _lock_fd

    # Locking is currently only supported on Unix-like systems via fcntl
    if platform.system() not in ("Linux", "Darwin") or not HAS_FCNTL:
        logger.debug("File locking unavailable on this platform; skipping.")
        return

    f: IO | None = None
    try:
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        f = open(lock_file, "a")

        # Attempt to acquire an exclusive lock without blocking
        fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
        _lock_fd = f
        logger.debug(f"{LogStyle.INDENT}{LogStyle.ARROW} Run lock acquired: {lock_file}")

    except (IOError, BlockingIOError) as e:
        if f is not None:
            f.close()
        logger.error(f"{LogStyle.WARNING} Another provisioning run is active. Aborting.")
        raise ProvisionError(f"Another provisioning run holds {lock_file}") from e


def release_single_instance(lock_file: Path) -> None:
    """
    Safely releases the run lock and unlinks the sentinel file.

    Args:
        lock_file (Path): Filesystem path to the sentinel file to be removed.
    """
    global _lock_fd

    if _lock_fd:
        try:
            if HAS_FCNTL:
                try:
                    fcntl.flock(_lock_fd, fcntl.LOCK_UN)
                except OSError:
                    # Unlock may fail if the descriptor is already invalid
                    pass
            _lock_fd.close()
        finally:
            _lock_fd = None

    # Attempt unlink directly to avoid TOCTOU race condition
    try:
        lock_file.unlink()
    except FileNotFoundError:
        pass
