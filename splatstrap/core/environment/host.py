"""
Host Inspection Utilities.

Collects operating-system, interpreter, CPU and memory facts for the
environment report printed at the start of a provisioning run.
All capacities are reported in GiB (2^30 bytes).
"""

from __future__ import annotations

import os
import platform
import sys

import psutil


def ram_gib() -> float:
    """Total system RAM in GiB, rounded to one decimal."""
    return round(psutil.virtual_memory().total / (1024**3), 1)


def disk_free_gib(path: str) -> float:
    """Free disk space in GiB for the filesystem holding *path*."""
    return round(psutil.disk_usage(path).free / (1024**3), 1)


def is_root() -> bool:
    """True when the process runs with effective uid 0 (always False on Windows)."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def host_summary() -> dict:
    """
    Gather host facts for reporting.

    Returns:
        Mapping with ``system``, ``release``, ``machine``, ``python``,
        ``cpu_physical_cores``, ``cpu_logical_cores``, ``ram_gib`` and
        ``is_root`` keys.
    """
    return {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
        "python": sys.version.split()[0],
        "cpu_physical_cores": psutil.cpu_count(logical=False),
        "cpu_logical_cores": psutil.cpu_count(logical=True),
        "ram_gib": ram_gib(),
        "is_root": is_root(),
    }
