"""
Environment & Infrastructure Abstraction Layer.

This package centralizes the process-execution boundary, host inspection,
run locking and timing used by every provisioning step.
"""

from .guards import ensure_single_instance, release_single_instance
from .host import disk_free_gib, host_summary, is_root, ram_gib
from .process import CommandResult, CommandRunner, CommandRunnerProtocol
from .timing import TimeTracker, TimeTrackerProtocol

__all__ = [
    # Process boundary
    "CommandRunner",
    "CommandRunnerProtocol",
    "CommandResult",
    # Host
    "host_summary",
    "ram_gib",
    "disk_free_gib",
    "is_root",
    # Guards
    "ensure_single_instance",
    "release_single_instance",
    # Timing
    "TimeTracker",
    "TimeTrackerProtocol",
]
