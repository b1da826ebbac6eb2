"""
Telemetry and Reporting Package.

This package centralizes run logging, environment reporting, and progress
output. It provides high-level utilities to initialize the provisioner
logger and format run metadata for auditing.

Available Components:

- Logger: Static utility for stream and file logging initialization.
- Reporter: Metadata reporting engine for environment baseline status.
- LogStyle: Unified logging style constants.
- Progress functions: Step headers, step outcomes and the final summary.
"""

from .logger import ColorFormatter, Logger
from .progress import log_provision_summary, log_step_header, log_step_result
from .reporter import Reporter, ReporterProtocol
from .styles import LogStyle

__all__ = [
    "Logger",
    "ColorFormatter",
    "Reporter",
    "ReporterProtocol",
    "LogStyle",
    "log_step_header",
    "log_step_result",
    "log_provision_summary",
]
