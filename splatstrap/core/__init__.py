"""
Core Utilities Package

This package exposes the essential components for configuration, logging,
process execution, project constants and filesystem persistence. It also
includes the ProvisionOrchestrator that manages the provisioning run
lifecycle.
"""

# Configuration
from .config import (
    BackendKind,
    Config,
    EnvironmentConfig,
    RepositoryConfig,
    SubmoduleConfig,
    SystemConfig,
    TelemetryConfig,
)

# Environment & Process Boundary
from .environment import (
    CommandResult,
    CommandRunner,
    CommandRunnerProtocol,
    TimeTracker,
    TimeTrackerProtocol,
    ensure_single_instance,
    host_summary,
    release_single_instance,
)

# Input/Output Utilities
from .io import download_file, load_config_from_yaml, save_config_as_yaml

# Logging
from .logger import (
    Logger,
    LogStyle,
    Reporter,
    log_provision_summary,
    log_step_header,
    log_step_result,
)

# Lifecycle Orchestration
from .orchestrator import ProvisionOrchestrator

# Constants & Paths
from .paths import LOGGER_NAME, state_dir

__all__ = [
    # Configuration
    "Config",
    "BackendKind",
    "RepositoryConfig",
    "SubmoduleConfig",
    "SystemConfig",
    "EnvironmentConfig",
    "TelemetryConfig",
    # Environment
    "CommandRunner",
    "CommandRunnerProtocol",
    "CommandResult",
    "TimeTracker",
    "TimeTrackerProtocol",
    "ensure_single_instance",
    "release_single_instance",
    "host_summary",
    # I/O
    "save_config_as_yaml",
    "load_config_from_yaml",
    "download_file",
    # Logging
    "Logger",
    "LogStyle",
    "Reporter",
    "log_step_header",
    "log_step_result",
    "log_provision_summary",
    # Orchestration
    "ProvisionOrchestrator",
    # Paths
    "LOGGER_NAME",
    "state_dir",
]
