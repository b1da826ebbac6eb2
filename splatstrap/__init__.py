"""
Splatstrap: one-command provisioning for Triangle Splatting.

Top-level convenience API re-exporting the most commonly used components
from subpackages, so users and the ``splatstrap`` CLI can write:

    from splatstrap import Config, ProvisionOrchestrator, ProvisionRunner
"""

from importlib.metadata import version as _pkg_version

__version__ = _pkg_version("splatstrap")

from .backends import EnvironmentHandle, get_backend, parse_backend_choice
from .core import BackendKind, Config, LogStyle, ProvisionOrchestrator, log_provision_summary
from .pipeline import ProvisionReport, ProvisionRunner, StepResult, StepStatus

__all__ = [
    "__version__",
    # Core
    "Config",
    "BackendKind",
    "LogStyle",
    "ProvisionOrchestrator",
    "log_provision_summary",
    # Backends
    "EnvironmentHandle",
    "get_backend",
    "parse_backend_choice",
    # Pipeline
    "ProvisionRunner",
    "ProvisionReport",
    "StepResult",
    "StepStatus",
]
