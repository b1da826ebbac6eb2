"""
Pipeline Orchestration Module.

Provides the ordered step runner and the result containers it produces:

- StepStatus / StepResult: explicit per-step outcome values
- ProvisionReport: aggregated outcomes with the failing step, if any
- ProvisionRunner: fail-fast executor of the provisioning steps

The runner is loaded lazily (PEP 562) because the step modules themselves
import the result containers from this package.

Example:
    >>> from splatstrap.pipeline import ProvisionRunner
    >>> with ProvisionOrchestrator(cfg) as orch:
    ...     report = ProvisionRunner(orch.cfg, orch.runner, orch.run_logger).run()
"""

from importlib import import_module
from typing import Any

from .results import ProvisionReport, StepResult, StepStatus

__all__ = [
    "StepStatus",
    "StepResult",
    "ProvisionReport",
    "ProvisionRunner",
    "ProvisionState",
]

_LAZY_IMPORTS: dict[str, str] = {
    "ProvisionRunner": "splatstrap.pipeline.runner",
    "ProvisionState": "splatstrap.pipeline.runner",
}


def __getattr__(name: str) -> Any:
    """Lazily import runner components on first access."""
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    attr = getattr(import_module(_LAZY_IMPORTS[name]), name)
    globals()[name] = attr
    return attr


def __dir__() -> list[str]:
    """Support for dir() and IDE auto-completion."""
    return sorted(__all__)
