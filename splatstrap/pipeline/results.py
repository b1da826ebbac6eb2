"""
Step Outcome Containers.

Every provisioning step returns a :class:`StepResult` instead of aborting the
process. The runner collects them into a :class:`ProvisionReport`, which
knows whether the run succeeded and which step, if any, stopped it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple


class StepStatus(str, Enum):
    """Outcome category of a single step."""

    OK = "ok"
    SKIPPED = "skipped"
    WARNING = "warning"
    FAILED = "failed"


class StepResult(NamedTuple):
    """
    Explicit outcome of one step.

    Attributes:
        step: Step name as shown in logs.
        status: Outcome category.
        detail: Short human-readable summary.
        error: Exception that caused a FAILED status, else None.
    """

    step: str
    status: StepStatus
    detail: str = ""
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        """True when this step stopped the run."""
        return self.status is StepStatus.FAILED


@dataclass
class ProvisionReport:
    """Ordered step results of one provisioning run."""

    results: list[StepResult] = field(default_factory=list)

    def add(self, result: StepResult) -> None:
        """Append a step result."""
        self.results.append(result)

    @property
    def failed_step(self) -> StepResult | None:
        """First failed step, or None when every step passed."""
        return next((r for r in self.results if r.failed), None)

    @property
    def succeeded(self) -> bool:
        """True when no step failed."""
        return self.failed_step is None

    @property
    def exit_code(self) -> int:
        """Process exit status for this report (0 on success, 1 otherwise)."""
        return 0 if self.succeeded else 1

    def status_of(self, step: str) -> StepStatus | None:
        """Status recorded for *step*, or None if it never ran."""
        for result in self.results:
            if result.step == step:
                return result.status
        return None
