"""
Telemetry Manifest.

Declarative schema for logging policy. The log directory itself is derived
from the working directory (``<workdir>/.splatstrap/logs``) so that logs of
a provisioning run always sit next to the checkout they describe.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import LogLevel


class TelemetryConfig(BaseModel):
    """
    Logging behaviour of a provisioning run.

    Attributes:
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_to_file: Mirror console output to a rotating file in the state dir.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    log_level: LogLevel = Field(default="INFO")
    log_to_file: bool = Field(default=True)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """
        Handle empty YAML section by returning default dict.

        When YAML contains 'telemetry:' with no values, Pydantic receives None.
        This validator converts None to empty dict, allowing field defaults
        to apply correctly.
        """
        if data is None:
            return {}
        return data
