"""
Run Configuration Manifest.

Top-level, immutable description of one provisioning run (the RunConfig):
working directory, chosen backend, repository, system packages, Python
environment, dependency manifest location and telemetry policy.

A Config is built once at start-up from defaults, an optional YAML recipe
and ``--set`` overrides. The backend is either preset in the recipe or
filled in from the interactive prompt through :meth:`Config.with_backend`;
after that the object never changes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..io import load_config_from_yaml
from ..paths import DEFAULT_MANIFEST_NAME, LOCK_FILENAME, state_dir
from .environment_config import EnvironmentConfig
from .repository_config import RepositoryConfig
from .system_config import SystemConfig
from .telemetry_config import TelemetryConfig
from .types import BackendKind, RelativePath, ValidatedPath


def _deep_set(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """
    Assign *value* at a dotted path, creating intermediate dicts.

    Args:
        data: Nested dictionary modified in place.
        dotted_key: Path such as ``environment.name``.
        value: Value to store at the leaf.
    """
    keys = dotted_key.split(".")
    node = data
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


class Config(BaseModel):
    """
    Validated, frozen configuration of a provisioning run.

    Attributes:
        workdir: Directory under which the checkout is created.
        backend: Selected environment backend, or None until the operator chooses.
        repository: Remote project and submodule settings.
        system: OS package installation policy.
        environment: Isolated Python environment definition.
        manifest_path: Dependency manifest location relative to the checkout.
        telemetry: Logging policy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    workdir: ValidatedPath = Field(default=Path("."), validate_default=True)
    backend: BackendKind | None = Field(default=None)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    manifest_path: RelativePath = Field(default=DEFAULT_MANIFEST_NAME)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    # --- Derived locations ---

    @property
    def checkout_dir(self) -> Path:
        """Absolute checkout directory."""
        return self.workdir / self.repository.directory

    @property
    def state_dir(self) -> Path:
        """Hidden per-workdir directory for logs and the run lock."""
        return state_dir(self.workdir)

    @property
    def log_dir(self) -> Path:
        """Directory receiving rotating log files."""
        return self.state_dir / "logs"

    @property
    def lock_file_path(self) -> Path:
        """Advisory lock preventing two runs on the same working directory."""
        return self.state_dir / LOCK_FILENAME

    # --- Factories ---

    def with_backend(self, backend: BackendKind) -> "Config":
        """
        Return a copy with the operator's backend choice recorded.

        Raises:
            ValueError: If a different backend was already fixed.
        """
        if self.backend is not None and self.backend != backend:
            raise ValueError(
                f"Backend already fixed to '{self.backend.value}', cannot switch to "
                f"'{backend.value}'"
            )
        return self.model_copy(update={"backend": backend})

    @classmethod
    def from_recipe(cls, recipe: Path, overrides: dict[str, Any] | None = None) -> "Config":
        """
        Build a Config from a YAML recipe plus dotted-key overrides.

        Args:
            recipe: Path to the YAML recipe.
            overrides: Mapping like ``{"environment.name": "ts"}``.

        Returns:
            Validated Config.
        """
        data = load_config_from_yaml(recipe) or {}
        return cls.from_overrides(data, overrides)

    @classmethod
    def from_overrides(
        cls, data: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None
    ) -> "Config":
        """
        Build a Config from a raw dict (defaults when None) plus dotted-key overrides.

        Args:
            data: Raw configuration mapping, e.g. loaded from YAML.
            overrides: Mapping like ``{"telemetry.log_level": "DEBUG"}``.

        Returns:
            Validated Config.
        """
        merged: dict[str, Any] = dict(data or {})
        for key, value in (overrides or {}).items():
            _deep_set(merged, key, value)
        return cls.model_validate(merged)

    def dump_portable(self) -> dict[str, Any]:
        """JSON-compatible dump used for the run snapshot and reports."""
        return self.model_dump(mode="json")
