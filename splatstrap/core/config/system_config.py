"""
System Packages Manifest.

Declarative schema for the OS-level build dependencies installed through the
system package manager before any Python environment is created.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import PackageSpec, SudoPolicy

_DEFAULT_PACKAGES = (
    "git",
    "build-essential",
    "python3.11",
    "python3.11-venv",
    "python3.11-dev",
    "wget",
    "curl",
)


class SystemConfig(BaseModel):
    """
    OS package installation policy.

    Attributes:
        enabled: Run the package manager step at all. Disable on hosts
            where the build toolchain is managed externally.
        use_sudo: ``auto`` prefixes commands with sudo when not running as
            root and sudo is available; ``always``/``never`` force it.
        packages: Package names passed to ``apt-get install -y``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = Field(default=True, description="Install OS build dependencies")
    use_sudo: SudoPolicy = Field(default="auto")
    packages: list[PackageSpec] = Field(default_factory=lambda: list(_DEFAULT_PACKAGES))

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """Treat an empty YAML section (``system:``) as all-defaults."""
        if data is None:
            return {}
        return data

    def resolve_sudo(self, is_root: bool, sudo_available: bool) -> bool:
        """
        Decide whether package manager commands need a sudo prefix.

        Args:
            is_root: Current process runs with effective uid 0.
            sudo_available: ``sudo`` was found on the search path.

        Returns:
            True if commands must be prefixed with ``sudo``.
        """
        if self.use_sudo == "always":
            return True
        if self.use_sudo == "never":
            return False
        return (not is_root) and sudo_available
