"""
Repository Manifest.

Declarative schema for the remote project checkout: where it comes from,
where it lands, how an existing checkout with local changes is treated, and
which nested native submodules must be built into the environment.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import DEFAULT_REPO_DIR, DEFAULT_REPO_URL
from .types import DirtyPolicy, HttpUrl, RelativePath, SubmoduleInstall


class SubmoduleConfig(BaseModel):
    """
    One native-extension submodule installed after the environment exists.

    Attributes:
        path: Directory relative to the checkout root.
        install: ``pip`` runs ``python -m pip install .`` inside the
            submodule; ``setup_py`` runs ``python setup.py install``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: RelativePath
    install: SubmoduleInstall = "pip"

    @property
    def name(self) -> str:
        """Last path component, used in log lines."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]


def _default_submodules() -> list[SubmoduleConfig]:
    return [
        SubmoduleConfig(path="submodules/diff-surfel-rasterization", install="setup_py"),
        SubmoduleConfig(path="submodules/simple-knn", install="pip"),
    ]


class RepositoryConfig(BaseModel):
    """
    Remote project checkout configuration.

    Attributes:
        url: Remote cloned with ``--recursive`` when no checkout exists.
        directory: Checkout directory relative to the working directory.
        dirty_policy: ``fail`` aborts when the existing checkout has local
            modifications; ``proceed`` attempts a fast-forward pull anyway.
        submodules: Native submodules installed into the environment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: HttpUrl = Field(default=DEFAULT_REPO_URL, description="Remote repository URL")
    directory: RelativePath = Field(default=DEFAULT_REPO_DIR)
    dirty_policy: DirtyPolicy = Field(
        default="fail", description="Behavior when the existing checkout is dirty"
    )
    submodules: list[SubmoduleConfig] = Field(default_factory=_default_submodules)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """Treat an empty YAML section (``repository:``) as all-defaults."""
        if data is None:
            return {}
        return data

    @model_validator(mode="after")
    def check_unique_submodules(self) -> "RepositoryConfig":
        """Reject duplicated submodule paths."""
        paths = [s.path for s in self.submodules]
        duplicates = sorted({p for p in paths if paths.count(p) > 1})
        if duplicates:
            raise ValueError(f"Duplicate submodule paths: {duplicates}")
        return self
