"""
Dependency Manifest Writer.

Schema, default content and persistence of the conda-style environment file
(``requirements.yaml``) at the checkout root. An existing manifest is the
operator's (or the project's) and is never rewritten; a missing one is
created from the default below.

Default manifest::

    name: triangle-splatting
    channels: [conda-forge, pytorch, nvidia]
    dependencies:
      - python=3.11
      - pytorch::pytorch=2.4.1
      - pytorch::torchvision
      - conda-forge::{tqdm, matplotlib, plyfile, opencv, imageio, imageio-ffmpeg, lpips}
      - pip
      - pip: [submodules/diff-surfel-rasterization, submodules/simple-knn]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..core.config.types import EnvName
from ..core.io import load_config_from_yaml, save_config_as_yaml
from ..core.logger.styles import LogStyle
from ..core.paths import DEFAULT_ENV_NAME, LOGGER_NAME
from ..exceptions import ProvisionError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "ManifestWriter"

DEFAULT_CHANNELS = ("conda-forge", "pytorch", "nvidia")
DEFAULT_PYTORCH_VERSION = "2.4.1"
DEFAULT_FORGE_PACKAGES = (
    "tqdm",
    "matplotlib",
    "plyfile",
    "opencv",
    "imageio",
    "imageio-ffmpeg",
    "lpips",
)
DEFAULT_PIP_PATHS = ("submodules/diff-surfel-rasterization", "submodules/simple-knn")


class PipSection(BaseModel):
    """``- pip: [...]`` entry of the dependency list."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pip: list[str] = Field(default_factory=list)


class Manifest(BaseModel):
    """
    Conda-style environment file.

    Keys other than ``name``, ``channels`` and ``dependencies`` (``prefix``,
    ``variables``...) are accepted and preserved on the model.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: EnvName
    channels: list[str] = Field(default_factory=list)
    dependencies: list[Union[str, PipSection]] = Field(default_factory=list)

    def conda_specs(self) -> list[str]:
        """Package specs resolved by the conda-family solver."""
        return [dep for dep in self.dependencies if isinstance(dep, str)]

    def pip_specs(self) -> list[str]:
        """Requirements installed by pip inside the environment."""
        specs: list[str] = []
        for dep in self.dependencies:
            if isinstance(dep, PipSection):
                specs.extend(dep.pip)
        return specs


def default_manifest(
    name: str = DEFAULT_ENV_NAME,
    python_version: str = "3.11",
    pip_paths: Sequence[str] = DEFAULT_PIP_PATHS,
) -> Manifest:
    """
    Build the default manifest.

    With no arguments this is exactly the stock Triangle Splatting
    environment file.

    Args:
        name: Environment name.
        python_version: Interpreter pin.
        pip_paths: Checkout-relative submodule directories for the pip section.

    Returns:
        Validated Manifest.
    """
    dependencies: list[Union[str, PipSection]] = [
        f"python={python_version}",
        f"pytorch::pytorch={DEFAULT_PYTORCH_VERSION}",
        "pytorch::torchvision",
        *(f"conda-forge::{pkg}" for pkg in DEFAULT_FORGE_PACKAGES),
        "pip",
        PipSection(pip=list(pip_paths)),
    ]
    return Manifest(name=name, channels=list(DEFAULT_CHANNELS), dependencies=dependencies)


def load_manifest(path: Path) -> Manifest:
    """
    Read and validate a manifest file.

    Raises:
        ProvisionError: If the file is missing, not YAML, or not a manifest.
    """
    try:
        data = load_config_from_yaml(path)
        return Manifest.model_validate(data)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise ProvisionError(f"Invalid dependency manifest {path}: {e}") from e


def write_manifest(
    path: Path, manifest: Manifest | None = None, force: bool = False
) -> tuple[Manifest, StepResult]:
    """
    Create the manifest if it does not exist, then load it.

    Args:
        path: Manifest location (normally ``<checkout>/requirements.yaml``).
        manifest: Content to write when absent (default manifest when None).
        force: Overwrite an existing file (only used by the ``manifest`` CLI).

    Returns:
        The manifest as found on disk and an OK (written) or SKIPPED (kept) result.

    Raises:
        ProvisionError: If the resulting file is not a valid manifest.
    """
    if path.exists() and not force:
        logger.info(f"{LogStyle.INDENT}{LogStyle.SKIP} Keeping existing manifest {path}")
        return load_manifest(path), StepResult(STEP_NAME, StepStatus.SKIPPED, f"kept {path}")

    logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Creating {path.name}...")
    save_config_as_yaml(manifest or default_manifest(), path, indent=2)
    return load_manifest(path), StepResult(STEP_NAME, StepStatus.OK, f"wrote {path}")
