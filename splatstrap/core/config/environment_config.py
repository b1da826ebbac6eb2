"""
Python Environment Manifest.

Declarative schema shared by the three environment backends (venv,
micromamba, conda/mamba). Holds the environment identity, the deep-learning
framework source and the auxiliary library lists, expressed once with pip
names (venv) and once with conda names (conda/mamba).

Single Source of Truth (SSOT) for:
    * Environment name and Python version
    * GPU-enabled framework index and packages
    * Auxiliary library lists per package ecosystem
    * Micromamba installation root and download location
"""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import DEFAULT_ENV_NAME, DEFAULT_VENV_DIR, MICROMAMBA_URL_TEMPLATE
from .types import EnvName, HttpUrl, PackageSpec, PythonVersion, RelativePath

_PIP_PACKAGES = (
    "tqdm",
    "matplotlib",
    "plyfile",
    "opencv-python",
    "imageio",
    "imageio-ffmpeg",
    "lpips",
)

_CONDA_PACKAGES = (
    "tqdm",
    "matplotlib",
    "plyfile",
    "opencv",
    "imageio",
    "imageio-ffmpeg",
)

# (system, machine) -> micromamba platform tag
_MAMBA_PLATFORMS = {
    ("linux", "x86_64"): "linux-64",
    ("linux", "amd64"): "linux-64",
    ("linux", "aarch64"): "linux-aarch64",
    ("linux", "arm64"): "linux-aarch64",
    ("linux", "ppc64le"): "linux-ppc64le",
    ("darwin", "x86_64"): "osx-64",
    ("darwin", "arm64"): "osx-arm64",
}


class EnvironmentConfig(BaseModel):
    """
    Isolated Python environment definition.

    Attributes:
        name: Environment name (conda/micromamba registry key).
        python_version: Interpreter version requested from conda-family tools.
        venv_dir: Virtual environment directory relative to the checkout.
        venv_python: Interpreter used to create the venv.
        torch_index_url: GPU-enabled wheel index for the venv backend.
        torch_packages: Framework packages installed from ``torch_index_url``.
        pip_packages: Auxiliary libraries by pip name (venv backend).
        conda_channels: Channels passed to ``conda install`` in order.
        conda_packages: Auxiliary libraries by conda name (conda backend).
        pytorch_cuda: ``pytorch-cuda`` meta-package version for conda.
        pip_fallback: Libraries the conda backend installs with pip.
        micromamba_root: Micromamba root prefix (``~`` expanded on use).
        micromamba_url: Download URL template, ``{platform}`` substituted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: EnvName = Field(default=DEFAULT_ENV_NAME)
    python_version: PythonVersion = Field(default="3.11")

    # venv backend
    venv_dir: RelativePath = Field(default=DEFAULT_VENV_DIR)
    venv_python: str = Field(default="python3.11", min_length=1)
    torch_index_url: HttpUrl = Field(default="https://download.pytorch.org/whl/cu121")
    torch_packages: list[PackageSpec] = Field(default_factory=lambda: ["torch", "torchvision"])
    pip_packages: list[PackageSpec] = Field(default_factory=lambda: list(_PIP_PACKAGES))

    # conda / mamba backend
    conda_channels: list[PackageSpec] = Field(
        default_factory=lambda: ["pytorch", "nvidia", "conda-forge"]
    )
    conda_packages: list[PackageSpec] = Field(default_factory=lambda: list(_CONDA_PACKAGES))
    pytorch_cuda: str = Field(default="12.1", pattern=r"^\d+\.\d+$")
    pip_fallback: list[PackageSpec] = Field(default_factory=lambda: ["lpips"])

    # micromamba backend
    micromamba_root: str = Field(default="~/micromamba", min_length=1)
    micromamba_url: HttpUrl = Field(default=MICROMAMBA_URL_TEMPLATE)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """Treat an empty YAML section (``environment:``) as all-defaults."""
        if data is None:
            return {}
        return data

    @property
    def micromamba_root_path(self) -> Path:
        """Absolute micromamba root prefix with ``~`` expanded."""
        return Path(self.micromamba_root).expanduser().resolve()

    def micromamba_download_url(self, system: str | None = None, machine: str | None = None) -> str:
        """
        Resolve the micromamba archive URL for a host platform.

        Args:
            system: OS name as reported by ``platform.system()`` (default: host).
            machine: CPU architecture as reported by ``platform.machine()``.

        Returns:
            Download URL with the platform tag substituted.

        Raises:
            ValueError: If the host platform has no micromamba build.
        """
        key = (
            (system or platform.system()).lower(),
            (machine or platform.machine()).lower(),
        )
        tag = _MAMBA_PLATFORMS.get(key)
        if tag is None:
            raise ValueError(f"No micromamba build for platform {key[0]}/{key[1]}")
        return self.micromamba_url.format(platform=tag)
