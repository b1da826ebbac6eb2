"""
Project-wide Constants and Filesystem Layout.

Single source of truth for names and relative locations shared by every
provisioning step. All paths here are *relative* fragments; steps anchor
them to the working directory or checkout they receive explicitly, so no
module depends on the process working directory.

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules.
    STATE_DIRNAME: Hidden per-workdir directory holding logs and the lock.
    LOCK_FILENAME: Advisory lock file name inside STATE_DIRNAME.
    DEFAULT_REPO_URL: Remote project cloned by RepositoryFetcher.
    DEFAULT_REPO_DIR: Checkout directory name under the working directory.
    DEFAULT_MANIFEST_NAME: Manifest file name relative to the checkout.
    DEFAULT_VENV_DIR: Virtual environment directory relative to the checkout.
    CUDA_DOWNLOAD_URL: Remediation link shown when nvcc is missing.
"""

from pathlib import Path
from typing import Final

__all__ = [
    "LOGGER_NAME",
    "STATE_DIRNAME",
    "LOCK_FILENAME",
    "DEFAULT_REPO_URL",
    "DEFAULT_REPO_DIR",
    "DEFAULT_MANIFEST_NAME",
    "DEFAULT_VENV_DIR",
    "DEFAULT_ENV_NAME",
    "CUDA_DOWNLOAD_URL",
    "MICROMAMBA_URL_TEMPLATE",
    "state_dir",
]

# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "Splatstrap"

# Per-workdir state (logs, lock)
STATE_DIRNAME: Final[str] = ".splatstrap"
LOCK_FILENAME: Final[str] = "splatstrap.lock"

# Target project
DEFAULT_REPO_URL: Final[str] = "https://github.com/trianglesplatting/triangle-splatting"
DEFAULT_REPO_DIR: Final[str] = "triangle-splatting"
DEFAULT_ENV_NAME: Final[str] = "triangle-splatting"
DEFAULT_MANIFEST_NAME: Final[str] = "requirements.yaml"
DEFAULT_VENV_DIR: Final[str] = "venv"

# External resources
CUDA_DOWNLOAD_URL: Final[str] = "https://developer.nvidia.com/cuda-downloads"
MICROMAMBA_URL_TEMPLATE: Final[str] = "https://micro.mamba.pm/api/micromamba/{platform}/latest"


def state_dir(workdir: Path) -> Path:
    """
    Location of the hidden state directory for a working directory.

    Args:
        workdir: Provisioning working directory.

    Returns:
        ``workdir / .splatstrap`` (not created here).
    """
    return workdir / STATE_DIRNAME
