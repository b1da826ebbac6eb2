"""
Filesystem Layout and Naming Constants.

Centralizes the relative path fragments and identities shared by every
provisioning step. Steps never consult the process working directory:
they anchor these fragments to the ``workdir`` or checkout root they are
handed explicitly.

Example:
    >>> from splatstrap.core.paths import DEFAULT_REPO_DIR, state_dir
    >>> state_dir(Path("/srv/build"))
    PosixPath('/srv/build/.splatstrap')
"""

from .constants import (
    CUDA_DOWNLOAD_URL,
    DEFAULT_ENV_NAME,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_REPO_DIR,
    DEFAULT_REPO_URL,
    DEFAULT_VENV_DIR,
    LOCK_FILENAME,
    LOGGER_NAME,
    MICROMAMBA_URL_TEMPLATE,
    STATE_DIRNAME,
    state_dir,
)

__all__ = [
    "LOGGER_NAME",
    "STATE_DIRNAME",
    "LOCK_FILENAME",
    "DEFAULT_REPO_URL",
    "DEFAULT_REPO_DIR",
    "DEFAULT_ENV_NAME",
    "DEFAULT_MANIFEST_NAME",
    "DEFAULT_VENV_DIR",
    "CUDA_DOWNLOAD_URL",
    "MICROMAMBA_URL_TEMPLATE",
    "state_dir",
]
