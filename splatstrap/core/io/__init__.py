"""
Input/Output Utilities.

YAML persistence for recipe snapshots and dependency manifests, plus the
retrying downloader used for installer archives.
"""

from .download import download_file
from .serialization import load_config_from_yaml, save_config_as_yaml

__all__ = [
    "save_config_as_yaml",
    "load_config_from_yaml",
    "download_file",
]
