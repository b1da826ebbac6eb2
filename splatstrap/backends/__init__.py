"""
Environment Backends Package.

Three interchangeable strategies for creating the isolated Python
environment, selected by an explicit BackendKind and resolved through a
registry-based factory.
"""

from .base import EnvironmentBackend, EnvironmentHandle, named_env_exists
from .conda import CondaBackend
from .factory import BACKEND_CHOICES, backend_menu, get_backend, parse_backend_choice
from .micromamba import MicromambaBackend, extract_micromamba
from .venv import VenvBackend

__all__ = [
    "EnvironmentBackend",
    "EnvironmentHandle",
    "named_env_exists",
    "VenvBackend",
    "MicromambaBackend",
    "CondaBackend",
    "extract_micromamba",
    "BACKEND_CHOICES",
    "backend_menu",
    "get_backend",
    "parse_backend_choice",
]
