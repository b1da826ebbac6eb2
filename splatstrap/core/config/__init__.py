"""
Configuration Package Initialization.

Provides a unified, flat public API for configuration components while
deferring imports until a name is actually used.

Architecture:

- Lazy Import Pattern (PEP 562): Uses __getattr__ for on-demand loading
- Flat API: All configs accessible from splatstrap.core.config namespace
- Caching: Loaded attributes cached in globals() for performance

Example:
    >>> from splatstrap.core.config import Config, BackendKind
    >>> cfg = Config().with_backend(BackendKind.VENV)
"""

from importlib import import_module
from typing import Any

__all__ = [
    "Config",
    "BackendKind",
    "RepositoryConfig",
    "SubmoduleConfig",
    "SystemConfig",
    "EnvironmentConfig",
    "TelemetryConfig",
    "ValidatedPath",
]

# LAZY IMPORTS MAPPING
_PKG = "splatstrap.core.config"
_TYPES_MOD = f"{_PKG}.types"
_REPO_MOD = f"{_PKG}.repository_config"

_LAZY_IMPORTS: dict[str, str] = {
    "Config": f"{_PKG}.run_config",
    "BackendKind": _TYPES_MOD,
    "ValidatedPath": _TYPES_MOD,
    "RepositoryConfig": _REPO_MOD,
    "SubmoduleConfig": _REPO_MOD,
    "SystemConfig": f"{_PKG}.system_config",
    "EnvironmentConfig": f"{_PKG}.environment_config",
    "TelemetryConfig": f"{_PKG}.telemetry_config",
}


def __getattr__(name: str) -> Any:
    """
    Lazily import configuration components on first access.

    Args:
        name: Name of the configuration class to import.

    Returns:
        The requested configuration class.

    Raises:
        AttributeError: If name is not in the public API (__all__).
    """
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(_LAZY_IMPORTS[name])
    attr = getattr(module, name)

    globals()[name] = attr
    return attr


def __dir__() -> list[str]:
    """Support for dir() and IDE auto-completion."""
    return sorted(__all__)
