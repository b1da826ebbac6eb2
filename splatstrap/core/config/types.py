"""
Semantic type Definitions & Validation Primitives.

Foundational type-system for the configuration engine. Leverages Pydantic's
Annotated types and functional validators to enforce domain constraints
(package names, environment names, relative paths) before any external
command is assembled from them.

Core Responsibilities:
    * Path sanitization: Resolves paths to absolute forms with home directory
      expansion (~), without disk I/O
    * Relative-path enforcement: Checkout-relative fragments (manifest,
      submodules, venv dir) may not escape the checkout
    * type aliasing: Centralized registry of domain-specific types
      (PackageSpec, EnvName, PythonVersion) for semantic consistency
    * Backend identity: The three mutually exclusive environment strategies
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Annotated, Literal

from pydantic import AfterValidator, Field, PlainSerializer


# VALIDATORS
def _sanitize_path(v: str | Path) -> Path:
    """
    Resolve path to absolute form without disk side-effects.

    Args:
        v: Path object or string to sanitize

    Returns:
        Absolute Path with home directory expanded
    """
    return Path(v).expanduser().resolve()


def _ensure_relative(v: str) -> str:
    """
    Reject absolute fragments and parent traversal.

    Args:
        v: Path fragment relative to the checkout root.

    Returns:
        The fragment normalized to forward slashes.

    Raises:
        ValueError: If the fragment is absolute or contains ``..``.
    """
    pure = PurePosixPath(v.replace("\\", "/"))
    if pure.is_absolute() or ".." in pure.parts:
        raise ValueError(f"Path must stay inside the checkout: '{v}'")
    return str(pure)


# BACKENDS
class BackendKind(str, Enum):
    """Environment strategy selected by the operator."""

    VENV = "venv"
    MICROMAMBA = "micromamba"
    CONDA = "conda"


# FILESYSTEM
ValidatedPath = Annotated[
    Path,
    AfterValidator(_sanitize_path),
    PlainSerializer(lambda v: str(v), when_used="json", return_type=str),
]
RelativePath = Annotated[str, Field(min_length=1), AfterValidator(_ensure_relative)]

# PACKAGES & ENVIRONMENTS
PackageSpec = Annotated[str, Field(min_length=1, pattern=r"^\S+$")]
EnvName = Annotated[str, Field(pattern=r"^[A-Za-z0-9_.-]+$", min_length=1, max_length=64)]
PythonVersion = Annotated[str, Field(pattern=r"^\d+\.\d+(\.\d+)?$")]
HttpUrl = Annotated[str, Field(pattern=r"^https?://\S+$")]

# POLICIES
DirtyPolicy = Literal["fail", "proceed"]
SudoPolicy = Literal["auto", "always", "never"]
SubmoduleInstall = Literal["pip", "setup_py"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
