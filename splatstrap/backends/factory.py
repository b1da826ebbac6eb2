"""
Backend Factory Module.

Implements the Factory Pattern using a registry-based approach to decouple
backend instantiation from step logic, plus the translation of the
operator's numbered menu answer into a backend identity.

Key Components:

- ``BACKEND_CHOICES``: Menu number to backend mapping, in display order
- ``parse_backend_choice``: Strict validation of the operator's answer
- ``get_backend``: Factory function resolving a BackendKind to an instance

Example:
    >>> kind = parse_backend_choice(" 2 ")
    >>> backend = get_backend(kind, cfg.environment, CommandRunner())
    >>> backend.prepare()
"""

from __future__ import annotations

from typing import Callable

from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandRunnerProtocol
from ..exceptions import InvalidChoiceError
from .base import EnvironmentBackend
from .conda import CondaBackend
from .micromamba import MicromambaBackend
from .venv import VenvBackend

_BuilderFn = Callable[[EnvironmentConfig, CommandRunnerProtocol], EnvironmentBackend]

_BACKEND_REGISTRY: dict[BackendKind, _BuilderFn] = {
    BackendKind.VENV: VenvBackend,
    BackendKind.MICROMAMBA: MicromambaBackend,
    BackendKind.CONDA: CondaBackend,
}

# Menu answer -> (backend, label shown to the operator)
BACKEND_CHOICES: dict[str, tuple[BackendKind, str]] = {
    "1": (BackendKind.VENV, "Python venv (pip + PyTorch CUDA wheels)"),
    "2": (BackendKind.MICROMAMBA, "Micromamba (environment from requirements.yaml)"),
    "3": (BackendKind.CONDA, "Conda / Mamba (existing installation)"),
}


def backend_menu() -> str:
    """Multi-line menu text listing the numbered strategies."""
    lines = ["Choose the Python environment backend:"]
    lines += [f"  {key}) {label}" for key, (_, label) in BACKEND_CHOICES.items()]
    return "\n".join(lines)


def parse_backend_choice(raw: str | None) -> BackendKind:
    """
    Translate the operator's menu answer into a backend.

    Only the literal answers ``1``, ``2`` and ``3`` are accepted; surrounding
    whitespace is ignored. Names, empty answers and other numbers are
    rejected.

    Args:
        raw: Text read from the prompt.

    Returns:
        Selected BackendKind.

    Raises:
        InvalidChoiceError: For any other input.
    """
    value = (raw or "").strip()
    entry = BACKEND_CHOICES.get(value)
    if entry is None:
        raise InvalidChoiceError(value)
    return entry[0]


def get_backend(
    kind: BackendKind, cfg: EnvironmentConfig, runner: CommandRunnerProtocol
) -> EnvironmentBackend:
    """
    Factory function resolving a backend identity to a ready instance.

    Args:
        kind: Selected strategy.
        cfg: Environment section of the run configuration.
        runner: Process boundary shared by all steps.

    Returns:
        Unprepared backend instance.

    Raises:
        ValueError: If *kind* has no registered implementation.
    """
    builder = _BACKEND_REGISTRY.get(BackendKind(kind))
    if builder is None:  # pragma: no cover
        raise ValueError(f"Unknown backend '{kind}'")
    return builder(cfg, runner)
