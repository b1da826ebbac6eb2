"""
Splatstrap Exception Hierarchy.

SplatstrapError (base, Exception)
├── SplatstrapConfigError(SplatstrapError, ValueError)   ← config / operator input
│   └── InvalidChoiceError                               ← backend prompt
└── ProvisionError(SplatstrapError)                      ← fatal step failure
    ├── CommandNotFoundError                             ← executable missing on PATH
    ├── CommandFailedError                               ← non-zero exit status
    ├── BackendUnavailableError                          ← no conda/mamba found
    ├── DirtyCheckoutError                               ← local changes in checkout
    ├── DownloadError                                    ← installer download failed
    └── VerificationError                                ← framework import failed

SplatstrapConfigError multi-inherits from ValueError so pydantic validators
and ``except ValueError`` blocks keep working.
"""

from __future__ import annotations

from typing import Sequence


class SplatstrapError(Exception):
    """Base exception for all Splatstrap errors."""


class SplatstrapConfigError(SplatstrapError, ValueError):
    """Configuration validation error (backward-compatible with ValueError)."""


class InvalidChoiceError(SplatstrapConfigError):
    """Operator entered a value outside the offered backend choices."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid choice: '{value}'. Expected one of 1, 2, 3.")


class ProvisionError(SplatstrapError):
    """A provisioning step could not complete; the run must stop."""


class CommandNotFoundError(ProvisionError):
    """Required executable is not on the search path."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(f"Required executable not found on PATH: {executable}")


class CommandFailedError(ProvisionError):
    """External command exited with a non-zero status."""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.cmd = tuple(cmd)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed with exit status {returncode}: {' '.join(self.cmd)}")


class BackendUnavailableError(ProvisionError):
    """Selected environment backend has no usable tool on this machine."""


class DirtyCheckoutError(ProvisionError):
    """Existing checkout has local modifications and cannot be updated safely."""


class DownloadError(ProvisionError):
    """Installer archive could not be downloaded or unpacked."""


class VerificationError(ProvisionError):
    """Deep-learning framework could not be imported in the new environment."""
