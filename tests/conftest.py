"""
Shared fixtures for the Splatstrap test suite.

External processes are never executed: every step and backend receives a
``FakeRunner`` that records the commands it was asked to run and answers
them from canned responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

import pytest

from splatstrap.core.config import BackendKind, Config
from splatstrap.core.environment import CommandResult
from splatstrap.exceptions import CommandFailedError, CommandNotFoundError


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: multi-component tests")


@dataclass
class Call:
    """One recorded command invocation."""

    cmd: tuple[str, ...]
    cwd: Path | None
    env: Mapping[str, str] | None
    capture: bool
    check: bool


@dataclass
class _Rule:
    match: tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    hook: Callable[[tuple[str, ...], Path | None], None] | None = None
    missing: bool = False


def _contains(argv: tuple[str, ...], needle: tuple[str, ...]) -> bool:
    n = len(needle)
    return any(argv[i : i + n] == needle for i in range(len(argv) - n + 1))


@dataclass
class FakeRunner:
    """Recording stand-in for CommandRunner."""

    paths: dict[str, str | None] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    which_calls: list[tuple[str, tuple[Path, ...]]] = field(default_factory=list)
    rules: list[_Rule] = field(default_factory=list)

    # --- configuration helpers ---

    def install(self, *names: str) -> "FakeRunner":
        """Pretend *names* are on PATH under /usr/bin."""
        for name in names:
            self.paths[name] = f"/usr/bin/{name}"
        return self

    def respond(
        self,
        *match: str,
        stdout: str = "",
        returncode: int = 0,
        stderr: str = "",
        hook: Callable[[tuple[str, ...], Path | None], None] | None = None,
    ) -> "FakeRunner":
        """Answer commands containing the contiguous tokens *match*."""
        self.rules.append(_Rule(tuple(match), returncode, stdout, stderr, hook))
        return self

    def missing(self, *match: str) -> "FakeRunner":
        """Make commands containing *match* fail as if the executable did not exist."""
        self.rules.append(_Rule(tuple(match), missing=True))
        return self

    # --- CommandRunnerProtocol ---

    def which(self, name: str, extra_paths: Sequence[Path] = ()) -> str | None:
        self.which_calls.append((name, tuple(extra_paths)))
        return self.paths.get(name)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
        check: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        argv = tuple(str(c) for c in cmd)
        self.calls.append(Call(argv, cwd, env, capture, check))

        rule = next((r for r in reversed(self.rules) if _contains(argv, r.match)), None)
        if rule is None:
            rule = _Rule(())
        if rule.missing:
            raise CommandNotFoundError(argv[0])
        if rule.hook is not None:
            rule.hook(argv, cwd)

        result = CommandResult(argv, rule.returncode, rule.stdout, rule.stderr)
        if check and rule.returncode != 0:
            raise CommandFailedError(argv, rule.returncode, rule.stderr)
        return result

    # --- assertions helpers ---

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [c.cmd for c in self.calls]

    def ran(self, *match: str) -> bool:
        return any(_contains(c, tuple(match)) for c in self.commands)

    def calls_matching(self, *match: str) -> list[Call]:
        return [c for c in self.calls if _contains(c.cmd, tuple(match))]


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Empty recording runner (nothing on PATH)."""
    return FakeRunner()


@pytest.fixture
def base_config(tmp_path) -> Config:
    """Default configuration rooted in a temporary working directory."""
    return Config.from_overrides({"workdir": str(tmp_path)})


@pytest.fixture
def venv_config(base_config) -> Config:
    """Default configuration with the venv backend chosen."""
    return base_config.with_backend(BackendKind.VENV)


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    """Factory for additional recording runners."""
    return FakeRunner
