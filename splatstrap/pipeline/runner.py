"""
Provisioning Runner.

Executes the seven provisioning steps in their fixed order, threading each
step's artifact (prepared backend, checkout, manifest, environment handle)
explicitly into the next. A step that raises a ProvisionError or an OSError
becomes a FAILED result; the runner logs which step failed and stops there. Nothing
is rolled back.

Example:
    >>> with ProvisionOrchestrator(cfg) as orch:
    ...     report = ProvisionRunner(orch.cfg, orch.runner, orch.run_logger).run()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

from ..backends.base import EnvironmentBackend, EnvironmentHandle
from ..backends.factory import get_backend
from ..core.config import Config
from ..core.environment import CommandRunnerProtocol
from ..core.logger.progress import log_step_header, log_step_result
from ..core.paths import LOGGER_NAME
from ..exceptions import CommandFailedError, ProvisionError
from ..steps.dependencies import install_dependencies
from ..steps.manifest import Manifest, default_manifest, write_manifest
from ..steps.packages import install_system_packages
from ..steps.repository import RepositoryCheckout, fetch_repository
from ..steps.selector import BackendFactory, select_backend
from ..steps.toolchain import probe_toolchain
from ..steps.verify import FrameworkStatus, verify_framework
from .results import ProvisionReport, StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

_T = TypeVar("_T")


@dataclass
class ProvisionState:
    """Artifacts produced so far in the run."""

    backend: EnvironmentBackend | None = None
    checkout: RepositoryCheckout | None = None
    manifest: Manifest | None = None
    handle: EnvironmentHandle | None = None
    framework: FrameworkStatus | None = None


class ProvisionRunner:
    """
    Ordered, fail-fast executor of the provisioning steps.

    Args:
        cfg: Run configuration with the backend already fixed.
        runner: Process boundary shared by all steps.
        logger_instance: Run logger (module logger when None).
        backend_factory: Backend factory (injected in tests).
        is_root: Override for the effective-uid check used by the apt step.
    """

    def __init__(
        self,
        cfg: Config,
        runner: CommandRunnerProtocol,
        logger_instance: logging.Logger | None = None,
        backend_factory: BackendFactory = get_backend,
        is_root: bool | None = None,
    ) -> None:
        if cfg.backend is None:
            raise ValueError("ProvisionRunner requires a Config with the backend chosen")
        self.cfg = cfg
        self.runner = runner
        self.log = logger_instance or logger
        self.backend_factory = backend_factory
        self.is_root = is_root
        self.state = ProvisionState()

    def steps(self) -> list[tuple[str, str, Callable[[], StepResult]]]:
        """Step name, banner title and callable, in execution order."""
        return [
            ("ToolchainProbe", "Checking CUDA toolchain", self._probe_toolchain),
            ("PackageInstaller", "Installing system dependencies", self._install_packages),
            ("EnvironmentBackendSelector", "Setting up environment backend", self._select),
            ("RepositoryFetcher", "Fetching Triangle Splatting repository", self._fetch),
            ("ManifestWriter", "Preparing dependency manifest", self._write_manifest),
            ("DependencyInstaller", "Installing dependencies", self._install_dependencies),
            ("Verifier", "Verifying installation", self._verify),
        ]

    def run(self) -> ProvisionReport:
        """
        Execute every step until one fails.

        Returns:
            Report with one result per executed step.
        """
        report = ProvisionReport()
        steps = self.steps()

        for index, (name, title, step) in enumerate(steps, start=1):
            log_step_header(index, len(steps), title, self.log)
            try:
                result = step()
            except ProvisionError as e:
                result = StepResult(name, StepStatus.FAILED, str(e), e)
                self.log.error(f"Step '{name}' failed: {e}")
                if isinstance(e, CommandFailedError) and e.stderr.strip():
                    self.log.error(e.stderr.strip())
            except OSError as e:
                result = StepResult(name, StepStatus.FAILED, str(e), e)
                self.log.error(f"Step '{name}' failed: {e}")

            report.add(result)
            log_step_result(result, self.log)
            if result.failed:
                break

        return report

    # --- Step adapters: explicit inputs in, artifacts recorded in state ---

    def _probe_toolchain(self) -> StepResult:
        return probe_toolchain(self.runner)

    def _install_packages(self) -> StepResult:
        return install_system_packages(self.cfg.system, self.runner, self.is_root)

    def _select(self) -> StepResult:
        backend, result = select_backend(
            self._require(self.cfg.backend, "backend choice"),
            self.cfg.environment,
            self.runner,
            self.backend_factory,
        )
        self.state.backend = backend
        return result

    def _fetch(self) -> StepResult:
        checkout, result = fetch_repository(self.cfg.repository, self.cfg.workdir, self.runner)
        self.state.checkout = checkout
        return result

    def _write_manifest(self) -> StepResult:
        checkout = self._require(self.state.checkout, "checkout")
        env = self.cfg.environment
        manifest, result = write_manifest(
            checkout.root / self.cfg.manifest_path,
            default_manifest(
                name=env.name,
                python_version=env.python_version,
                pip_paths=[sub.path for sub in self.cfg.repository.submodules],
            ),
        )
        self.state.manifest = manifest
        return result

    def _install_dependencies(self) -> StepResult:
        checkout = self._require(self.state.checkout, "checkout")
        backend = self._require(self.state.backend, "backend")
        handle, result = install_dependencies(
            backend,
            checkout.root,
            checkout.root / self.cfg.manifest_path,
            self.cfg.repository.submodules,
            self.runner,
        )
        self.state.handle = handle
        return result

    def _verify(self) -> StepResult:
        checkout = self._require(self.state.checkout, "checkout")
        handle = self._require(self.state.handle, "environment handle")
        status, result = verify_framework(handle, self.runner, cwd=checkout.root)
        self.state.framework = status
        return result

    @staticmethod
    def _require(value: _T | None, what: str) -> _T:
        if value is None:
            raise ProvisionError(f"No {what} available from earlier steps")
        return value
