"""
Provisioning Lifecycle Orchestration.

This module provides ProvisionOrchestrator, the coordinator around one
provisioning run. It owns everything that is not a provisioning step:
state directory, logging, the run lock, the configuration snapshot, the
environment report and the shared process boundary.

Architecture:

- Dependency Injection: All external dependencies are injectable for testability
- 5-Phase Initialization: Sequential setup from filesystem to environment reporting
- Context Manager: Automatic resource acquisition and cleanup
- Protocol-Based: type-safe abstractions for mockability

Related Protocols (defined in their respective modules):

- ``CommandRunnerProtocol``: ``environment/process.py``
- ``ReporterProtocol``: ``logger/reporter.py``
- ``TimeTrackerProtocol``: ``environment/timing.py``

Example:
    >>> from splatstrap.core import Config, ProvisionOrchestrator
    >>> cfg = Config().with_backend(BackendKind.VENV)
    >>> with ProvisionOrchestrator(cfg) as orch:
    ...     report = ProvisionRunner(orch.cfg, orch.runner, orch.run_logger).run()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Literal, TypeVar

from .environment import (
    CommandRunner,
    CommandRunnerProtocol,
    ensure_single_instance,
    release_single_instance,
)
from .environment.timing import TimeTracker, TimeTrackerProtocol
from .io import save_config_as_yaml
from .logger import Logger, Reporter
from .logger.reporter import ReporterProtocol
from .paths import LOGGER_NAME

if TYPE_CHECKING:  # pragma: no cover
    from .config import Config

logger = logging.getLogger(LOGGER_NAME)

T = TypeVar("T")

SNAPSHOT_NAME = "last_run.yaml"


def _resolve(value: T | None, default_factory: Callable[[], T]) -> T:
    """
    Resolve optional dependency with lazy default instantiation.

    Args:
        value: Caller-supplied dependency, or None to use the default.
        default_factory: Zero-argument callable that produces the default
            instance (e.g., ``CommandRunner``, ``Reporter``).

    Returns:
        The resolved dependency, either the provided value or a fresh default.
    """
    return value if value is not None else default_factory()


class ProvisionOrchestrator:
    """
    Central coordinator for the provisioning run lifecycle.

    Initialization Phases:

    1. Filesystem Provisioning: ``<workdir>/.splatstrap`` state directory
    2. Logging Initialization: console + rotating file handler
    3. Infrastructure Guarding: advisory run lock (second run aborts)
    4. Config Persistence: YAML snapshot of the effective configuration
    5. Environment Reporting: host, backend, repository and filesystem report

    Attributes:
        cfg (Config): Validated run configuration with the backend fixed
        runner (CommandRunnerProtocol): Process boundary shared by all steps
        reporter (ReporterProtocol): Environment telemetry engine
        time_tracker (TimeTrackerProtocol): Run duration tracker
        run_logger (logging.Logger | None): Active logger instance
        snapshot_path (Path | None): Written configuration snapshot

    Example:
        >>> with ProvisionOrchestrator(cfg) as orch:
        ...     orch.run_logger.info("ready")
    """

    def __init__(
        self,
        cfg: "Config",
        runner: CommandRunnerProtocol | None = None,
        reporter: ReporterProtocol | None = None,
        time_tracker: TimeTrackerProtocol | None = None,
        log_initializer: Callable | None = None,
        lock_acquirer: Callable | None = None,
        lock_releaser: Callable | None = None,
        config_saver: Callable | None = None,
    ) -> None:
        """
        Initializes orchestrator with dependency injection.

        Args:
            cfg: Validated run configuration
            runner: Process boundary (default: CommandRunner())
            reporter: Environment reporting engine (default: Reporter())
            time_tracker: Run duration tracker (default: TimeTracker())
            log_initializer: Logging setup function (default: Logger.setup)
            lock_acquirer: Run lock guard (default: ensure_single_instance)
            lock_releaser: Run lock release (default: release_single_instance)
            config_saver: Config persistence (default: save_config_as_yaml)
        """
        self.cfg = cfg

        self.runner = _resolve(runner, CommandRunner)
        self.reporter = _resolve(reporter, Reporter)
        self.time_tracker = _resolve(time_tracker, TimeTracker)
        self._log_initializer = log_initializer or Logger.setup
        self._lock_acquirer = lock_acquirer or ensure_single_instance
        self._lock_releaser = lock_releaser or release_single_instance
        self._config_saver = config_saver or save_config_as_yaml

        self._initialized: bool = False
        self._lock_held: bool = False
        self.run_logger: logging.Logger | None = None
        self.snapshot_path: Path | None = None

    def __enter__(self) -> "ProvisionOrchestrator":
        """
        Context Manager entry: starts the timer and runs the initialization phases.

        If any phase raises, cleanup() is called before re-raising so a
        half-acquired lock or open log file is never leaked.
        """
        try:
            self.time_tracker.start()
            self.initialize_core_services()
            return self
        except Exception:
            self.cleanup()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb) -> Literal[False]:
        """Context Manager exit: stops the timer and releases resources. Never suppresses."""
        self.time_tracker.stop()
        self.cleanup()
        return False

    # --- Private Lifecycle Phases ---

    def _phase_1_filesystem_provisioning(self) -> None:
        """Creates the per-workdir state directory."""
        logger.debug("Phase 1: Provisioning state directory")  # pragma: no mutant
        self.cfg.state_dir.mkdir(parents=True, exist_ok=True)

    def _phase_2_logging_initialization(self) -> None:
        """Bridges the bootstrap logger to the run's log directory."""
        logger.debug("Phase 2: Initializing run logging")  # pragma: no mutant
        telemetry = self.cfg.telemetry
        self.run_logger = self._log_initializer(
            name=LOGGER_NAME,
            log_dir=self.cfg.log_dir if telemetry.log_to_file else None,
            level=telemetry.log_level,
        )

    def _phase_3_infrastructure_guarding(self) -> None:
        """Acquires the advisory run lock. Contention propagates as ProvisionError."""
        logger.debug("Phase 3: Acquiring run lock")  # pragma: no mutant
        phase_logger = self.run_logger or logging.getLogger(LOGGER_NAME)
        self._lock_acquirer(lock_file=self.cfg.lock_file_path, logger=phase_logger)
        self._lock_held = True

    def _phase_4_config_snapshot(self) -> None:
        """Persists the effective configuration next to the logs."""
        logger.debug("Phase 4: Persisting configuration snapshot")  # pragma: no mutant
        self.snapshot_path = self._config_saver(
            data=self.cfg, yaml_path=self.cfg.state_dir / SNAPSHOT_NAME
        )

    def _phase_5_environment_report(self) -> None:
        """Emits the baseline environment report to active logging streams."""
        logger.debug("Phase 5: Generating environment report")  # pragma: no mutant
        phase_logger = self.run_logger or logging.getLogger(LOGGER_NAME)
        self.reporter.log_initial_status(logger_instance=phase_logger, cfg=self.cfg)

    def _close_logging_handlers(self) -> None:
        """Flush and close the run logger's handlers to release the log file."""
        if self.run_logger:
            for handler in self.run_logger.handlers[:]:
                handler.close()
                self.run_logger.removeHandler(handler)

    # --- Public Interface ---

    def initialize_core_services(self) -> None:
        """
        Executes the initialization phases in order.

        Idempotent: guarded by ``_initialized`` so the lock is never taken twice.
        """
        if self._initialized:
            return

        self._phase_1_filesystem_provisioning()
        self._phase_2_logging_initialization()
        self._phase_3_infrastructure_guarding()
        self._phase_4_config_snapshot()
        self._phase_5_environment_report()

        self._initialized = True

    def cleanup(self) -> None:
        """Releases the run lock and closes logging handlers."""
        cleanup_logger = self.run_logger or logging.getLogger(LOGGER_NAME)
        if self._lock_held:
            try:
                self._lock_releaser(self.cfg.lock_file_path)
            except OSError as e:
                cleanup_logger.error(f"Failed to release run lock: {e}")
            self._lock_held = False

        self._close_logging_handlers()
