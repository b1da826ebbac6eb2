"""
Repository Fetcher.

Clones the project with its nested submodules, or brings an existing
checkout up to date. An existing checkout is only ever fast-forwarded:
tracked local modifications stop the run (unless the operator opted into
``dirty_policy: proceed``) and diverged local commits make the pull fail
instead of being merged.

Untracked files are ignored by the dirty check, since the manifest and the
virtual environment created by later steps live inside the checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.config.repository_config import RepositoryConfig
from ..core.environment import CommandRunnerProtocol
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import CommandNotFoundError, DirtyCheckoutError, ProvisionError
from ..pipeline.results import StepResult, StepStatus

logger = logging.getLogger(LOGGER_NAME)

STEP_NAME = "RepositoryFetcher"


@dataclass(frozen=True)
class RepositoryCheckout:
    """
    On-disk copy of the project.

    Attributes:
        root: Checkout directory.
        fresh_clone: True when this run cloned it, False when it was updated.
        submodules: Absolute directories of the configured native submodules.
    """

    root: Path
    fresh_clone: bool
    submodules: tuple[Path, ...] = ()


def is_git_checkout(path: Path, runner: CommandRunnerProtocol) -> bool:
    """True when *path* is the top level of a git work tree."""
    result = runner.run(
        ["git", "rev-parse", "--show-toplevel"], cwd=path, capture=True, check=False
    )
    if not result.ok:
        return False
    return Path(result.stdout.strip()).resolve() == path.resolve()


def local_changes(path: Path, runner: CommandRunnerProtocol) -> list[str]:
    """
    List tracked files with uncommitted modifications.

    Args:
        path: Checkout root.
        runner: Process boundary.

    Returns:
        ``git status --porcelain`` lines, empty for a clean tree.
    """
    result = runner.run(
        ["git", "status", "--porcelain", "--untracked-files=no"], cwd=path, capture=True
    )
    return [line for line in result.stdout.splitlines() if line.strip()]


def _update_checkout(cfg: RepositoryConfig, root: Path, runner: CommandRunnerProtocol) -> None:
    if not is_git_checkout(root, runner):
        raise ProvisionError(
            f"{root} exists but is not a git checkout; move it away or change "
            "repository.directory"
        )

    logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Repository already exists. Pulling latest...")
    changes = local_changes(root, runner)
    if changes:
        preview = ", ".join(line[3:] for line in changes[:5])
        if cfg.dirty_policy == "fail":
            raise DirtyCheckoutError(
                f"Checkout {root} has {len(changes)} locally modified file(s) ({preview}). "
                "Commit or stash them, or set repository.dirty_policy=proceed."
            )
        logger.warning(
            f"{LogStyle.WARNING} Checkout has {len(changes)} local modification(s); "
            "attempting fast-forward anyway"
        )

    runner.run(["git", "pull", "--ff-only"], cwd=root)
    runner.run(["git", "submodule", "update", "--init", "--recursive"], cwd=root)


def fetch_repository(
    cfg: RepositoryConfig, workdir: Path, runner: CommandRunnerProtocol
) -> tuple[RepositoryCheckout, StepResult]:
    """
    Clone or update the project checkout under *workdir*.

    Args:
        cfg: Repository section of the run configuration.
        workdir: Directory holding the checkout.
        runner: Process boundary.

    Returns:
        The checkout and an OK result.

    Raises:
        CommandNotFoundError: If git is not available.
        DirtyCheckoutError: If the checkout is dirty and the policy is ``fail``.
        ProvisionError: If the target exists but is not a git checkout or not a
            directory.
        CommandFailedError: If clone, pull or submodule update fails.
    """
    if runner.which("git") is None:
        raise CommandNotFoundError("git")

    root = workdir / cfg.directory
    if root.exists() and not root.is_dir():
        raise ProvisionError(f"{root} exists but is not a directory; move it aside and re-run")
    if root.exists():
        _update_checkout(cfg, root, runner)
        fresh, detail = False, f"updated {root}"
    else:
        workdir.mkdir(parents=True, exist_ok=True)
        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Cloning {cfg.url}")
        runner.run(["git", "clone", "--recursive", cfg.url, str(root)], cwd=workdir)
        fresh, detail = True, f"cloned into {root}"

    checkout = RepositoryCheckout(
        root=root,
        fresh_clone=fresh,
        submodules=tuple(root / sub.path for sub in cfg.submodules),
    )
    return checkout, StepResult(STEP_NAME, StepStatus.OK, detail)
