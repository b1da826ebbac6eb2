"""
Micromamba Backend.

Installs the standalone micromamba binary when it is missing (downloaded
archive, extracted into ``<root>/bin``, shell hook registered) and creates
the environment directly from the dependency manifest file.

Every micromamba invocation receives ``MAMBA_ROOT_PREFIX`` explicitly so
the environment registry never depends on the operator's shell profile.
"""

from __future__ import annotations

import logging
import shutil
import stat
import tarfile
from pathlib import Path
from typing import Callable

from ..core.config.environment_config import EnvironmentConfig
from ..core.config.types import BackendKind
from ..core.environment import CommandRunnerProtocol
from ..core.io import download_file
from ..core.logger.styles import LogStyle
from ..core.paths import LOGGER_NAME
from ..exceptions import BackendUnavailableError, DownloadError
from .base import EnvironmentBackend, EnvironmentHandle, named_env_exists

logger = logging.getLogger(LOGGER_NAME)

ARCHIVE_MEMBER = "bin/micromamba"


def extract_micromamba(archive: Path, bin_dir: Path) -> Path:
    """
    Extract the micromamba executable from a bzip2 tarball.

    Only the single ``bin/micromamba`` member is written, whatever else the
    archive contains.

    Args:
        archive: Downloaded ``.tar.bz2`` file.
        bin_dir: Directory receiving the executable.

    Returns:
        Path of the extracted, executable binary.

    Raises:
        DownloadError: If the archive is corrupt or lacks the binary.
    """
    target = bin_dir / "micromamba"
    try:
        with tarfile.open(archive, "r:bz2") as tar:
            src = tar.extractfile(tar.getmember(ARCHIVE_MEMBER))
            if src is None:
                raise DownloadError(f"'{ARCHIVE_MEMBER}' in {archive.name} is not a regular file")
            bin_dir.mkdir(parents=True, exist_ok=True)
            with src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)
    except (tarfile.TarError, KeyError, EOFError) as e:
        raise DownloadError(f"Could not extract {ARCHIVE_MEMBER} from {archive}: {e}") from e

    target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return target


class MicromambaBackend(EnvironmentBackend):
    """Micromamba strategy (choice 2)."""

    kind = BackendKind.MICROMAMBA

    def __init__(
        self,
        cfg: EnvironmentConfig,
        runner: CommandRunnerProtocol,
        downloader: Callable[[str, Path], Path] = download_file,
    ) -> None:
        super().__init__(cfg, runner)
        self._downloader = downloader
        self._executable: str | None = None

    @property
    def root(self) -> Path:
        """Micromamba root prefix (environments live under ``<root>/envs``)."""
        return self.cfg.micromamba_root_path

    @property
    def env_vars(self) -> dict[str, str]:
        """Process environment for every micromamba invocation."""
        return {"MAMBA_ROOT_PREFIX": str(self.root)}

    @property
    def executable(self) -> str:
        """Resolved micromamba binary (bare name until prepare has run)."""
        return self._executable or "micromamba"

    def locate(self) -> str | None:
        """Find micromamba on PATH or in ``<root>/bin``."""
        return self.runner.which("micromamba", extra_paths=[self.root / "bin"])

    def prepare(self) -> str:
        found = self.locate()
        if found is not None:
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Micromamba already installed")
            self._executable = found
            return f"found {found}"

        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Installing Micromamba...")
        self._executable = str(self.install())
        return f"installed {self._executable}"

    def install(self) -> Path:
        """
        Download, unpack and shell-initialize micromamba under the root prefix.

        Returns:
            Path of the installed binary.

        Raises:
            BackendUnavailableError: If no build exists for this platform.
            DownloadError: If download or extraction fails.
            CommandFailedError: If ``shell init`` fails.
        """
        try:
            url = self.cfg.micromamba_download_url()
        except ValueError as e:
            raise BackendUnavailableError(str(e)) from e

        self.root.mkdir(parents=True, exist_ok=True)
        archive = self.root / "micromamba.tar.bz2"
        self._downloader(url, archive)
        try:
            exe = extract_micromamba(archive, self.root / "bin")
        finally:
            archive.unlink(missing_ok=True)

        self._run(
            [str(exe), "shell", "init", "-s", "bash", "-r", str(self.root)], env=self.env_vars
        )
        return exe

    def handle(self) -> EnvironmentHandle:
        """Handle for the named environment under the root prefix."""
        name = self.cfg.name
        return EnvironmentHandle(
            backend=self.kind,
            name=name,
            prefix=None,
            run_prefix=(self.executable, "run", "-n", name),
            python="python",
            activation_hint=f"micromamba activate {name}",
            env=self.env_vars,
        )

    def materialize(self, checkout: Path, manifest: Path) -> EnvironmentHandle:
        name = self.cfg.name
        if named_env_exists(self.runner, self.executable, name, env=self.env_vars):
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Environment '{name}' already exists")
        else:
            # Relative pip entries in the manifest resolve against the checkout
            self._run(
                [self.executable, "create", "-n", name, "-f", str(manifest), "-y"],
                cwd=checkout,
                env=self.env_vars,
            )
        return self.handle()
