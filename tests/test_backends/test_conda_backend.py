"""
Test Suite for the conda/mamba environment backend.
"""

from __future__ import annotations

import json

import pytest

from splatstrap.backends.conda import CondaBackend
from splatstrap.core.config import BackendKind, EnvironmentConfig
from splatstrap.exceptions import BackendUnavailableError


@pytest.mark.unit
class TestPrepare:
    def test_prefers_conda(self, fake_runner):
        fake_runner.install("conda", "mamba")
        backend = CondaBackend(EnvironmentConfig(), fake_runner)

        assert backend.prepare() == "using conda"
        assert backend.tool == "/usr/bin/conda"

    def test_falls_back_to_mamba(self, fake_runner):
        fake_runner.install("mamba")
        backend = CondaBackend(EnvironmentConfig(), fake_runner)

        assert backend.prepare() == "using mamba"
        assert backend.handle().activation_hint == "mamba activate triangle-splatting"

    def test_neither_available(self, fake_runner):
        backend = CondaBackend(EnvironmentConfig(), fake_runner)

        with pytest.raises(BackendUnavailableError, match="Neither conda nor mamba"):
            backend.prepare()

        assert fake_runner.commands == []

    def test_tool_before_prepare(self, fake_runner):
        with pytest.raises(BackendUnavailableError):
            CondaBackend(EnvironmentConfig(), fake_runner).tool


@pytest.mark.unit
class TestMaterialize:
    @pytest.fixture
    def backend(self, fake_runner):
        fake_runner.install("conda")
        conda = CondaBackend(EnvironmentConfig(), fake_runner)
        conda.prepare()
        return conda

    def test_command_sequence(self, backend, fake_runner, tmp_path):
        handle = backend.materialize(tmp_path, tmp_path / "requirements.yaml")

        creates = fake_runner.calls_matching("create")
        assert creates[0].cmd == (
            "/usr/bin/conda",
            "create",
            "-n",
            "triangle-splatting",
            "python=3.11",
            "-y",
        )
        install = fake_runner.calls_matching("install", "-n")[0].cmd
        assert install[:4] == ("/usr/bin/conda", "install", "-n", "triangle-splatting")
        assert install[4:10] == ("-c", "pytorch", "-c", "nvidia", "-c", "conda-forge")
        assert "pytorch-cuda=12.1" in install
        assert install[-1] == "-y"
        assert fake_runner.commands[-1] == (
            "/usr/bin/conda",
            "run",
            "-n",
            "triangle-splatting",
            "python",
            "-m",
            "pip",
            "install",
            "lpips",
        )
        assert handle.backend is BackendKind.CONDA
        assert handle.activation_hint == "conda activate triangle-splatting"

    def test_existing_env_skips_create(self, backend, fake_runner, tmp_path):
        fake_runner.respond(
            "env", "list", stdout=json.dumps({"envs": ["/opt/conda/envs/triangle-splatting"]})
        )

        backend.materialize(tmp_path, tmp_path / "requirements.yaml")

        assert not fake_runner.ran("create")
        assert fake_runner.ran("install", "-n", "triangle-splatting")

    def test_no_pip_fallback(self, fake_runner, tmp_path):
        fake_runner.install("conda")
        conda = CondaBackend(EnvironmentConfig(pip_fallback=[]), fake_runner)
        conda.prepare()

        conda.materialize(tmp_path, tmp_path / "requirements.yaml")

        assert not fake_runner.ran("pip")
