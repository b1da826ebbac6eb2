"""
Test Suite for the Splatstrap CLI (cli_app.py).

Tests override parsing, auto-casting, the interactive backend prompt, the
``run`` command with a mocked orchestrator/runner, and the ``init`` and
``manifest`` generators.
"""

import re
from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from splatstrap.cli_app import _auto_cast, _parse_overrides, app
from splatstrap.core.config import BackendKind, Config
from splatstrap.exceptions import ProvisionError
from splatstrap.pipeline import ProvisionReport, StepResult, StepStatus


def _strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from Rich/Typer help output."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


# AUTO-CAST
@pytest.mark.unit
class TestAutoCast:
    """Tests for _auto_cast string-to-Python type conversion."""

    def test_int(self):
        assert _auto_cast("42") == 42
        assert isinstance(_auto_cast("42"), int)

    def test_version_pin_stays_string(self):
        assert _auto_cast("3.11") == "3.11"
        assert _auto_cast("12.1") == "12.1"

    def test_bool(self):
        assert _auto_cast("true") is True
        assert _auto_cast("FALSE") is False

    def test_null(self):
        assert _auto_cast("null") is None
        assert _auto_cast("None") is None

    def test_string_passthrough(self):
        assert _auto_cast("micromamba") == "micromamba"
        assert _auto_cast("") == ""


# PARSE OVERRIDES
@pytest.mark.unit
class TestParseOverrides:
    def test_multiple(self):
        result = _parse_overrides(
            ["backend=venv", "system.enabled=false", "environment.python_version=3.10"]
        )
        assert result == {
            "backend": "venv",
            "system.enabled": False,
            "environment.python_version": "3.10",
        }

    def test_value_with_equals(self):
        result = _parse_overrides(["environment.torch_index_url=https://x/?a=b"])
        assert result["environment.torch_index_url"] == "https://x/?a=b"

    def test_whitespace_stripped(self):
        assert _parse_overrides([" backend = conda "]) == {"backend": "conda"}

    def test_missing_equals_raises(self):
        import typer

        with pytest.raises(typer.BadParameter, match="key=value"):
            _parse_overrides(["backend"])

    def test_empty_key_raises(self):
        import typer

        with pytest.raises(typer.BadParameter, match="Empty key"):
            _parse_overrides(["=venv"])


# CLI HELP & VERSION
@pytest.mark.unit
class TestCLIHelp:
    def test_app_help(self):
        result = CliRunner().invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "init", "manifest"):
            assert command in result.output

    def test_run_help(self):
        result = CliRunner().invoke(app, ["run", "--help"])
        assert result.exit_code == 0
        clean = _strip_ansi(result.output)
        assert "--set" in clean
        assert "recipe" in clean.lower()

    def test_version_flag(self):
        result = CliRunner().invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("splatstrap ")


# CLI RUN COMMAND (mocked orchestrator and runner)
def _report(failed: bool = False) -> ProvisionReport:
    report = ProvisionReport([StepResult("ToolchainProbe", StepStatus.OK)])
    if failed:
        report.add(StepResult("RepositoryFetcher", StepStatus.FAILED, "dirty"))
    return report


@pytest.fixture
def mocked_run():
    """Patch the orchestrator, runner and summary used by ``run``."""
    with patch("splatstrap.core.ProvisionOrchestrator") as orch_cls, patch(
        "splatstrap.pipeline.ProvisionRunner"
    ) as runner_cls, patch("splatstrap.core.log_provision_summary") as summary:
        orch_cls.return_value.__enter__.return_value = MagicMock()
        orch_cls.return_value.__exit__.return_value = False
        runner_cls.return_value.run.return_value = _report()
        yield orch_cls, runner_cls, summary


@pytest.mark.unit
class TestCLIRun:
    def test_run_missing_recipe(self, mocked_run):
        result = CliRunner().invoke(app, ["run", "nonexistent.yaml"])

        assert result.exit_code == 1
        assert "not found" in result.output
        mocked_run[0].assert_not_called()

    @pytest.mark.parametrize("answer, kind", [("1", BackendKind.VENV), (" 3 ", BackendKind.CONDA)])
    def test_prompt_selects_backend(self, mocked_run, tmp_path, answer, kind):
        orch_cls, runner_cls, summary = mocked_run

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}"], input=f"{answer}\n"
        )

        assert result.exit_code == 0, result.output
        assert "Choose the Python environment backend:" in result.output
        cfg = orch_cls.call_args.args[0]
        assert cfg.backend is kind
        assert runner_cls.call_args.args[0] is cfg
        summary.assert_called_once()

    @pytest.mark.parametrize("answer", ["4", "", "abc"])
    def test_invalid_choice_exits_before_any_step(self, mocked_run, tmp_path, answer):
        orch_cls, runner_cls, _ = mocked_run

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}"], input=f"{answer}\n"
        )

        assert result.exit_code == 1
        assert "Invalid choice" in result.output
        orch_cls.assert_not_called()
        runner_cls.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_bare_invocation_prompts_and_provisions(self, mocked_run, tmp_path, monkeypatch):
        orch_cls, runner_cls, summary = mocked_run
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(app, [], input="2\n")

        assert result.exit_code == 0, result.output
        assert "Choose the Python environment backend:" in result.output
        assert orch_cls.call_args.args[0].backend is BackendKind.MICROMAMBA
        runner_cls.return_value.run.assert_called_once()
        summary.assert_called_once()

    def test_bare_invocation_rejects_invalid_choice(self, mocked_run, tmp_path, monkeypatch):
        orch_cls, _, _ = mocked_run
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(app, [], input="4\n")

        assert result.exit_code == 1
        assert "Invalid choice" in result.output
        orch_cls.assert_not_called()

    def test_preset_backend_skips_prompt(self, mocked_run, tmp_path):
        orch_cls, _, _ = mocked_run

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}", "--set", "backend=micromamba"]
        )

        assert result.exit_code == 0, result.output
        assert "Choose the Python environment backend" not in result.output
        assert orch_cls.call_args.args[0].backend is BackendKind.MICROMAMBA

    def test_recipe_with_backend(self, mocked_run, tmp_path):
        recipe = tmp_path / "recipe.yaml"
        recipe.write_text(f"workdir: {tmp_path}\nbackend: conda\n")

        result = CliRunner().invoke(app, ["run", str(recipe)])

        assert result.exit_code == 0, result.output
        assert mocked_run[0].call_args.args[0].backend is BackendKind.CONDA

    def test_invalid_configuration(self, mocked_run):
        result = CliRunner().invoke(app, ["run", "--set", "system.use_sudo=sometimes"])

        assert result.exit_code == 1
        assert "invalid configuration" in result.output
        mocked_run[0].assert_not_called()

    def test_failed_step_exits_one(self, mocked_run, tmp_path):
        _, runner_cls, summary = mocked_run
        runner_cls.return_value.run.return_value = _report(failed=True)

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}", "--set", "backend=venv"]
        )

        assert result.exit_code == 1
        summary.assert_called_once()

    def test_orchestrator_error_exits_one(self, mocked_run, tmp_path):
        orch_cls, runner_cls, _ = mocked_run
        orch_cls.return_value.__enter__.side_effect = ProvisionError("lock held")

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}", "--set", "backend=venv"]
        )

        assert result.exit_code == 1
        assert "lock held" in result.output
        runner_cls.assert_not_called()

    def test_unwritable_workdir_exits_one(self, mocked_run, tmp_path):
        orch_cls, runner_cls, _ = mocked_run
        orch_cls.return_value.__enter__.side_effect = PermissionError(13, "Permission denied")

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}", "--set", "backend=venv"]
        )

        assert result.exit_code == 1
        assert "Permission denied" in result.output
        runner_cls.assert_not_called()

    def test_keyboard_interrupt(self, mocked_run, tmp_path):
        _, runner_cls, summary = mocked_run
        runner_cls.return_value.run.side_effect = KeyboardInterrupt

        result = CliRunner().invoke(
            app, ["run", "--set", f"workdir={tmp_path}", "--set", "backend=venv"]
        )

        assert result.exit_code == 1
        summary.assert_not_called()


# CLI INIT COMMAND
@pytest.mark.unit
class TestCLIInit:
    def test_generates_loadable_recipe(self, tmp_path):
        output = tmp_path / "recipe.yaml"

        result = CliRunner().invoke(app, ["init", str(output)])

        assert result.exit_code == 0
        text = output.read_text()
        assert text.startswith("# ===")
        data = yaml.safe_load(text)
        assert data["backend"] is None
        assert set(data) >= {"repository", "system", "environment", "telemetry"}
        assert Config.from_recipe(output).environment.name == "triangle-splatting"

    def test_refuses_overwrite(self, tmp_path):
        output = tmp_path / "recipe.yaml"
        output.write_text("keep")

        result = CliRunner().invoke(app, ["init", str(output)])

        assert result.exit_code == 1
        assert output.read_text() == "keep"

    def test_force_overwrites(self, tmp_path):
        output = tmp_path / "recipe.yaml"
        output.write_text("keep")

        result = CliRunner().invoke(app, ["init", str(output), "--force"])

        assert result.exit_code == 0
        assert "backend" in output.read_text()


# CLI MANIFEST COMMAND
@pytest.mark.unit
class TestCLIManifest:
    def test_writes_default(self, tmp_path):
        output = tmp_path / "requirements.yaml"

        result = CliRunner().invoke(app, ["manifest", str(output)])

        assert result.exit_code == 0
        assert "Manifest created" in result.output
        data = yaml.safe_load(output.read_text())
        assert data["name"] == "triangle-splatting"
        assert data["channels"] == ["conda-forge", "pytorch", "nvidia"]

    def test_custom_name(self, tmp_path):
        output = tmp_path / "requirements.yaml"

        CliRunner().invoke(app, ["manifest", str(output), "--name", "splat"])

        assert yaml.safe_load(output.read_text())["name"] == "splat"

    def test_invalid_name(self, tmp_path):
        output = tmp_path / "requirements.yaml"

        result = CliRunner().invoke(app, ["manifest", str(output), "-n", "bad name"])

        assert result.exit_code == 1
        assert not output.exists()

    def test_refuses_overwrite(self, tmp_path):
        output = tmp_path / "requirements.yaml"
        output.write_text("name: mine\n")

        result = CliRunner().invoke(app, ["manifest", str(output)])

        assert result.exit_code == 1
        assert output.read_text() == "name: mine\n"

    def test_force_overwrites(self, tmp_path):
        output = tmp_path / "requirements.yaml"
        output.write_text("name: mine\n")

        result = CliRunner().invoke(app, ["manifest", str(output), "-f"])

        assert result.exit_code == 0
        assert yaml.safe_load(output.read_text())["name"] == "triangle-splatting"
