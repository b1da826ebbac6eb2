"""
Splatstrap Command-Line Interface.

Provides the ``splatstrap`` entry point. Bare ``splatstrap`` behaves like
``splatstrap run`` with no arguments. Commands:

- ``splatstrap run``      — provision the machine (interactive backend choice)
- ``splatstrap init``     — generate a starter recipe YAML with all defaults
- ``splatstrap manifest`` — write the default dependency manifest

Usage:
    splatstrap
    splatstrap run
    splatstrap run recipe.yaml --set backend=venv
    splatstrap run --set repository.dirty_policy=proceed --set system.enabled=false
    splatstrap manifest triangle-splatting/requirements.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

app = typer.Typer(
    name="splatstrap",
    add_completion=True,
    rich_markup_mode="rich",
)


# ── App callback ────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from importlib.metadata import version as pkg_version

        typer.echo(f"splatstrap {pkg_version('splatstrap')}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    _: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Splatstrap: one-command provisioning for Triangle Splatting.

    Without a command, provisions with defaults and the interactive backend choice.
    """
    if ctx.invoked_subcommand is None:
        run(recipe=None, set_=None)


# ── Commands ────────────────────────────────────────────────────────────────


@app.command()
def run(
    recipe: Annotated[
        Path | None,
        typer.Argument(help="Optional YAML recipe; defaults are used when omitted."),
    ] = None,
    set_: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            help="Override config value (repeatable): key.path=value",
        ),
    ] = None,
) -> None:
    """Provision the machine: toolchain, packages, checkout, environment, verification."""
    from pydantic import ValidationError

    from splatstrap.backends import backend_menu, parse_backend_choice
    from splatstrap.core import Config, LogStyle, ProvisionOrchestrator, log_provision_summary
    from splatstrap.exceptions import InvalidChoiceError, SplatstrapError
    from splatstrap.pipeline import ProvisionRunner

    if recipe is not None and not recipe.exists():
        typer.echo(f"Error: recipe not found: {recipe}", err=True)
        raise typer.Exit(code=1)

    overrides = _parse_overrides(set_ or [])
    try:
        if recipe is not None:
            cfg = Config.from_recipe(recipe, overrides=overrides or None)
        else:
            cfg = Config.from_overrides(overrides=overrides or None)
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid configuration:\n{e}", err=True)
        raise typer.Exit(code=1)

    # The backend is fixed before any step runs
    if cfg.backend is None:
        typer.echo(backend_menu())
        answer = typer.prompt("Enter choice [1-3]", default="", show_default=False)
        try:
            cfg = cfg.with_backend(parse_backend_choice(answer))
        except InvalidChoiceError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    try:
        with ProvisionOrchestrator(cfg) as orchestrator:
            run_logger = orchestrator.run_logger
            assert run_logger is not None  # nosec B101

            provisioner = ProvisionRunner(cfg, orchestrator.runner, run_logger)
            try:
                report = provisioner.run()
            except KeyboardInterrupt:
                run_logger.warning(f"{LogStyle.WARNING} Interrupted by user.")
                raise SystemExit(1)

            checkout = provisioner.state.checkout
            log_provision_summary(
                report,
                duration=orchestrator.time_tracker.elapsed_formatted,
                handle=provisioner.state.handle,
                checkout=checkout.root if checkout is not None else None,
                logger_instance=run_logger,
            )
    except (SplatstrapError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not report.succeeded:
        raise typer.Exit(code=report.exit_code)


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Argument(help="Output YAML file path."),
    ] = Path("recipe.yaml"),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file."),
    ] = False,
) -> None:
    """Generate a starter recipe with all config fields and defaults."""
    import yaml

    if output.exists() and not force:
        typer.echo(f"Error: '{output}' already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    data = _build_init_dict()
    yaml_body = yaml.dump(
        data, default_flow_style=False, sort_keys=False, indent=4, allow_unicode=True
    )
    content = _INIT_HEADER.format(filename=output.name) + yaml_body

    output.write_text(content, encoding="utf-8")
    typer.echo(f"Recipe created: {output}")
    typer.echo(f"Run it with:   splatstrap run {output}")


@app.command()
def manifest(
    output: Annotated[
        Path,
        typer.Argument(help="Manifest file to create."),
    ] = Path("requirements.yaml"),
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Environment name (default: triangle-splatting)."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file."),
    ] = False,
) -> None:
    """Write the default conda-style dependency manifest."""
    from splatstrap.exceptions import SplatstrapError
    from splatstrap.steps import default_manifest, write_manifest

    if output.exists() and not force:
        typer.echo(f"Error: '{output}' already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    try:
        content = default_manifest(name=name) if name else default_manifest()
        write_manifest(output, content, force=force)
    except (SplatstrapError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Manifest created: {output}")


# ── Private helpers ─────────────────────────────────────────────────────────

_INIT_HEADER = """\
# ==============================================================================
# Splatstrap — Starter Recipe (generated by `splatstrap init`)
# ==============================================================================
# Usage:   splatstrap run {filename}
#
# Edit the values you need. Leave `backend` empty to be asked at start-up
# (venv, micromamba or conda).
# ==============================================================================

"""


def _auto_cast(value: str) -> Any:
    """
    Cast a CLI string to the appropriate Python scalar type.

    Decimal-looking values such as ``3.11`` stay strings, since version pins
    are the only dotted numbers in a recipe.

    Args:
        value: Raw string from the command line.

    Returns:
        Converted bool, None, int, or the original string.
    """
    low = value.lower()
    if low in ("true", "false"):
        return low == "true"
    if low in ("null", "none"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    return value


def _parse_overrides(raw: list[str]) -> dict[str, Any]:
    """
    Parse ``key.path=value`` strings into a flat override dict.

    Args:
        raw: list of "dotted.key=value" strings from ``--set`` flags.

    Returns:
        dict mapping dotted keys to auto-casted values.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"Override must use key=value format, got: '{item}'")
        key, _, val = item.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in override: '{item}'")
        overrides[key] = _auto_cast(val.strip())
    return overrides


def _build_init_dict() -> dict[str, Any]:
    """
    Build a complete config dict with all defaults for recipe generation.

    Returns:
        Ordered dict with every config section dumped via ``model_dump(mode="json")``,
        the working directory reset to ``.`` and the backend left undecided.
    """
    from splatstrap.core.config import (
        EnvironmentConfig,
        RepositoryConfig,
        SystemConfig,
        TelemetryConfig,
    )
    from splatstrap.core.paths import DEFAULT_MANIFEST_NAME

    dump = lambda m: m.model_dump(mode="json")  # noqa: E731

    return {
        "workdir": ".",
        "backend": None,
        "repository": dump(RepositoryConfig()),
        "system": dump(SystemConfig()),
        "environment": dump(EnvironmentConfig()),
        "manifest_path": DEFAULT_MANIFEST_NAME,
        "telemetry": dump(TelemetryConfig()),
    }
