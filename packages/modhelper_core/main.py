"""Command-line entrypoint that loads mods and reports their load status."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from packages.modhelper_core.host import ModHost
from packages.modhelper_core.startup import StartupResult, load_mods, run_mod_startup
from packages.modhelper_shared.config import load_settings
from packages.modhelper_shared.logging import configure_logging

SUCCESS_EXIT_CODE = 0
LOAD_FAILURE_EXIT_CODE = 3

app = typer.Typer(no_args_is_help=True, help="Mod host command-line interface")


def _build_host(
    *, config: Path | None, build_variant: str | None, settings_dir: Path | None
) -> ModHost:
    cli_params: dict[str, Any] = {"host": {}}
    if build_variant is not None:
        cli_params["host"]["build_variant"] = build_variant
    if settings_dir is not None:
        cli_params["host"]["mod_settings_directory"] = str(settings_dir)
    settings = load_settings(cli_params=cli_params, config_path=config)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    return ModHost(settings=settings)


def _summary(result: StartupResult) -> dict[str, Any]:
    return {
        "loaded": [
            {
                "name": mod.info.name,
                "version": mod.info.version,
                "content": len(mod.content),
                "load_errors": list(mod.load_errors),
            }
            for mod in result.loaded
        ],
        "failed": [
            {
                "name": failure.mod_name,
                "phase": failure.phase,
                "error": failure.error.message,
            }
            for failure in result.failed
        ],
        "steps": result.steps,
    }


def _render(summary: dict[str, Any]) -> None:
    for entry in summary["loaded"]:
        typer.echo(
            f"loaded {entry['name']} {entry['version']} ({entry['content']} content)"
        )
        for error in entry["load_errors"]:
            typer.echo(f"  load error: {error}")
    for entry in summary["failed"]:
        typer.echo(f"failed {entry['name']} during {entry['phase']}: {entry['error']}")


@app.command("run")
def run(
    modules: list[str] = typer.Argument(..., help="Dotted module names defining MOD_INFO"),
    config: Path | None = typer.Option(None, help="YAML config file"),
    build_variant: str | None = typer.Option(None, help="Host build variant (steam or epic)"),
    settings_dir: Path | None = typer.Option(None, help="Mod settings directory"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Load the given mods and run them through every lifecycle phase."""
    host = _build_host(config=config, build_variant=build_variant, settings_dir=settings_dir)
    mods, load_failures = load_mods(host, modules)
    result = run_mod_startup(host, mods)
    result = StartupResult(
        loaded=result.loaded,
        failed=load_failures + result.failed,
        steps=result.steps,
    )

    summary = _summary(result)
    if as_json:
        typer.echo(json.dumps(summary, sort_keys=True, separators=(",", ":")))
    else:
        _render(summary)

    if result.failed:
        raise typer.Exit(code=LOAD_FAILURE_EXIT_CODE)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


@app.command("settings-path")
def settings_path(
    module: str = typer.Argument(..., help="Dotted module name defining MOD_INFO"),
    config: Path | None = typer.Option(None, help="YAML config file"),
    settings_dir: Path | None = typer.Option(None, help="Mod settings directory"),
) -> None:
    """Print the settings file a mod reads and writes."""
    host = _build_host(config=config, build_variant=None, settings_dir=settings_dir)
    mods, failures = load_mods(host, (module,))
    if failures:
        typer.echo(f"error: {failures[0].error.message}", err=True)
        raise typer.Exit(code=LOAD_FAILURE_EXIT_CODE)
    typer.echo(str(mods[0].settings_file_path))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
