"""Structure Builder CLI.

Usage:
    python -m structure_builder <command> [options]

`frame` reads a JSON file of input models (levels, optional grid lines),
derives the framing, and prints a JSON summary. Members can be written to
a JSON file and a plan rendered to PNG.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from structure_builder.errors import StructureError
from structure_builder.models.inputs import StructureInputs, StructureModels

app = typer.Typer(
    name="structure_builder",
    help="Structure Builder — columns, girders, and beams from stacked floor plates.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(message: str) -> None:
    _output({"ok": False, "error": message})
    raise typer.Exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_models(path: Path) -> StructureModels:
    if not path.exists():
        _fail(f"Models file not found: {path}")
    try:
        return StructureModels.load(path)
    except (ValidationError, json.JSONDecodeError) as e:
        _fail(f"Invalid models file {path}: {e}")


def _load_inputs(path: Optional[Path]) -> StructureInputs:
    if path is None:
        return StructureInputs()
    if not path.exists():
        _fail(f"Inputs file not found: {path}")
    try:
        return StructureInputs.load(path)
    except ValidationError as e:
        _fail(f"Invalid inputs file {path}: {e}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def frame(
    models_path: Path = typer.Argument(..., help="JSON file with 'levels' and optional 'grids'"),
    inputs_path: Optional[Path] = typer.Option(None, "--inputs", "-i", help="JSON file of run settings"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write members to this JSON file"),
    render: Optional[Path] = typer.Option(None, "--render", "-r", help="Render the top framing tier to PNG"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Derive framing members from level footprints."""
    from structure_builder.generators.structure import generate_structure

    _configure_logging(verbose)
    models = _load_models(models_path)
    inputs = _load_inputs(inputs_path)

    try:
        outputs = generate_structure(models, inputs)
    except StructureError as e:
        _fail(str(e))

    result: dict = {
        "ok": True,
        "stats": outputs.stats.model_dump(),
        "longest_grid_span": outputs.longest_grid_span,
    }
    if output is not None:
        result["output"] = str(outputs.save(output))
    if render is not None:
        from structure_builder.export.plan import render_framing_plan

        result["render"] = str(render_framing_plan(outputs, render))
    _output(result)


@app.command()
def profiles():
    """List the wide-flange profiles in the catalog."""
    from structure_builder.models.profiles import available_profiles, get_profile_by_name

    _output({
        "ok": True,
        "profiles": [
            {"name": name, "depth": round(get_profile_by_name(name).depth, 4)}
            for name in available_profiles()
        ],
    })


@app.command()
def version() -> None:
    """Show version."""
    from structure_builder import __version__

    typer.echo(f"structure-builder v{__version__}")


if __name__ == "__main__":
    app()
