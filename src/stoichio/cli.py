"""Command-line entrypoints for Stoichio."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict, NoReturn

import typer

from stoichio.elements import ElementLookup, load_periodic_table
from stoichio.equation import parse_equation_text
from stoichio.errors import SemanticError, StoichioError
from stoichio.formula import parse_formula
from stoichio.logging_config import setup_logging
from stoichio.models import QuantityMode
from stoichio.quantities import (
    compute_limiting_reagent_and_product_quantities,
    to_grams,
    to_moles,
)
from stoichio.solver import balance as balance_equation

app = typer.Typer(add_completion=False)

OUTPUT_UNITS = ("mol", "g")


def _fail(source: str, error: StoichioError) -> NoReturn:
    """Print ``error`` with a caret under the offending column and exit."""
    typer.echo(f"error: {error.message}", err=True)
    if error.offset is not None:
        typer.echo(f"  {source}", err=True)
        typer.echo("  " + " " * error.offset + "^", err=True)
    raise typer.Exit(code=1)


def _solve(table: ElementLookup, text: str, output_unit: str = "mol") -> Dict[str, Any]:
    equation = parse_equation_text(table, text)
    mode = equation.mode

    if mode is QuantityMode.NONE:
        balanced = balance_equation(equation.raw())
        return {
            "mode": "balance",
            "result": str(balanced),
            "coefficients": list(balanced.coefficients),
        }

    if mode is QuantityMode.ALL:
        return {
            "mode": "convert",
            "moles": str(to_moles(equation)),
            "grams": str(to_grams(equation)),
        }

    completed, limiting = compute_limiting_reagent_and_product_quantities(equation)
    if output_unit == "g":
        completed = to_grams(completed)
    return {
        "mode": "limiting",
        "result": str(completed),
        "limiting_reagent": str(limiting),
        "products": {str(m): q.value for m, q in completed.products},
        "unit": output_unit,
    }


@app.callback()
def main(
    ctx: typer.Context,
    periodic_table: Annotated[
        Path | None,
        typer.Option(help="CSV periodic table to use instead of the bundled one."),
    ] = None,
    log_level: Annotated[
        str, typer.Option(help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    ] = "WARNING",
    log_file: Annotated[
        Path | None, typer.Option(help="Also write logs to this file.")
    ] = None,
) -> None:
    """Balance chemical equations and work out reaction quantities."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    setup_logging(level, str(log_file) if log_file else None)

    try:
        ctx.obj = load_periodic_table(periodic_table)
    except (OSError, ValueError) as error:
        typer.echo(f"error: could not load periodic table: {error}", err=True)
        raise typer.Exit(code=1)


@app.command()
def balance(
    ctx: typer.Context,
    equation: Annotated[str, typer.Argument(help="Equation, e.g. 'H2 + O2 => H2O'.")],
) -> None:
    """Balance an equation."""
    try:
        equation_obj = parse_equation_text(ctx.obj, equation)
        if equation_obj.mode is not QuantityMode.NONE:
            raise SemanticError("Quantities are not used when balancing; try 'solve'")
        balanced = balance_equation(equation_obj.raw())
    except StoichioError as error:
        _fail(equation, error)
    typer.echo(str(balanced))


@app.command()
def mass(
    ctx: typer.Context,
    formula: Annotated[str, typer.Argument(help="Formula, e.g. 'Ca(OH)2'.")],
) -> None:
    """Print the molar mass of a formula in g/mol."""
    try:
        molecule = parse_formula(ctx.obj, formula)
    except StoichioError as error:
        _fail(formula, error)
    typer.echo(f"{molecule.molar_mass:.3f} g/mol")


@app.command()
def solve(
    ctx: typer.Context,
    equation: Annotated[
        str, typer.Argument(help="Equation, optionally with quantities, e.g. '2 g H2 + 1 mol O2 => H2O'.")
    ],
    unit: Annotated[
        str, typer.Option(help="Unit for computed product quantities (mol or g).")
    ] = "mol",
) -> None:
    """Balance, convert or find the limiting reagent, depending on the quantities given."""
    if unit not in OUTPUT_UNITS:
        raise typer.BadParameter(f"Unit must be one of {', '.join(OUTPUT_UNITS)}", param_hint="--unit")
    try:
        payload = _solve(ctx.obj, equation, unit)
    except StoichioError as error:
        _fail(equation, error)

    if payload["mode"] == "balance":
        typer.echo(payload["result"])
    elif payload["mode"] == "convert":
        typer.echo(f"moles: {payload['moles']}")
        typer.echo(f"grams: {payload['grams']}")
    else:
        typer.echo(payload["result"])
        typer.echo(f"limiting reagent: {payload['limiting_reagent']}")


@app.command()
def run(
    ctx: typer.Context,
    config_file: Annotated[
        Path, typer.Argument(help="Path to JSON configuration file.")
    ],
    output: Annotated[
        Path | None, typer.Option(help="Path to save output JSON.")
    ] = None,
) -> None:
    """Solve every equation listed in a JSON config file."""
    with open(config_file, "r") as f:
        config = json.load(f)

    table = ctx.obj
    if "periodic_table" in config:
        table = load_periodic_table(config_file.parent / config["periodic_table"])

    output_unit = config.get("output_unit", "mol")
    if output_unit not in OUTPUT_UNITS:
        raise ValueError(f"Unknown output unit: {output_unit}")
    equations = config.get("equations", [])
    if not isinstance(equations, list) or not all(isinstance(e, str) for e in equations):
        raise ValueError("'equations' must be a list of strings")

    results = []
    for text in equations:
        try:
            results.append({"input": text, **_solve(table, text, output_unit)})
        except StoichioError as error:
            results.append({"input": text, "error": error.message, "offset": error.offset})

    json_output = json.dumps({"results": results}, indent=2)
    typer.echo(json_output)

    if output:
        with open(output, "w") as f:
            f.write(json_output)
