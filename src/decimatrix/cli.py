"""Command line interface: run matrix operations on matrices stored in text files."""

import functools

import click
import numpy as np

from decimatrix import __version__
from decimatrix.context import localcontext
from decimatrix.io import (
    MAX_COLUMNS,
    MAX_ROWS,
    RandomConfig,
    format_matrix,
    format_result,
    parse_row,
    random_matrix,
    read_matrix,
)
from decimatrix.linalg import Matrix, MatrixError, solve_cramer
from decimatrix.logconfig import configure_logging

MatrixFile = click.Path(exists=True, dir_okay=False)
Bound = click.IntRange(np.iinfo(np.int32).min, np.iinfo(np.int32).max)


def _report_errors(fun):
    """Turn library errors into a message on stderr and exit status 1."""

    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        try:
            return fun(*args, **kwargs)
        except MatrixError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _read(ctx: click.Context, path: str) -> Matrix:
    return read_matrix(path, decimal_comma=ctx.obj["decimal_comma"])


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="decimatrix")
@click.option("-v", "--verbose", is_flag=True, help="Debug output on stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "--decimal-comma", is_flag=True, help="Read ',' as the fractional separator."
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_json: bool, decimal_comma: bool) -> None:
    """decimatrix: exact decimal matrix calculator.

    Files hold one matrix row per line with entries separated by spaces.
    """
    configure_logging(verbose=verbose, log_json=log_json)
    ctx.obj = {"decimal_comma": decimal_comma}

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("path", type=MatrixFile)
@click.pass_context
@_report_errors
def trace(ctx: click.Context, path: str) -> None:
    """Print the trace of a square matrix."""
    click.echo(format(_read(ctx, path).trace(), "f"))


@cli.command()
@click.argument("path", type=MatrixFile)
@click.pass_context
@_report_errors
def transpose(ctx: click.Context, path: str) -> None:
    """Print the transposed matrix."""
    click.echo(format_matrix(_read(ctx, path).transpose()))


@cli.command()
@click.argument("path", type=MatrixFile)
@click.pass_context
@_report_errors
def det(ctx: click.Context, path: str) -> None:
    """Print the determinant of a square matrix."""
    click.echo(format(_read(ctx, path).det(), "f"))


@cli.command()
@click.argument("path", type=MatrixFile)
@click.option(
    "--quantum", default="0.01", show_default=True, help="Precision of the solution."
)
@click.pass_context
@_report_errors
def solve(ctx: click.Context, path: str, quantum: str) -> None:
    """Solve the system given by an n x (n+1) augmented matrix by Cramer's rule."""
    system = _read(ctx, path)

    try:
        (step,) = parse_row(quantum)
    except ValueError as exc:
        raise click.BadParameter(
            f"{quantum!r} is not a number", param_hint="--quantum"
        ) from exc

    with localcontext(quantum=step):
        click.echo(format_result(solve_cramer(system)))


@cli.command()
@click.argument("lhs", type=MatrixFile)
@click.argument("rhs", type=MatrixFile)
@click.pass_context
@_report_errors
def add(ctx: click.Context, lhs: str, rhs: str) -> None:
    """Print the sum of two matrices of equal size."""
    click.echo(format_matrix(_read(ctx, lhs) + _read(ctx, rhs)))


@cli.command()
@click.argument("lhs", type=MatrixFile)
@click.argument("rhs", type=MatrixFile)
@click.pass_context
@_report_errors
def sub(ctx: click.Context, lhs: str, rhs: str) -> None:
    """Print the difference of two matrices of equal size."""
    click.echo(format_matrix(_read(ctx, lhs) - _read(ctx, rhs)))


@cli.command()
@click.argument("lhs", type=MatrixFile)
@click.argument("rhs", type=MatrixFile)
@click.pass_context
@_report_errors
def mul(ctx: click.Context, lhs: str, rhs: str) -> None:
    """Print the matrix product LHS x RHS."""
    click.echo(format_matrix(_read(ctx, lhs) @ _read(ctx, rhs)))


@cli.command()
@click.argument("path", type=MatrixFile)
@click.argument("value")
@click.pass_context
@_report_errors
def scale(ctx: click.Context, path: str, value: str) -> None:
    """Print the matrix multiplied by VALUE."""
    a = _read(ctx, path)
    tokens = parse_row(value, decimal_comma=ctx.obj["decimal_comma"])

    if len(tokens) != 1:
        raise click.BadParameter(f"{value!r} is not a single number", param_hint="VALUE")

    click.echo(format_matrix(a.scale(tokens[0])))


@cli.command()
@click.argument("rows", type=click.IntRange(1, MAX_ROWS))
@click.argument("columns", type=click.IntRange(1, MAX_COLUMNS))
@click.option(
    "--low", type=Bound, default=-100, show_default=True, help="Smallest value."
)
@click.option(
    "--high", type=Bound, default=100, show_default=True, help="Exclusive upper bound."
)
@click.option("--fractional", is_flag=True, help="Allow two fractional digits.")
@click.option("--seed", type=int, default=None, help="Seed of the generator.")
def random(
    rows: int, columns: int, low: int, high: int, fractional: bool, seed: int | None
) -> None:
    """Print a random ROWS x COLUMNS matrix."""
    try:
        config = RandomConfig(low=low, high=high, fractional=fractional)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--low/--high") from exc

    a = random_matrix(rows, columns, config, np.random.default_rng(seed))
    click.echo(format_matrix(a))
