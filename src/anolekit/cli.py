"""anolekit CLI -- run the lesson or call its helpers on a data file."""

from __future__ import annotations

import logging
import math
import sys
from pathlib import Path
from typing import Any

import click
import matplotlib

from anolekit.engine import (
    ConsoleObserver,
    LessonConfig,
    LessonRunner,
    build_sections,
    load_config,
    serialize_config,
)
from anolekit.engine.lesson import format_values
from anolekit.engine.sections import SECTION_CLASSES, section_names
from anolekit.io.lizards import DEFAULT_DATA_PATH, load_lizards
from anolekit.stats import NORMALIZE_METHODS, diversity_by_group, normalize_general
from anolekit.visualization import plot_site, plot_sites_faceted, save_figure

logger = logging.getLogger(__name__)

_MISSING_TOKENS = {"na", "nan", "none", ""}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _parse_overrides(overrides: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``key=value`` strings into a dict; entries without a key are skipped."""
    parsed: dict[str, Any] = {}
    for item in overrides:
        key, _, value = item.partition("=")
        if not key:
            continue
        parsed[key.strip()] = value
    return parsed


def _parse_number(token: str) -> float:
    if token.strip().lower() in _MISSING_TOKENS:
        return math.nan
    try:
        return float(token)
    except ValueError as exc:
        raise click.BadParameter(f"{token!r} is not a number") from exc


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="anolekit")
def cli() -> None:
    """anolekit -- writing functions, worked through a lizard dataset."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a lesson config YAML.",
)
@click.option(
    "--data",
    "-d",
    "data_path",
    type=click.Path(dir_okay=False),
    help="Lizard CSV file (overrides data.path).",
)
@click.option(
    "--section",
    "-s",
    "selected",
    multiple=True,
    type=click.Choice(section_names()),
    help="Run only this section (repeatable).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    help="Directory for config.yaml and saved plots.",
)
@click.option(
    "--set",
    "overrides",
    multiple=True,
    help="Config override as key=val (e.g. --set plot.site=B).",
)
@click.option("--show", is_flag=True, default=False, help="Also display plots.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Verbose output.")
def run(
    config_path: str | None,
    data_path: str | None,
    selected: tuple[str, ...],
    output_dir: str | None,
    overrides: tuple[str, ...],
    show: bool,
    verbose: bool,
) -> None:
    """Run the lesson sections and print their transcripts."""
    _configure_logging(verbose)

    cli_overrides = _parse_overrides(overrides)
    if data_path is not None:
        cli_overrides["data.path"] = data_path
    if selected:
        cli_overrides["sections"] = ",".join(selected)
    if output_dir is not None:
        cli_overrides["output_dir"] = output_dir
    if show:
        cli_overrides["plot.show"] = True
    else:
        matplotlib.use("Agg")

    try:
        config = load_config(yaml_path=config_path, cli_overrides=cli_overrides)
        sections = build_sections(config)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    runner = LessonRunner(
        sections=sections,
        config=config,
        observers=[ConsoleObserver(verbose=verbose)],
    )
    try:
        runner.run()
    except Exception as exc:
        logger.debug("Lesson failed", exc_info=True)
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(1)


@cli.command("sections")
def list_sections() -> None:
    """List the lesson sections in reading order."""
    for cls in SECTION_CLASSES:
        click.echo(f"{cls.name:<15s} {cls.title}")


@cli.command("init-config")
@click.option(
    "--output",
    "-o",
    default="anolekit.yaml",
    type=click.Path(dir_okay=False),
    help="Output file path (default: anolekit.yaml).",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite existing file.")
def init_config(output: str, force: bool) -> None:
    """Write a YAML config holding every default."""
    output_path = Path(output)
    if output_path.exists() and not force:
        raise click.ClickException(
            f"'{output}' already exists. Use --force to overwrite."
        )
    output_path.write_text(serialize_config(LessonConfig()), encoding="utf-8")
    click.echo(f"Config written to {output}")


@cli.command()
@click.option(
    "--data",
    "-d",
    "data_path",
    default=DEFAULT_DATA_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
)
@click.option("--by", default="Site", show_default=True, help="Grouping column.")
@click.option(
    "--column",
    "columns",
    multiple=True,
    default=("Color_morph",),
    show_default=True,
    help="Category column to summarize (repeatable).",
)
def diversity(data_path: str, by: str, columns: tuple[str, ...]) -> None:
    """Shannon diversity of category columns within each group."""
    try:
        lizards = load_lizards(data_path)
        table = diversity_by_group(
            lizards, by, **{f"{c}_diversity": c for c in columns}
        )
    except (FileNotFoundError, ValueError, KeyError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(table.to_string(index=False, float_format="{:.3f}".format))


@cli.command()
@click.option(
    "--data",
    "-d",
    "data_path",
    default=DEFAULT_DATA_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
)
@click.option("--site", default=None, help="Site to plot; all sites when omitted.")
@click.option("--x", "x_column", default="Limb", show_default=True)
@click.option("--y", "y_column", default="Height", show_default=True)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Image file to write.",
)
@click.option("--dpi", default=150, show_default=True, type=int)
def plot(
    data_path: str,
    site: str | None,
    x_column: str,
    y_column: str,
    output: str,
    dpi: int,
) -> None:
    """Scatter two measurements with a fitted line."""
    matplotlib.use("Agg")

    try:
        lizards = load_lizards(data_path)
        if site is None:
            fig = plot_sites_faceted(lizards, x_column, y_column)
        else:
            fig = plot_site(lizards, site, x_column, y_column)
    except (FileNotFoundError, ValueError, KeyError) as exc:
        raise click.ClickException(str(exc)) from exc
    path = save_figure(fig, output, dpi=dpi)
    click.echo(f"Plot written to {path}")


@cli.command()
@click.argument("values", nargs=-1, required=True)
@click.option(
    "--method",
    "-m",
    default=NORMALIZE_METHODS[0],
    show_default=True,
    help=f"One of {', '.join(NORMALIZE_METHODS)} (prefixes accepted).",
)
@click.option(
    "--keep-missing/--drop-missing",
    default=False,
    help="Let missing values (NA) propagate into the mean and sd.",
)
def normalize(values: tuple[str, ...], method: str, keep_missing: bool) -> None:
    """Normalize VALUES; write NA for a missing value.

    Put ``--`` before the values when any of them is negative.
    """
    numbers = [_parse_number(v) for v in values]
    try:
        result = normalize_general(numbers, method=method, na_rm=not keep_missing)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--method") from exc
    click.echo(format_values(result))


def main() -> None:
    """Entry point for the ``anolekit`` console script."""
    cli()
