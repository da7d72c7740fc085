from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional

import click
import yaml

from .aggregation import build_view
from .errors import GrantReportError
from .parser import parse_grant_report
from .reporting import REPORT_FORMATS, render_report
from .settings import SOURCE_REPORT_NAME, ConverterSettings, load_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _resolve_settings(config: Optional[str], **overrides) -> ConverterSettings:
    try:
        base = load_settings(Path(config)) if config else ConverterSettings()
        return base.merged(**overrides)
    except (ValueError, yaml.YAMLError) as exc:
        raise click.BadParameter(str(exc), param_hint="'--config' / '--format'") from exc


def _fail(message: str) -> None:
    click.echo(message, err=True)
    raise SystemExit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log conversion details to stderr.")
def main(verbose: bool) -> None:
    """Grant license report converter."""
    _configure_logging(verbose)


@main.command()
@click.argument("source", type=click.File("rb"))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(REPORT_FORMATS), case_sensitive=False),
    help="Output format for the report (defaults to markdown).",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=str),
    help="Directory receiving the source report.json and the rendered report.",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="YAML file with converter settings; command line flags take precedence.",
)
@click.option(
    "--fail-on-denied",
    is_flag=True,
    help="Exit non-zero when any package is denied by policy.",
)
@click.option(
    "--fail-on-unlicensed",
    is_flag=True,
    help="Exit non-zero when any package carries no license information.",
)
def convert(
    source: BinaryIO,
    fmt: Optional[str],
    output: Optional[str],
    output_dir: Optional[str],
    config: Optional[str],
    fail_on_denied: bool,
    fail_on_unlicensed: bool,
) -> None:
    """Convert a `grant check --output json` report to Markdown."""
    settings = _resolve_settings(
        config,
        format=fmt,
        fail_on_denied=True if fail_on_denied else None,
        fail_on_unlicensed=True if fail_on_unlicensed else None,
    )

    data = source.read()
    try:
        view = build_view(parse_grant_report(data))
        rendered = render_report(view, settings.format)
    except GrantReportError as exc:
        _fail(f"Error: {exc}")

    destinations: list[Path] = []
    if output:
        destinations.append(Path(output))
    if output_dir:
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / SOURCE_REPORT_NAME).write_bytes(data)
        destinations.append(directory / settings.output_name)

    for destination in destinations:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(rendered, encoding="utf-8")
        logger.info("Wrote %s report to %s", settings.format, destination)
    if not destinations:
        click.echo(rendered, nl=False)

    if settings.fail_on_denied and view.denied_count:
        _fail(f"{view.denied_count} denied package(s) found.")
    if settings.fail_on_unlicensed and view.unlicensed_count:
        _fail(f"{view.unlicensed_count} unlicensed package(s) found.")


@main.command()
@click.argument("source", type=click.File("rb"))
def summary(source: BinaryIO) -> None:
    """Print the headline numbers of a Grant JSON report."""

    try:
        view = build_view(parse_grant_report(source.read()))
    except GrantReportError as exc:
        _fail(f"Error: {exc}")

    click.echo(f"Tool: {view.tool} {view.version}".rstrip())
    click.echo(f"Status: {view.status}")
    click.echo(f"Target: {view.target_ref}")
    click.echo(f"Packages: {view.packages.total} total, {view.packages.denied} denied, {view.packages.unlicensed} unlicensed")
    click.echo(f"Denied licenses: {', '.join(row.id for row in view.license_summary) or 'none'}")
    click.echo(f"Denied packages: {view.denied_count}")
    click.echo(f"Unlicensed packages: {view.unlicensed_count}")


if __name__ == "__main__":
    main()
