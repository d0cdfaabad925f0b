"""CLI for the ringlab health-data engine."""

import json
import logging
from pathlib import Path

import click

from ringlab.config import DEFAULT_MAX_LAG_DAYS, CorrelationMethod

LABEL_TABLES = ("sleep", "movement", "activity")


def _load_records(path: str):
    from ringlab.records import CategoryRecords

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must hold a JSON object keyed by category")
    return CategoryRecords.from_dict(data)


def _emit(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """ringlab — correlation dashboards and insights from ring health exports."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("export", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--method", "-m",
    type=click.Choice([m.value for m in CorrelationMethod]),
    default=CorrelationMethod.SPEARMAN.value,
    show_default=True,
    help="Correlation coefficient.",
)
@click.option("--max-lag", default=DEFAULT_MAX_LAG_DAYS, show_default=True, type=int,
              help="Largest lag (days) to scan in each direction.")
@click.option("--output", "-o", default=None, help="Write the result to this file.")
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), default="json",
              show_default=True)
def dashboards(export: str, method: str, max_lag: int, output: str | None, fmt: str) -> None:
    """Build correlation dashboards from an EXPORT JSON file."""
    from ringlab.analytics.dashboards import build_dashboards
    from ringlab.config import AnalysisConfig
    from ringlab.report import format_dashboards

    try:
        config = AnalysisConfig(method=method, max_lag_days=max_lag)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--max-lag'") from exc

    result = build_dashboards(_load_records(export), config)
    _emit(result.to_json() if fmt == "json" else format_dashboards(result), output)


@main.command()
@click.argument("export", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the result to this file.")
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), default="markdown",
              show_default=True)
def insights(export: str, output: str | None, fmt: str) -> None:
    """Summarise averages, trends and recommendations from an EXPORT JSON file."""
    from ringlab.analytics.insights import analyze_health_data
    from ringlab.report import format_insights

    result = analyze_health_data(_load_records(export))
    _emit(result.to_json() if fmt == "json" else format_insights(result), output)


@main.command()
@click.argument("export", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the result to this file.")
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), default="markdown",
              show_default=True)
def series(export: str, output: str | None, fmt: str) -> None:
    """Per-day score series from an EXPORT JSON file, ready for charting."""
    from ringlab.report import daily_score_series, format_series, series_to_dict

    scores = daily_score_series(_load_records(export))
    text = json.dumps(series_to_dict(scores), indent=2) if fmt == "json" else format_series(scores)
    _emit(text, output)


@main.command()
@click.argument("raw")
@click.option("--start", "-s", required=True, help="ISO timestamp of the first sample.")
@click.option("--interval", "-i", default=300.0, show_default=True, type=float,
              help="Seconds between samples.")
@click.option("--labels", "-l", type=click.Choice(LABEL_TABLES), default="sleep",
              show_default=True, help="Code table to label with.")
def decode(raw: str, start: str, interval: float, labels: str) -> None:
    """Decode a coded series string such as 4422211."""
    from ringlab.decoders.series import (
        ACTIVITY_CLASS_LABELS,
        MOVEMENT_LABELS,
        SLEEP_STAGE_LABELS,
        decode_discrete_series,
    )

    table = {
        "sleep": SLEEP_STAGE_LABELS,
        "movement": MOVEMENT_LABELS,
        "activity": ACTIVITY_CLASS_LABELS,
    }[labels]

    try:
        series = decode_discrete_series(raw, start, interval, table)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--start'") from exc

    if series is None:
        click.echo("No samples.")
        return
    for point in series.points:
        marker = "" if point.known else "  ?"
        click.echo(f"{point.timestamp}  {point.code}  {point.label}{marker}")
    click.echo(f"\n{len(series)} samples @ {interval:g}s")


if __name__ == "__main__":
    main()
