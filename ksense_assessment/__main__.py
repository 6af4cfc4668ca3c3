"""
Command-line interface: look at one page of patients, or collect,
score and submit a full assessment.
"""

import logging

import click

from . import config
from .aggregate import aggregate, alert_rows, risk_rows, summarize
from .client import fetch_page, submit_assessment
from .collector import collect
from .errors import AssessmentError


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="log retries and per-patient scores")
def main(verbose):
    """KSense healthcare risk assessment."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _require_api_key():
    if not config.API_KEY:
        raise click.UsageError("Set KSENSE_API_KEY (environment or .env) before running.")


@main.command(name="page")
@click.option("-p", "--page", "page_number", default=1, show_default=True, type=click.IntRange(min=1))
@click.option(
    "-l",
    "--limit",
    default=config.DISPLAY_PAGE_SIZE,
    show_default=True,
    type=click.IntRange(1, config.PAGE_SIZE),
)
def page(page_number, limit):
    """Fetch one page and show its risk table, alerts and summary."""
    _require_api_key()
    try:
        result = fetch_page(page_number, limit)
    except AssessmentError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Page {result.page} of {result.total_pages} ({result.total} patients)")
    for row in risk_rows(result.records):
        click.echo(f"  {str(row['patient_id']):<10} {row['name'] or '':<24} {row['risk_score']:>2}  {row['risk_level']}")

    alerts = alert_rows(result.records)
    click.echo(f"Alerts: {len(alerts)}")
    for row in alerts:
        click.echo(f"  {str(row['patient_id']):<10} [{row['alert_type']}] {row['alert_reason']}")

    summary = summarize(result.records, total=result.total)
    click.echo(f"Risk levels: {summary.breakdown}")
    click.echo(
        f"High BP {summary.high_blood_pressure}%  "
        f"age 65+ {summary.advanced_age}%  "
        f"fever {summary.fever}%"
    )


@main.command(name="run")
@click.option("-n", "--target", default=config.DEFAULT_TARGET, show_default=True, type=click.IntRange(min=1))
@click.option("--dry-run", is_flag=True, help="score the patients but do not submit")
def run(target, dry_run):
    """Collect patients, score them and submit the three lists."""
    _require_api_key()
    try:
        click.echo("Fetching patients...")
        collected = collect(target)
        click.echo(f"Got {len(collected)} patients")
        if collected.failed_pages:
            click.echo(f"Skipped pages: {collected.failed_pages}")

        click.echo("Scoring")
        payload = aggregate(collected)
        click.echo(f"Counts: {payload.counts()}")

        if dry_run:
            click.echo(f"Payload: {payload.to_json()}")
            return

        click.echo("Submitting")
        result = submit_assessment(payload)
    except AssessmentError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{result.status}: {result.percentage}% (score {result.score})")
    for category, counts in result.breakdown.items():
        click.echo(f"  {category}: {counts.matches}/{counts.correct} correct ({counts.submitted} submitted)")
    for strength in result.strengths:
        click.echo(f"  + {strength}")
    for issue in result.issues:
        click.echo(f"  - {issue}")
    if result.attempt_number is not None:
        click.echo(f"Attempt {result.attempt_number}, {result.remaining_attempts} remaining")


if __name__ == "__main__":
    main()
