"""
Command-line interface for HealthWatch operations.
"""

import asyncio
import json
from typing import List

import click

from healthwatch.alerts.models import Alert, AlertStatus, Severity
from healthwatch.config import settings
from healthwatch.exceptions import HealthWatchException
from healthwatch.integration import get_integration
from healthwatch.logging_config import get_logger, setup_logging
from healthwatch.risk.models import SUPPORTED_LANGUAGES
from healthwatch.risk.tiers import classify_risk_tier, tier_color, tier_urgency

setup_logging()
logger = get_logger(__name__)

SEVERITY_CHOICES = click.Choice([s.value for s in Severity])
STATUS_CHOICES = click.Choice([s.value for s in AlertStatus])
LANGUAGE_CHOICES = click.Choice(sorted(SUPPORTED_LANGUAGES), case_sensitive=False)


def _echo_alerts(alerts: List[Alert]) -> None:
    if not alerts:
        click.echo("No alerts match the filters.")
        return
    click.echo(f"{'ID':<12} {'Village':<16} {'Severity':<9} {'Status':<14} {'Reports':>7}  Time")
    for alert in alerts:
        click.echo(
            f"{alert.id:<12} {alert.village:<16} {alert.severity.value:<9} "
            f"{alert.status.value:<14} {alert.reports:>7}  {alert.time}"
        )


async def _simulate_and_triage(service):
    reports = await service.simulate_outbreak()
    result = await service.generate_alerts()
    return reports, result


@click.group()
def cli():
    """HealthWatch Command Line Interface"""
    pass


@cli.command()
@click.option('--host', default=None, help='Bind host (defaults to API_HOST)')
@click.option('--port', default=None, type=int, help='Bind port (defaults to API_PORT)')
@click.option('--reload/--no-reload', default=None, help='Auto-reload on code changes')
def serve(host, port, reload):
    """Run the API server"""
    from healthwatch.main import run_api_server

    run_api_server(host=host, port=port, reload=reload)


@cli.command()
@click.argument('score', type=float)
def tier(score):
    """Print the risk tier for a 0-100 score"""
    if not 0 <= score <= 100:
        click.echo(f"✗ Score must be between 0 and 100, got {score}", err=True)
        raise click.Abort()

    risk_tier = classify_risk_tier(
        score,
        settings.triage.risk_threshold_high,
        settings.triage.risk_threshold_medium
    )
    click.echo(
        f"{score:g}: {risk_tier.value} ({tier_color(risk_tier)}, "
        f"{tier_urgency(risk_tier).value} response)"
    )


@cli.command()
@click.option('--region', required=True, help='Region or village cluster')
@click.option('--health-reports', required=True, help='Summary of recent health reports')
@click.option('--water-quality', required=True, help='Summary of water quality data')
@click.option('--seasonal-trends', required=True, help='Seasonal and environmental factors')
@click.option('--language', type=LANGUAGE_CHOICES, default='en', help='Summary language')
@click.option('--json', 'as_json', is_flag=True, help='Print the assessment as JSON')
def assess(region, health_reports, water_quality, seasonal_trends, language, as_json):
    """Score outbreak risk for a region"""
    service = get_integration().get_triage_service()
    request = {
        "region": region,
        "health_reports": health_reports,
        "water_quality": water_quality,
        "seasonal_trends": seasonal_trends,
        "language": language,
    }

    try:
        assessment = asyncio.run(service.assess_risk(request))
    except HealthWatchException as e:
        click.echo(f"✗ Risk assessment failed: {e.message}", err=True)
        raise click.Abort()

    if as_json:
        click.echo(json.dumps(assessment.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"\n=== Risk Assessment: {region} ===\n")
    click.echo(f"Risk Score: {assessment.risk_score}/100")
    click.echo(f"Tier: {assessment.tier.value} ({assessment.color})")
    click.echo(f"\n{assessment.summary}")
    click.echo(f"\nRecommendations ({assessment.urgency.value}):")
    for i, recommendation in enumerate(assessment.recommendations, 1):
        click.echo(f"  {i}. {recommendation}")


@cli.command()
@click.argument('body')
@click.option('--store/--no-store', default=False, help='Store the parsed report')
def sms(body, store):
    """Parse an SMS field report"""
    service = get_integration().get_triage_service()

    try:
        if store:
            report = asyncio.run(service.ingest_sms(body))
            click.echo(f"✓ Stored report {report.id}")
            click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        else:
            analysis = asyncio.run(service.analyze_sms(body))
            click.echo(json.dumps(analysis.model_dump(), indent=2, ensure_ascii=False))
    except HealthWatchException as e:
        click.echo(f"✗ SMS analysis failed: {e.message}", err=True)
        raise click.Abort()


@cli.command()
@click.option('--search', default='', help='Village substring')
@click.option('--status', 'statuses', multiple=True, type=STATUS_CHOICES, help='Allowed status (repeatable)')
@click.option('--severity', 'severities', multiple=True, type=SEVERITY_CHOICES, help='Allowed severity (repeatable)')
def simulate(search, statuses, severities):
    """Simulate an outbreak, generate alerts and print the triaged list"""
    service = get_integration().get_triage_service()

    try:
        reports, result = asyncio.run(_simulate_and_triage(service))
    except HealthWatchException as e:
        click.echo(f"✗ Simulation failed: {e.message}", err=True)
        raise click.Abort()

    click.echo(f"✓ Stored {len(reports)} simulated reports")
    click.echo(f"{result.title}: {result.message}\n")
    _echo_alerts(service.query_alerts(search, statuses, severities))


@cli.command()
@click.option('--search', default='', help='Village substring')
@click.option('--status', 'statuses', multiple=True, type=STATUS_CHOICES, help='Allowed status (repeatable)')
@click.option('--severity', 'severities', multiple=True, type=SEVERITY_CHOICES, help='Allowed severity (repeatable)')
def alerts(search, statuses, severities):
    """List alerts in severity order"""
    service = get_integration().get_triage_service()
    _echo_alerts(service.query_alerts(search, statuses, severities))


@cli.command()
def stats():
    """Show report and alert statistics"""
    service = get_integration().get_triage_service()
    click.echo(json.dumps(service.get_statistics(), indent=2))


if __name__ == '__main__':
    cli()
