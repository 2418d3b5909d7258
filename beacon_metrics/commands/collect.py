import asyncio
import logging
import sys

import click

import beacon_metrics
from beacon_metrics.beacon.registry import BeaconClients
from beacon_metrics.beacon.typings import MetricKind
from beacon_metrics.collector.tasks import CollectorTask
from beacon_metrics.common.logging import LOG_LEVELS, setup_logging
from beacon_metrics.common.metrics import metrics_server
from beacon_metrics.common.utils import greenify, log_verbose
from beacon_metrics.common.validators import validate_metrics, validate_slot
from beacon_metrics.config.settings import (
    DEFAULT_METRICS_HOST,
    DEFAULT_METRICS_PORT,
    DEFAULT_METRICS_PREFIX,
    LOG_FORMATS,
    LOG_PLAIN,
    settings,
)

logger = logging.getLogger(__name__)


@click.option(
    '--beacon-endpoints',
    type=str,
    envvar='BEACON_ENDPOINTS',
    prompt='Enter the comma separated list of API endpoints for beacon nodes',
    help='Comma separated list of API endpoints for beacon nodes.',
)
@click.option(
    '--metrics',
    'metric_kinds',
    type=str,
    envvar='METRICS',
    default=','.join(kind.value for kind in MetricKind),
    callback=validate_metrics,
    help='Comma separated list of metrics to collect.',
    show_default=True,
)
@click.option(
    '--start-slot',
    type=int,
    envvar='START_SLOT',
    callback=validate_slot,
    help='The first slot to collect. Default is the current slot.',
)
@click.option(
    '--slots',
    type=click.IntRange(min=1),
    envvar='SLOTS',
    help='The number of slots to collect. Default is to run until interrupted.',
)
@click.option(
    '-v',
    '--verbose',
    help='Enable debug mode. Default is false.',
    envvar='VERBOSE',
    is_flag=True,
)
@click.option(
    '--log-level',
    type=click.Choice(
        LOG_LEVELS,
        case_sensitive=False,
    ),
    default='INFO',
    envvar='LOG_LEVEL',
    help='The log level.',
)
@click.option(
    '--log-format',
    type=click.Choice(
        LOG_FORMATS,
        case_sensitive=False,
    ),
    default=LOG_PLAIN,
    envvar='LOG_FORMAT',
    help='The log record format. Can be "plain" or "json".',
)
@click.option(
    '--enable-metrics',
    is_flag=True,
    envvar='ENABLE_METRICS',
    help='Whether to enable metrics server. Disabled by default.',
)
@click.option(
    '--metrics-host',
    type=str,
    help=f'The prometheus metrics host. Default is {DEFAULT_METRICS_HOST}.',
    envvar='METRICS_HOST',
    default=DEFAULT_METRICS_HOST,
)
@click.option(
    '--metrics-port',
    type=int,
    help=f'The prometheus metrics port. Default is {DEFAULT_METRICS_PORT}.',
    envvar='METRICS_PORT',
    default=DEFAULT_METRICS_PORT,
)
@click.option(
    '--metrics-prefix',
    type=str,
    help=f'The prometheus metrics prefix. Default is {DEFAULT_METRICS_PREFIX}.',
    envvar='METRICS_PREFIX',
    default=DEFAULT_METRICS_PREFIX,
)
@click.command(help='Collects beacon chain metrics for every closed slot.')
# pylint: disable-next=too-many-arguments
def collect(
    beacon_endpoints: str,
    metric_kinds: list[MetricKind],
    start_slot: int | None,
    slots: int | None,
    verbose: bool,
    log_level: str,
    log_format: str,
    enable_metrics: bool,
    metrics_host: str,
    metrics_port: int,
    metrics_prefix: str,
) -> None:
    settings.set(
        beacon_endpoints=beacon_endpoints,
        metrics=metric_kinds,
        verbose=verbose,
        enable_metrics=enable_metrics,
        metrics_host=metrics_host,
        metrics_port=metrics_port,
        metrics_prefix=metrics_prefix,
        log_level=log_level,
        log_format=log_format,
    )
    if not settings.beacon_endpoints:
        raise click.BadParameter('At least one beacon endpoint is required')

    setup_logging()

    try:
        asyncio.run(main(start_slot=start_slot, slots=slots))
    except Exception as e:
        log_verbose(e)
        sys.exit(1)


async def main(start_slot: int | None, slots: int | None) -> None:
    logger.info('Starting beacon metrics client, version %s', beacon_metrics.__version__)
    clients = await BeaconClients.from_endpoints(settings.beacon_endpoints)

    if settings.enable_metrics:
        await metrics_server()

    metrics_list = ', '.join(kind.value for kind in settings.metrics)
    click.echo(f'Collecting {greenify(metrics_list)} from {greenify(len(clients))} node(s)')

    await CollectorTask(clients=clients, metric_kinds=settings.metrics).run(
        start_slot=start_slot, slots=slots
    )
