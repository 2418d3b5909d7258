# pylint: disable=unused-argument
import click

from beacon_metrics.beacon.typings import MetricKind


def validate_metrics(ctx: click.Context, param: click.Parameter, value: str) -> list[MetricKind]:
    kinds = []
    for name in value.split(','):
        name = name.strip()
        if not name:
            continue
        try:
            kinds.append(MetricKind(name))
        except ValueError:
            raise click.BadParameter(f'Invalid metric name: {name}') from None

    if not kinds:
        raise click.BadParameter('At least one metric is required')
    return kinds


def validate_slot(ctx: click.Context, param: click.Parameter, value: int | None) -> int | None:
    if value is not None and value < 0:
        raise click.BadParameter('Slot must be a non-negative number')
    return value
