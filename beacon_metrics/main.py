import click

import beacon_metrics
from beacon_metrics.commands.collect import collect


@click.version_option(version=beacon_metrics.__version__, prog_name='Beacon metrics client')
@click.group()
def cli() -> None:
    pass


cli.add_command(collect)


if __name__ == '__main__':
    cli()
