import logging
from typing import cast

from prometheus_client import Counter, Gauge, Info, start_http_server

import beacon_metrics
from beacon_metrics.config.settings import settings

logger = logging.getLogger(__name__)


# pylint: disable=too-few-public-methods
class Metrics:
    def __init__(self) -> None:
        self.app_version = Info(
            'app_version',
            'Beacon metrics client version',
            namespace=settings.metrics_prefix,
        )
        self.slot_metric = Gauge(
            'slot_metric',
            'Value of the metric for the last resolved slot',
            namespace=settings.metrics_prefix,
            labelnames=['endpoint', 'metric'],
        )
        self.last_slot = Gauge(
            'last_slot',
            'Last slot for which metrics were resolved',
            namespace=settings.metrics_prefix,
            labelnames=['endpoint'],
        )
        self.resolution_errors = Counter(
            'resolution_errors',
            'The number of failed metric resolutions',
            namespace=settings.metrics_prefix,
            labelnames=['endpoint', 'metric'],
        )

    def set_app_version(self) -> None:
        self.app_version.info({'version': beacon_metrics.__version__})


class LazyMetrics:
    def __init__(self) -> None:
        self._metrics: Metrics | None = None

    def __getattr__(self, item):  # type: ignore
        if self._metrics is None:
            self._metrics = Metrics()
        return getattr(self._metrics, item)


metrics = cast(Metrics, LazyMetrics())


async def metrics_server() -> None:
    logger.info('Starting metrics server at %s:%s', settings.metrics_host, settings.metrics_port)
    start_http_server(settings.metrics_port, settings.metrics_host)
    metrics.set_app_version()
