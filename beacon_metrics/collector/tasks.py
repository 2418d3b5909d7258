import asyncio
import logging

from beacon_metrics.beacon.client import BeaconClient
from beacon_metrics.beacon.exceptions import BeaconClientError
from beacon_metrics.beacon.registry import BeaconClients
from beacon_metrics.beacon.typings import MetricKind, MetricValue
from beacon_metrics.common.logging import hide_tokens
from beacon_metrics.common.metrics import metrics
from beacon_metrics.common.utils import log_verbose
from beacon_metrics.config.settings import settings

logger = logging.getLogger(__name__)


class CollectorTask:
    """
    Resolves the configured metrics slot by slot.
    Clients are processed concurrently, metrics of one client sequentially.
    """

    def __init__(self, clients: BeaconClients, metric_kinds: list[MetricKind]) -> None:
        self.clients = clients
        self.metric_kinds = metric_kinds

    async def run(self, start_slot: int | None = None, slots: int | None = None) -> None:
        if start_slot is None:
            start_slot = await self.clients[0].get_ongoing_slot()

        logger.info('Collecting metrics from slot %d', start_slot)
        slot = start_slot
        while slots is None or slot < start_slot + slots:
            await self.process_slot(slot)
            slot += 1

    async def process_slot(self, slot: int) -> dict[str, list[MetricValue]]:
        results = await asyncio.gather(
            *[self._process_client(client, slot) for client in self.clients]
        )
        return dict(zip(self.clients.base_urls, results))

    async def _process_client(self, client: BeaconClient, slot: int) -> list[MetricValue]:
        endpoint = hide_tokens(client.base_url)
        values = []
        for kind in self.metric_kinds:
            try:
                value = await client.get_data_point(kind, slot)
            except BeaconClientError as e:
                log_verbose(e)
                if settings.enable_metrics:
                    metrics.resolution_errors.labels(endpoint=endpoint, metric=kind.value).inc()
                continue

            logger.info('%s slot %d: %s=%d', endpoint, slot, kind.value, value.value)
            if settings.enable_metrics:
                metrics.slot_metric.labels(endpoint=endpoint, metric=kind.value).set(value.value)
            values.append(value)

        if settings.enable_metrics:
            metrics.last_slot.labels(endpoint=endpoint).set(slot)
        return values
