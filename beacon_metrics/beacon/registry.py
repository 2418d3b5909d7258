import logging
from typing import Iterator

from beacon_metrics.beacon.client import BeaconClient

logger = logging.getLogger(__name__)


class BeaconClients:
    """Beacon clients registered from a list of node base URLs."""

    def __init__(self) -> None:
        self._clients: list[BeaconClient] = []

    @classmethod
    async def from_endpoints(  # type: ignore
        cls, base_urls: list[str], **kwargs
    ) -> 'BeaconClients':
        clients = cls()
        for base_url in base_urls:
            await clients.add(base_url, **kwargs)
        return clients

    async def add(self, base_url: str, **kwargs) -> BeaconClient:  # type: ignore
        """
        Registers a client for the node.
        The chain spec is fetched here, registration fails if the node is unreachable.
        """
        if base_url.endswith('/'):
            base_url = base_url[:-1]

        client = await BeaconClient.connect(base_url, **kwargs)
        self._clients.append(client)
        logger.info(
            'Registered beacon client %s: %d seconds per slot, %d slots per epoch',
            base_url,
            client.spec.seconds_per_slot,
            client.spec.slots_per_epoch,
        )
        return client

    @property
    def base_urls(self) -> list[str]:
        return [client.base_url for client in self._clients]

    def __iter__(self) -> Iterator[BeaconClient]:
        return iter(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    def __getitem__(self, index: int) -> BeaconClient:
        return self._clients[index]

    def __str__(self) -> str:
        return ','.join(self.base_urls)
