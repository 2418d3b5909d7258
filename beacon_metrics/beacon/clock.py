import logging
import time
from typing import Callable

from web3.types import Timestamp

from beacon_metrics.beacon.endpoints import GENESIS_ENDPOINT
from beacon_metrics.beacon.exceptions import (
    BeaconClientError,
    GenesisUnavailableError,
    PreGenesisError,
)
from beacon_metrics.beacon.gateway import Gateway
from beacon_metrics.beacon.typings import Genesis, decode
from beacon_metrics.common.utils import format_error

logger = logging.getLogger(__name__)


class SlotClock:
    """
    Converts wall-clock time to slot numbers.

    Genesis time is fetched on first use and cached for the lifetime of the
    clock. The TTD slot is resolved once from the TTD timestamp and cached.
    """

    def __init__(
        self,
        gateway: Gateway,
        seconds_per_slot: int,
        time_source: Callable[[], float] = time.time,
    ) -> None:
        self.gateway = gateway
        self.seconds_per_slot = seconds_per_slot
        self.time_source = time_source

        self.genesis_time: Timestamp | None = None
        self.ttd_timestamp: Timestamp | None = None
        self.ttd_slot: int | None = None

    async def get_genesis_time(self) -> Timestamp | None:
        if self.genesis_time is None:
            try:
                data = await self.gateway.get(GENESIS_ENDPOINT)
                self.genesis_time = decode(Genesis, data).genesis_time
            except BeaconClientError as e:
                logger.debug('Genesis time is not available: %s', format_error(e))
        return self.genesis_time

    async def slot_at_time(self, timestamp: int) -> int:
        genesis_time = await self.get_genesis_time()
        if genesis_time is None:
            raise GenesisUnavailableError()
        if timestamp < genesis_time:
            raise PreGenesisError(timestamp=timestamp, genesis_time=genesis_time)
        return (timestamp - genesis_time) // self.seconds_per_slot

    async def current_slot(self) -> int:
        return await self.slot_at_time(int(self.time_source()))

    def update_ttd_timestamp(self, timestamp: int) -> None:
        self.ttd_timestamp = Timestamp(timestamp)

    async def get_ttd_slot(self) -> int | None:
        if self.ttd_slot is not None:
            return self.ttd_slot
        if self.ttd_timestamp is None:
            # merge has not happened yet
            return None
        self.ttd_slot = await self.slot_at_time(self.ttd_timestamp)
        return self.ttd_slot
