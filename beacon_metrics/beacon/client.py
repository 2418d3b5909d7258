import time
from typing import Callable

from beacon_metrics.beacon.clock import SlotClock
from beacon_metrics.beacon.endpoints import (
    BLOCK_ATTESTATIONS_ENDPOINT,
    COMMITTEES_ENDPOINT,
    CONFIG_SPEC_ENDPOINT,
    FINALITY_CHECKPOINTS_ENDPOINT,
    HEADERS_ENDPOINT,
)
from beacon_metrics.beacon.exceptions import DecodeError
from beacon_metrics.beacon.gateway import Gateway
from beacon_metrics.beacon.policy import (
    PollPolicy,
    attestation_poll_policy,
    slot_wait_policy,
)
from beacon_metrics.beacon.resolver import MetricResolver
from beacon_metrics.beacon.typings import (
    Attestation,
    BlockHeader,
    ChainSpec,
    Committee,
    FinalityCheckpoints,
    MetricKind,
    MetricValue,
    decode,
)


# pylint: disable-next=too-many-instance-attributes
class BeaconClient:
    # pylint: disable-next=too-many-arguments
    def __init__(
        self,
        base_url: str,
        spec: ChainSpec,
        gateway: Gateway | None = None,
        time_source: Callable[[], float] = time.time,
        slot_wait: PollPolicy | None = None,
        attestation_poll: PollPolicy | None = None,
    ) -> None:
        self.base_url = base_url
        self.spec = spec
        self.gateway = gateway or Gateway(base_url)
        self.clock = SlotClock(
            gateway=self.gateway,
            seconds_per_slot=spec.seconds_per_slot,
            time_source=time_source,
        )
        self.resolver = MetricResolver(
            client=self,
            slot_wait=slot_wait or slot_wait_policy(),
            attestation_poll=attestation_poll or attestation_poll_policy(),
        )

    @classmethod
    async def connect(cls, base_url: str, **kwargs) -> 'BeaconClient':  # type: ignore
        """Fetches the chain spec of the node and returns a ready client."""
        gateway = kwargs.pop('gateway', None) or Gateway(base_url)
        spec = decode(ChainSpec, await gateway.get(CONFIG_SPEC_ENDPOINT))
        return cls(base_url=base_url, spec=spec, gateway=gateway, **kwargs)

    async def get_data_point(self, metric: MetricKind | str, slot: int) -> MetricValue:
        return await self.resolver.resolve(metric, slot)

    async def get_genesis_time(self) -> int | None:
        return await self.clock.get_genesis_time()

    async def slot_at_time(self, timestamp: int) -> int:
        return await self.clock.slot_at_time(timestamp)

    async def get_ongoing_slot(self) -> int:
        return await self.clock.current_slot()

    async def get_latest_block_slot(self) -> int:
        return await self.clock.current_slot()

    def update_ttd_timestamp(self, timestamp: int) -> None:
        self.clock.update_ttd_timestamp(timestamp)

    async def get_ttd_slot(self) -> int | None:
        return await self.clock.get_ttd_slot()

    async def get_block_header(self, slot: int) -> BlockHeader:
        data = await self.gateway.get(HEADERS_ENDPOINT.format(slot=slot))
        return decode(BlockHeader, data)

    async def get_finality_checkpoints(self, slot: int) -> FinalityCheckpoints:
        data = await self.gateway.get(FINALITY_CHECKPOINTS_ENDPOINT.format(slot=slot))
        return decode(FinalityCheckpoints, data)

    async def get_slot_committees(self, slot: int) -> list[Committee]:
        # the node returns committees of the whole epoch
        data = await self.gateway.get(COMMITTEES_ENDPOINT.format(slot=slot))
        committees = [decode(Committee, c) for c in _as_list(data, Committee)]
        return [c for c in committees if c.slot == slot]

    async def get_committee_size(self, slot: int) -> int:
        committees = await self.get_slot_committees(slot)
        return sum(len(c.validators) for c in committees)

    async def get_block_attestations(self, slot: int) -> list[Attestation]:
        data = await self.gateway.get(BLOCK_ATTESTATIONS_ENDPOINT.format(slot=slot))
        return [decode(Attestation, a) for a in _as_list(data, Attestation)]


def _as_list(data: object, cls: type) -> list:
    if not isinstance(data, list):
        raise DecodeError(f'Failed to decode {cls.__name__} list: got {type(data).__name__}')
    return data
