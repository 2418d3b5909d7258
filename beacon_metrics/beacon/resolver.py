import logging
from typing import TYPE_CHECKING, Awaitable, Callable

from beacon_metrics.beacon.attestations import AttestationPoller
from beacon_metrics.beacon.exceptions import (
    BeaconClientError,
    EmptyCommitteeError,
    GenesisUnavailableError,
    PreGenesisError,
    SlotWaitTimeoutError,
    UnknownMetricError,
)
from beacon_metrics.beacon.policy import PollPolicy
from beacon_metrics.beacon.typings import (
    BlockPresence,
    Checkpoint,
    FinalityCheckpoints,
    FinalizedEpochTransition,
    JustifiedEpochTransition,
    MetricKind,
    MetricValue,
    SlotAttestationCount,
    SlotAttestationPercentage,
)

if TYPE_CHECKING:
    from beacon_metrics.beacon.client import BeaconClient

logger = logging.getLogger(__name__)


class MetricResolver:
    """
    Computes metrics of closed slots.

    Every resolution first waits until the chain is past the requested slot.
    With the default slot wait policy this wait is unbounded: requesting a slot
    far in the future blocks until that slot has passed.
    """

    def __init__(
        self,
        client: 'BeaconClient',
        slot_wait: PollPolicy,
        attestation_poll: PollPolicy,
    ) -> None:
        self.client = client
        self.slot_wait = slot_wait
        self.attestation_poller = AttestationPoller(client=client, policy=attestation_poll)
        self._handlers: dict[MetricKind, Callable[[int], Awaitable[MetricValue]]] = {
            MetricKind.SLOT_BLOCK: self._get_block_presence,
            MetricKind.FINALIZED_EPOCH: self._get_finalized_epoch_transition,
            MetricKind.JUSTIFIED_EPOCH: self._get_justified_epoch_transition,
            MetricKind.SLOT_ATTESTATIONS: self._get_attestation_count,
            MetricKind.SLOT_ATTESTATIONS_PERCENTAGE: self._get_attestation_percentage,
        }

    async def resolve(self, metric: MetricKind | str, slot: int) -> MetricValue:
        kind = parse_metric_kind(metric)
        await self.wait_slot_closed(slot)
        return await self._handlers[kind](slot)

    async def wait_slot_closed(self, slot: int) -> None:
        deadline = self.slot_wait.start()
        while True:
            try:
                ongoing_slot = await self.client.get_ongoing_slot()
            except (GenesisUnavailableError, PreGenesisError):
                ongoing_slot = None

            if ongoing_slot is not None and ongoing_slot > slot:
                return
            if deadline.is_expired():
                raise SlotWaitTimeoutError(slot=slot, timeout=deadline.elapsed)
            await deadline.wait()

    async def _get_block_presence(self, slot: int) -> BlockPresence:
        try:
            await self.client.get_block_header(slot)
        except BeaconClientError as e:
            logger.debug('No block at slot %d: %s', slot, e)
            return BlockPresence(slot=slot, present=False)
        return BlockPresence(slot=slot, present=True)

    async def _get_finalized_epoch_transition(self, slot: int) -> FinalizedEpochTransition:
        changed = await self._is_checkpoint_changed(slot, lambda c: c.finalized)
        return FinalizedEpochTransition(slot=slot, changed=changed)

    async def _get_justified_epoch_transition(self, slot: int) -> JustifiedEpochTransition:
        changed = await self._is_checkpoint_changed(slot, lambda c: c.justified)
        return JustifiedEpochTransition(slot=slot, changed=changed)

    async def _is_checkpoint_changed(
        self, slot: int, select: Callable[[FinalityCheckpoints], Checkpoint]
    ) -> bool:
        if slot == 0 or slot % self.client.spec.slots_per_epoch != 0:
            return False

        current = select(await self.client.get_finality_checkpoints(slot))
        if current.is_zero:
            # nothing is finalized or justified yet
            return False

        previous = select(await self.client.get_finality_checkpoints(slot - 1))
        return previous.root != current.root

    async def _get_attestation_count(self, slot: int) -> SlotAttestationCount:
        count = await self.attestation_poller.count_attestations(slot)
        return SlotAttestationCount(slot=slot, count=count)

    async def _get_attestation_percentage(self, slot: int) -> SlotAttestationPercentage:
        committee_size = await self.client.get_committee_size(slot)
        if committee_size == 0:
            raise EmptyCommitteeError(slot=slot)

        count = await self.attestation_poller.count_attestations(slot)
        return SlotAttestationPercentage(
            slot=slot,
            percentage=(count * 100) // committee_size,
            attestation_count=count,
            committee_size=committee_size,
        )


def parse_metric_kind(metric: MetricKind | str) -> MetricKind:
    if isinstance(metric, MetricKind):
        return metric
    try:
        return MetricKind(metric)
    except ValueError:
        raise UnknownMetricError(metric) from None
