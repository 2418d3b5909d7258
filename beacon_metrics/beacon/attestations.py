import logging
from typing import TYPE_CHECKING

from beacon_metrics.beacon.exceptions import (
    AttestationTimeoutError,
    BeaconClientError,
    GenesisUnavailableError,
    PreGenesisError,
)
from beacon_metrics.beacon.policy import PollPolicy
from beacon_metrics.common.utils import format_error

if TYPE_CHECKING:
    from beacon_metrics.beacon.client import BeaconClient

logger = logging.getLogger(__name__)


class AttestationPoller:
    """
    Locates the attestations of a slot.

    Attestations for slot N are included in a later block, so blocks are
    scanned forward from N + 1 as the chain head grows, until an attestation
    for N shows up or the policy timeout is exceeded.
    """

    def __init__(self, client: 'BeaconClient', policy: PollPolicy) -> None:
        self.client = client
        self.policy = policy

    async def count_attestations(self, slot: int) -> int:
        deadline = self.policy.start()
        last_verified_block = slot
        while True:
            latest_slot = await self._get_latest_slot()
            while latest_slot is not None and latest_slot > last_verified_block:
                block = last_verified_block + 1
                try:
                    attestations = await self.client.get_block_attestations(block)
                except BeaconClientError as e:
                    # retried on the next pass, the cursor stays in place
                    logger.debug(
                        'Failed to fetch attestations of block %d: %s', block, format_error(e)
                    )
                    break

                for attestation in attestations:
                    if attestation.data.slot == slot:
                        logger.debug(
                            'Found attestations of slot %d in block %d: %d bits set',
                            slot,
                            block,
                            attestation.participants,
                        )
                        return max(attestation.participants - 1, 0)
                last_verified_block = block

            await deadline.wait()
            if deadline.is_expired():
                raise AttestationTimeoutError(slot=slot, timeout=deadline.elapsed)

    async def _get_latest_slot(self) -> int | None:
        try:
            return await self.client.get_latest_block_slot()
        except (GenesisUnavailableError, PreGenesisError):
            return None
