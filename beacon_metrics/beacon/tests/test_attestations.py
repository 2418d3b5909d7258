from unittest.mock import AsyncMock, patch

import pytest

from beacon_metrics.beacon.exceptions import (
    AttestationTimeoutError,
    GenesisUnavailableError,
    RemoteError,
)
from beacon_metrics.beacon.tests.factories import create_attestation


def attestations_by_block(blocks: dict) -> AsyncMock:
    async def _get_block_attestations(slot):
        value = blocks.get(slot, [])
        if isinstance(value, Exception):
            raise value
        return value

    return AsyncMock(side_effect=_get_block_attestations)


class TestCountAttestations:
    async def test_found_in_later_block(self, beacon_client, fake_clock):
        # chain is at slot 100, the attestation for slot 98 lands in block 100
        blocks = {
            99: [create_attestation(slot=97, participants=3)],
            100: [
                create_attestation(slot=99, participants=7),
                create_attestation(slot=98, participants=5),
            ],
        }
        get_mock = attestations_by_block(blocks)
        with patch.object(beacon_client, 'get_block_attestations', new=get_mock):
            count = await beacon_client.resolver.attestation_poller.count_attestations(98)

        assert count == 4
        assert [c.args[0] for c in get_mock.await_args_list] == [99, 100]
        assert fake_clock.sleeps == []

    async def test_waits_for_head_growth(self, beacon_client, fake_clock):
        blocks = {
            100: [],
            101: [create_attestation(slot=99, participants=5)],
        }
        get_mock = attestations_by_block(blocks)
        with patch.object(beacon_client, 'get_block_attestations', new=get_mock):
            count = await beacon_client.resolver.attestation_poller.count_attestations(99)

        assert count == 4
        assert [c.args[0] for c in get_mock.await_args_list] == [100, 101]
        # block 101 is scanned once the chain reaches slot 101
        assert len(fake_clock.sleeps) == 12

    async def test_never_negative(self, beacon_client):
        blocks = {100: [create_attestation(slot=99, participants=0)]}
        with patch.object(
            beacon_client, 'get_block_attestations', new=attestations_by_block(blocks)
        ):
            assert await beacon_client.resolver.attestation_poller.count_attestations(99) == 0

    async def test_single_participant(self, beacon_client):
        blocks = {100: [create_attestation(slot=99, participants=1)]}
        with patch.object(
            beacon_client, 'get_block_attestations', new=attestations_by_block(blocks)
        ):
            assert await beacon_client.resolver.attestation_poller.count_attestations(99) == 0

    async def test_fetch_failure_keeps_cursor(self, beacon_client, fake_clock):
        # chain is at slot 102, the first read of block 100 fails
        fake_clock.now += 2 * 12
        responses = [
            RemoteError('NOT_FOUND', 404),
            [create_attestation(slot=10)],
            [create_attestation(slot=99, participants=10)],
        ]
        get_mock = AsyncMock(side_effect=responses)
        with patch.object(beacon_client, 'get_block_attestations', new=get_mock):
            count = await beacon_client.resolver.attestation_poller.count_attestations(99)

        assert count == 9
        assert [c.args[0] for c in get_mock.await_args_list] == [100, 100, 101]
        assert fake_clock.sleeps == [1]

    async def test_timeout(self, beacon_client, fake_clock):
        start = fake_clock.now
        get_mock = attestations_by_block({})
        with patch.object(beacon_client, 'get_block_attestations', new=get_mock):
            with pytest.raises(AttestationTimeoutError) as e:
                await beacon_client.resolver.attestation_poller.count_attestations(99)

        assert e.value.slot == 99
        assert fake_clock.now - start == 61
        # every block the chain produced was scanned once
        assert [c.args[0] for c in get_mock.await_args_list] == list(range(100, 106))

    async def test_timeout_on_persistent_failure(self, beacon_client, fake_clock):
        start = fake_clock.now
        get_mock = AsyncMock(side_effect=RemoteError('NOT_FOUND', 404))
        with patch.object(beacon_client, 'get_block_attestations', new=get_mock):
            with pytest.raises(AttestationTimeoutError):
                await beacon_client.resolver.attestation_poller.count_attestations(99)

        assert fake_clock.now - start == 61
        assert {c.args[0] for c in get_mock.await_args_list} == {100}

    async def test_unknown_head(self, beacon_client, fake_clock):
        get_slot_mock = AsyncMock(side_effect=[GenesisUnavailableError(), 100])
        blocks = {100: [create_attestation(slot=99, participants=3)]}
        with patch.object(
            beacon_client, 'get_latest_block_slot', new=get_slot_mock
        ), patch.object(
            beacon_client, 'get_block_attestations', new=attestations_by_block(blocks)
        ):
            assert await beacon_client.resolver.attestation_poller.count_attestations(99) == 2

        assert fake_clock.sleeps == [1]
