from unittest.mock import AsyncMock, patch

import pytest

from beacon_metrics.beacon.clock import SlotClock
from beacon_metrics.beacon.exceptions import (
    GenesisUnavailableError,
    PreGenesisError,
    RemoteError,
    TransportError,
)
from beacon_metrics.beacon.gateway import Gateway


@pytest.fixture
def gateway(base_url) -> Gateway:
    return Gateway(base_url)


def create_clock(gateway: Gateway, now: float = 0, genesis_time: int | None = None) -> SlotClock:
    clock = SlotClock(gateway=gateway, seconds_per_slot=12, time_source=lambda: now)
    clock.genesis_time = genesis_time  # type: ignore[assignment]
    return clock


class TestGenesisTime:
    async def test_fetched_once(self, gateway):
        clock = create_clock(gateway)
        with patch.object(
            gateway, 'get', new=AsyncMock(return_value={'genesis_time': '1000'})
        ) as get_mock:
            assert await clock.get_genesis_time() == 1000
            assert await clock.get_genesis_time() == 1000
        get_mock.assert_awaited_once_with('/eth/v1/beacon/genesis')

    async def test_unknown_on_failure(self, gateway):
        clock = create_clock(gateway)
        with patch.object(
            gateway,
            'get',
            new=AsyncMock(side_effect=[TransportError('refused'), {'genesis_time': '1000'}]),
        ):
            assert await clock.get_genesis_time() is None
            assert await clock.get_genesis_time() == 1000

    async def test_unknown_on_malformed_payload(self, gateway):
        clock = create_clock(gateway)
        with patch.object(gateway, 'get', new=AsyncMock(return_value={'time': '1000'})):
            assert await clock.get_genesis_time() is None


class TestSlotAtTime:
    @pytest.mark.parametrize(
        'timestamp,slot',
        [
            (1000, 0),
            (1011, 0),
            (1012, 1),
            (1025, 2),
            (1000 + 12 * 1_000_000, 1_000_000),
        ],
    )
    async def test_slot(self, gateway, timestamp, slot):
        clock = create_clock(gateway, genesis_time=1000)
        assert await clock.slot_at_time(timestamp) == slot

    @pytest.mark.parametrize('timestamp', [0, 500, 999])
    async def test_before_genesis(self, gateway, timestamp):
        clock = create_clock(gateway, genesis_time=1000)
        with pytest.raises(PreGenesisError):
            await clock.slot_at_time(timestamp)

    async def test_genesis_unknown(self, gateway):
        clock = create_clock(gateway)
        with patch.object(gateway, 'get', new=AsyncMock(side_effect=RemoteError('down', 503))):
            with pytest.raises(GenesisUnavailableError):
                await clock.slot_at_time(2000)

    async def test_current_slot(self, gateway):
        clock = create_clock(gateway, now=1000 + 12 * 7 + 5, genesis_time=1000)
        assert await clock.current_slot() == 7


class TestTTDSlot:
    async def test_unknown_without_timestamp(self, gateway):
        clock = create_clock(gateway, genesis_time=1000)
        assert await clock.get_ttd_slot() is None

    async def test_resolved_once(self, gateway):
        clock = create_clock(gateway, genesis_time=1000)
        clock.update_ttd_timestamp(1000 + 12 * 50)
        assert await clock.get_ttd_slot() == 50

        clock.update_ttd_timestamp(1000 + 12 * 60)
        assert await clock.get_ttd_slot() == 50

    async def test_before_genesis(self, gateway):
        clock = create_clock(gateway, genesis_time=1000)
        clock.update_ttd_timestamp(10)
        with pytest.raises(PreGenesisError):
            await clock.get_ttd_slot()
        assert clock.ttd_slot is None
