from typing import Generator

import pytest
from aioresponses import aioresponses
from web3.types import Timestamp

from beacon_metrics.beacon.client import BeaconClient
from beacon_metrics.beacon.policy import PollPolicy
from beacon_metrics.beacon.tests.factories import (
    GENESIS_TIME,
    SECONDS_PER_SLOT,
    SLOTS_PER_EPOCH,
    slot_time,
)
from beacon_metrics.beacon.tests.utils import FakeClock
from beacon_metrics.beacon.typings import ChainSpec
from beacon_metrics.config.settings import settings


@pytest.fixture
def beacon_endpoints() -> str:
    return 'http://beacon'


@pytest.fixture
def base_url(beacon_endpoints: str) -> str:
    return beacon_endpoints.split(',')[0]


@pytest.fixture
def fake_settings(beacon_endpoints: str) -> None:
    settings.set(beacon_endpoints=beacon_endpoints)


@pytest.fixture
def chain_spec() -> ChainSpec:
    return ChainSpec(seconds_per_slot=SECONDS_PER_SLOT, slots_per_epoch=SLOTS_PER_EPOCH)


@pytest.fixture
def fake_clock() -> FakeClock:
    # the chain is at the start of slot 100
    return FakeClock(now=slot_time(100))


@pytest.fixture
def beacon_client(base_url: str, chain_spec: ChainSpec, fake_clock: FakeClock) -> BeaconClient:
    client = BeaconClient(
        base_url=base_url,
        spec=chain_spec,
        time_source=fake_clock.time,
        slot_wait=PollPolicy(interval=1, clock=fake_clock.monotonic, sleep=fake_clock.sleep),
        attestation_poll=PollPolicy(
            interval=1, timeout=61, clock=fake_clock.monotonic, sleep=fake_clock.sleep
        ),
    )
    client.clock.genesis_time = Timestamp(GENESIS_TIME)
    return client


@pytest.fixture
def mocked_beacon() -> Generator[aioresponses, None, None]:
    with aioresponses() as m:
        yield m
