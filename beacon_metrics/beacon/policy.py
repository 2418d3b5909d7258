import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from beacon_metrics.config.settings import ATTESTATION_POLL_TIMEOUT, POLL_INTERVAL


@dataclass
class PollPolicy:
    """
    Wait-and-retry schedule shared by the polling loops.

    `interval` is the pause between passes, `timeout` the overall ceiling
    measured from the start of the loop (`None` waits forever).
    """

    interval: float = POLL_INTERVAL
    timeout: float | None = None
    clock: Callable[[], float] = field(default=time.monotonic)
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def start(self) -> 'PollDeadline':
        return PollDeadline(policy=self, started_at=self.clock())


@dataclass
class PollDeadline:
    policy: PollPolicy
    started_at: float

    @property
    def elapsed(self) -> float:
        return self.policy.clock() - self.started_at

    def is_expired(self) -> bool:
        if self.policy.timeout is None:
            return False
        return self.elapsed >= self.policy.timeout

    async def wait(self) -> None:
        await self.policy.sleep(self.policy.interval)


def slot_wait_policy() -> PollPolicy:
    return PollPolicy(interval=POLL_INTERVAL)


def attestation_poll_policy() -> PollPolicy:
    return PollPolicy(interval=POLL_INTERVAL, timeout=ATTESTATION_POLL_TIMEOUT)
