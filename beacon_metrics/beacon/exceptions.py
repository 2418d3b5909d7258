class BeaconClientError(Exception):
    """Base exception class for beacon client errors."""


class TransportError(BeaconClientError):
    """Raised when the request could not be sent or the connection failed."""


class RemoteError(BeaconClientError):
    """Raised when the beacon node responds with a non-success status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class DecodeError(BeaconClientError):
    """Raised when the response envelope or payload could not be parsed."""


class GenesisUnavailableError(BeaconClientError):
    def __init__(self) -> None:
        super().__init__('Genesis time is not available yet')


class PreGenesisError(BeaconClientError):
    def __init__(self, timestamp: int, genesis_time: int):
        super().__init__(f'Time {timestamp} is before genesis time {genesis_time}')
        self.timestamp = timestamp
        self.genesis_time = genesis_time


class AttestationTimeoutError(BeaconClientError):
    def __init__(self, slot: int, timeout: float):
        super().__init__(f'Timeout waiting for attestation count of slot {slot} after {timeout}s')
        self.slot = slot
        self.timeout = timeout


class SlotWaitTimeoutError(BeaconClientError):
    def __init__(self, slot: int, timeout: float):
        super().__init__(f'Slot {slot} has not closed within {timeout}s')
        self.slot = slot
        self.timeout = timeout


class EmptyCommitteeError(BeaconClientError):
    def __init__(self, slot: int):
        super().__init__(f'Empty committee for slot {slot}')
        self.slot = slot


class UnknownMetricError(BeaconClientError):
    def __init__(self, metric: object):
        super().__init__(f'Invalid metric name: {metric}')
        self.metric = metric
