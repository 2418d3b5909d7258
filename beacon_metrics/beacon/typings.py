from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeVar

from eth_typing import HexStr
from hexbytes import HexBytes
from web3 import Web3
from web3.types import Timestamp

from beacon_metrics.beacon.exceptions import DecodeError

T = TypeVar('T')


class MetricKind(Enum):
    SLOT_BLOCK = 'slot_block'
    FINALIZED_EPOCH = 'finalized_epoch'
    JUSTIFIED_EPOCH = 'justified_epoch'
    SLOT_ATTESTATIONS = 'slot_attestations'
    SLOT_ATTESTATIONS_PERCENTAGE = 'slot_attestations_percentage'


@dataclass(frozen=True)
class ChainSpec:
    seconds_per_slot: int
    slots_per_epoch: int

    def __post_init__(self) -> None:
        if self.seconds_per_slot <= 0 or self.slots_per_epoch <= 0:
            raise ValueError(
                f'Invalid chain spec: seconds per slot {self.seconds_per_slot}, '
                f'slots per epoch {self.slots_per_epoch}'
            )

    @classmethod
    def from_json(cls, data: dict) -> 'ChainSpec':
        return ChainSpec(
            seconds_per_slot=int(data['SECONDS_PER_SLOT']),
            slots_per_epoch=int(data['SLOTS_PER_EPOCH']),
        )


@dataclass
class Genesis:
    genesis_time: Timestamp

    @classmethod
    def from_json(cls, data: dict) -> 'Genesis':
        return Genesis(genesis_time=Timestamp(int(data['genesis_time'])))


@dataclass
class BlockHeader:
    slot: int
    root: HexStr
    proposer_index: int

    @classmethod
    def from_json(cls, data: dict) -> 'BlockHeader':
        message = data['header']['message']
        return BlockHeader(
            slot=int(message['slot']),
            root=HexStr(data['root']),
            proposer_index=int(message['proposer_index']),
        )


@dataclass
class Checkpoint:
    epoch: int
    root: HexBytes

    @property
    def is_zero(self) -> bool:
        # an unset checkpoint carries the all-zeros root
        return not any(self.root)

    @classmethod
    def from_json(cls, data: dict) -> 'Checkpoint':
        return Checkpoint(epoch=int(data['epoch']), root=HexBytes(data['root']))


@dataclass
class FinalityCheckpoints:
    previous_justified: Checkpoint
    justified: Checkpoint
    finalized: Checkpoint

    @classmethod
    def from_json(cls, data: dict) -> 'FinalityCheckpoints':
        return FinalityCheckpoints(
            previous_justified=Checkpoint.from_json(data['previous_justified']),
            justified=Checkpoint.from_json(data['current_justified']),
            finalized=Checkpoint.from_json(data['finalized']),
        )


@dataclass
class Committee:
    index: int
    slot: int
    validators: list[int] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> 'Committee':
        return Committee(
            index=int(data['index']),
            slot=int(data['slot']),
            validators=[int(v) for v in data['validators']],
        )


@dataclass
class AttestationData:
    slot: int
    index: int
    beacon_block_root: HexStr

    @classmethod
    def from_json(cls, data: dict) -> 'AttestationData':
        return AttestationData(
            slot=int(data['slot']),
            index=int(data['index']),
            beacon_block_root=HexStr(data['beacon_block_root']),
        )


@dataclass
class Attestation:
    aggregation_bits: int
    data: AttestationData

    @property
    def participants(self) -> int:
        return self.aggregation_bits.bit_count()

    @classmethod
    def from_json(cls, data: dict) -> 'Attestation':
        bits = data['aggregation_bits']
        if not isinstance(bits, int):
            bits = Web3.to_int(HexBytes(bits))
        return Attestation(
            aggregation_bits=bits,
            data=AttestationData.from_json(data['data']),
        )


@dataclass(frozen=True)
class BlockPresence:
    kind: ClassVar[MetricKind] = MetricKind.SLOT_BLOCK
    slot: int
    present: bool

    @property
    def value(self) -> int:
        return int(self.present)


@dataclass(frozen=True)
class FinalizedEpochTransition:
    kind: ClassVar[MetricKind] = MetricKind.FINALIZED_EPOCH
    slot: int
    changed: bool

    @property
    def value(self) -> int:
        return int(self.changed)


@dataclass(frozen=True)
class JustifiedEpochTransition:
    kind: ClassVar[MetricKind] = MetricKind.JUSTIFIED_EPOCH
    slot: int
    changed: bool

    @property
    def value(self) -> int:
        return int(self.changed)


@dataclass(frozen=True)
class SlotAttestationCount:
    kind: ClassVar[MetricKind] = MetricKind.SLOT_ATTESTATIONS
    slot: int
    count: int

    @property
    def value(self) -> int:
        return self.count


@dataclass(frozen=True)
class SlotAttestationPercentage:
    kind: ClassVar[MetricKind] = MetricKind.SLOT_ATTESTATIONS_PERCENTAGE
    slot: int
    percentage: int
    attestation_count: int
    committee_size: int

    @property
    def value(self) -> int:
        return self.percentage


MetricValue = (
    BlockPresence
    | FinalizedEpochTransition
    | JustifiedEpochTransition
    | SlotAttestationCount
    | SlotAttestationPercentage
)


def decode(cls: type[T], data: Any) -> T:
    try:
        return cls.from_json(data)  # type: ignore[attr-defined]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f'Failed to decode {cls.__name__}: {e!r}') from e
