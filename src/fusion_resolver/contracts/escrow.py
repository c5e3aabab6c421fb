"""Escrow immutables and packed timelocks.

Immutables mirror the on-chain tuple
(orderHash, hashlock, maker, taker, token, amount, safetyDeposit, timelocks)
where addresses are carried as uint256 and timelocks as one packed uint256.
"""

from dataclasses import dataclass
from typing import Union

from fusion_resolver.errors import InvalidParameterError
from fusion_resolver.utils.validation import (
    checksum_address,
    is_native,
    to_bytes32,
    validate_uint256,
)

_STAGE_BITS = 32
_STAGE_MASK = 2**_STAGE_BITS - 1
_DEPLOYED_AT_OFFSET = 224

# Stage order inside the packed word
STAGES = (
    "src_withdrawal",
    "src_public_withdrawal",
    "src_cancellation",
    "src_public_cancellation",
    "dst_withdrawal",
    "dst_public_withdrawal",
    "dst_cancellation",
)


@dataclass(frozen=True)
class Timelocks:
    """Per-stage offsets (seconds since deployment) plus deployment time."""

    src_withdrawal: int
    src_public_withdrawal: int
    src_cancellation: int
    src_public_cancellation: int
    dst_withdrawal: int
    dst_public_withdrawal: int
    dst_cancellation: int
    deployed_at: int = 0

    def __post_init__(self):
        for name in STAGES + ("deployed_at",):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _STAGE_MASK:
                raise InvalidParameterError(f"Timelock {name} must fit in 32 bits, got {value!r}")

    def pack(self) -> int:
        """Pack into the uint256 layout used on-chain."""
        packed = self.deployed_at << _DEPLOYED_AT_OFFSET
        for index, name in enumerate(STAGES):
            packed |= getattr(self, name) << (index * _STAGE_BITS)
        return packed

    @property
    def src_cancellation_timestamp(self) -> int:
        """Absolute time when the source escrow becomes privately cancellable."""
        return self.deployed_at + self.src_cancellation


@dataclass(frozen=True)
class Immutables:
    """Escrow immutables for one side of a cross-chain order."""

    order_hash: Union[str, bytes]
    hashlock: Union[str, bytes]
    maker: str
    taker: str
    token: str
    amount: int
    safety_deposit: int
    timelocks: Timelocks

    def __post_init__(self):
        object.__setattr__(self, "order_hash", "0x" + to_bytes32(self.order_hash, "order_hash").hex())
        object.__setattr__(self, "hashlock", "0x" + to_bytes32(self.hashlock, "hashlock").hex())
        for name in ("maker", "taker", "token"):
            object.__setattr__(self, name, checksum_address(getattr(self, name), name))
        for name in ("amount", "safety_deposit"):
            validate_uint256(getattr(self, name), name)

    @property
    def is_native_token(self) -> bool:
        """True when the escrowed asset is the chain's native asset."""
        return is_native(self.token)

    def build(self) -> tuple:
        """ABI tuple (bytes32,bytes32,uint256,uint256,uint256,uint256,uint256,uint256)."""
        return (
            to_bytes32(self.order_hash),
            to_bytes32(self.hashlock),
            int(self.maker, 16),
            int(self.taker, 16),
            int(self.token, 16),
            self.amount,
            self.safety_deposit,
            self.timelocks.pack(),
        )
