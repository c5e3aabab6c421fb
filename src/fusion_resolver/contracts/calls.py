"""Arbitrary call descriptors executed by the resolver contract."""

from dataclasses import dataclass
from enum import Enum


class CallKind(str, Enum):
    """What a call does, for introspection and ordering checks."""
    APPROVE = "approve"
    SWAP = "swap"
    ESCROW = "escrow"


@dataclass(frozen=True)
class ArbitraryCall:
    """A single owner-authorized call: target contract + calldata.

    Attributes:
        target: Contract address the resolver calls
        data: 0x-prefixed hex calldata
        kind: Call category (approve, swap, escrow)
    """
    target: str
    data: str
    kind: CallKind = CallKind.APPROVE

    @property
    def selector(self) -> str:
        """4-byte function selector as 0x-hex."""
        return self.data[:10]


def split_calls(calls: list[ArbitraryCall]) -> tuple[list[str], list[bytes]]:
    """Split calls into the parallel (targets, data) arrays the resolver ABI takes."""
    targets = [call.target for call in calls]
    payloads = [bytes.fromhex(call.data[2:]) for call in calls]
    return targets, payloads
