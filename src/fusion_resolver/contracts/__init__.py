"""Data contracts: calls, escrow immutables and unsigned transactions."""

from fusion_resolver.contracts.calls import ArbitraryCall, CallKind, split_calls
from fusion_resolver.contracts.escrow import Immutables, Timelocks
from fusion_resolver.contracts.transactions import UnsignedTransaction

__all__ = [
    "ArbitraryCall",
    "CallKind",
    "Immutables",
    "Timelocks",
    "UnsignedTransaction",
    "split_calls",
]
