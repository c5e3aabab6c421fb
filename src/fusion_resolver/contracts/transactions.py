"""Unsigned transaction contract.

Transactions are returned unsigned. Signing and broadcasting belong to the
caller's submission component.
"""

from typing import Optional

from pydantic import BaseModel, Field

from fusion_resolver.contracts.calls import ArbitraryCall, CallKind


class UnsignedTransaction(BaseModel):
    """An unsigned transaction targeting the resolver contract."""

    chain_id: int = Field(..., description="EVM chain ID")
    to: str = Field(..., description="Resolver contract address")
    data: str = Field(..., description="Transaction data (hex encoded)")
    value: int = Field(default=0, ge=0, description="Native value to attach, in wei")
    calls: list[ArbitraryCall] = Field(
        default_factory=list,
        description="Calls in on-chain execution order, escrow call included",
    )
    gas_estimate: Optional[int] = Field(None, description="Aggregator gas estimate for swaps")
    description: Optional[str] = Field(None, description="Human-readable description")

    @property
    def call_kinds(self) -> list[CallKind]:
        return [call.kind for call in self.calls]
