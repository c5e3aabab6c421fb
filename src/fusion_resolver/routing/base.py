"""Conversion backend interface and aggregator response types."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    """A price quote from the aggregator.

    Fetched fresh for every request and never cached, since prices move.
    Amounts are integers in smallest token units.
    """

    source_token: str
    destination_token: str
    source_amount: int
    destination_amount: int
    estimated_gas: int
    routing_metadata: dict = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def min_destination_amount(self, slippage_bps: int) -> int:
        """Minimum acceptable output after slippage, rounded down."""
        return self.destination_amount - (self.destination_amount * slippage_bps) // 10_000


@dataclass(frozen=True)
class SwapParameters:
    """Ready-to-execute swap data for the aggregator's router.

    encoded_calldata is opaque: produced by the aggregator for its own
    router and passed through untouched.
    """

    router_address: str
    encoded_calldata: str
    expected_input_amount: int
    expected_output_amount: int
    gas_estimate: int


class ConversionBackend(ABC):
    """Source of quotes and swap calldata for token conversions."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name identifier."""
        pass

    @abstractmethod
    async def fetch_quote(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
    ) -> Quote:
        """
        Get a price quote.

        Args:
            source_token: Token to sell (zero address = native asset)
            destination_token: Token to buy
            amount: Amount of source_token in smallest units

        Raises:
            InvalidParameterError: Malformed address or amount
            ExternalApiError: HTTP or transport failure
        """
        pass

    @abstractmethod
    async def fetch_swap_parameters(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
        from_address: str,
        slippage_bps: int,
        is_exact_output: bool = False,
    ) -> SwapParameters:
        """
        Get router address and calldata for a swap executed by from_address.

        Args:
            source_token: Token to sell
            destination_token: Token to buy
            amount: Input amount, or desired output when is_exact_output
            from_address: Contract that will execute the swap
            slippage_bps: Slippage tolerance in basis points, (0, 5000]
            is_exact_output: Treat amount as the exact output wanted

        Raises:
            InvalidParameterError: Out-of-range slippage or bad input
            ExternalApiError: HTTP or transport failure
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None


def describe_swap(params: SwapParameters, source: Optional[str] = None) -> str:
    """One-line summary of swap parameters for logs."""
    prefix = f"{source} " if source else ""
    return (
        f"{prefix}in={params.expected_input_amount} out={params.expected_output_amount} "
        f"router={params.router_address} gas={params.gas_estimate}"
    )
