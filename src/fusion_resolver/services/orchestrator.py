"""Conversion orchestrator.

Decides whether a token conversion is needed and turns aggregator swap
parameters into the [approve, swap] call pair. Policy (needs_conversion)
and mechanism (prepare_conversion) are kept separate: callers check the
policy first, prepare_conversion never short-circuits on its own.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from fusion_resolver.contracts.calls import ArbitraryCall
from fusion_resolver.errors import ExternalApiError, InvalidParameterError
from fusion_resolver.routing.base import ConversionBackend, describe_swap
from fusion_resolver.services.call_builder import build_approval_call, build_swap_call
from fusion_resolver.utils.validation import (
    checksum_address,
    is_native,
    validate_amount,
    validate_slippage,
)

logger = logging.getLogger(__name__)


def needs_conversion(token_a: str, token_b: str) -> bool:
    """Case-insensitive address inequality. Pure, no I/O."""
    return token_a.lower() != token_b.lower()


@dataclass(frozen=True)
class ConversionPlan:
    """Approve + swap calls for one conversion, with aggregator figures."""

    approval_call: ArbitraryCall
    swap_call: ArbitraryCall
    expected_input: int
    expected_output: int
    gas_estimate: int
    router_address: str

    @property
    def calls(self) -> list[ArbitraryCall]:
        """Calls in execution order: approval strictly before swap."""
        return [self.approval_call, self.swap_call]


@dataclass(frozen=True)
class NoConversion:
    """Inventory already holds the required token."""

    @property
    def is_required(self) -> bool:
        return False


@dataclass(frozen=True)
class TokenConversion:
    """Swap amount of source_token into destination_token via the aggregator."""

    source_token: str
    destination_token: str
    amount: int
    slippage_bps: int
    is_exact_output: bool = False

    def __post_init__(self):
        object.__setattr__(self, "source_token", checksum_address(self.source_token, "source_token"))
        object.__setattr__(
            self, "destination_token", checksum_address(self.destination_token, "destination_token")
        )
        if not needs_conversion(self.source_token, self.destination_token):
            raise InvalidParameterError(
                f"Conversion requires distinct tokens, got {self.source_token} twice"
            )
        _reject_native_source(self.source_token)
        validate_amount(self.amount)
        validate_slippage(self.slippage_bps)

    @property
    def is_required(self) -> bool:
        return True


def _reject_native_source(token: str) -> None:
    # The source is approved to the router, which a native asset cannot be
    if is_native(token):
        raise InvalidParameterError("Native asset cannot be a conversion source")


ConversionIntent = Union[NoConversion, TokenConversion]


def conversion_intent(
    source_token: str,
    destination_token: str,
    amount: int,
    slippage_bps: int,
    is_exact_output: bool = False,
) -> ConversionIntent:
    """Pick the intent variant from the token pair."""
    if not needs_conversion(source_token, destination_token):
        return NoConversion()
    return TokenConversion(
        source_token=source_token,
        destination_token=destination_token,
        amount=amount,
        slippage_bps=slippage_bps,
        is_exact_output=is_exact_output,
    )


class ConversionOrchestrator:
    """Builds conversion call pairs from a conversion backend.

    Holds no mutable state; safe to share between concurrent operations.
    """

    def __init__(self, backend: ConversionBackend):
        self.backend = backend

    @staticmethod
    def needs_conversion(token_a: str, token_b: str) -> bool:
        return needs_conversion(token_a, token_b)

    async def prepare_conversion(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
        from_address: str,
        slippage_bps: int,
        is_exact_output: bool = False,
    ) -> ConversionPlan:
        """Fetch swap parameters and build [approve(source -> router), swap].

        The approval covers the aggregator-reported input amount rather
        than the nominal amount, to absorb aggregator-side rounding.

        Raises:
            InvalidParameterError: Bad input, before any network call
            ExternalApiError: Aggregator failure, propagated as-is
        """
        src = checksum_address(source_token, "source_token")
        dst = checksum_address(destination_token, "destination_token")
        sender = checksum_address(from_address, "from_address")
        _reject_native_source(src)
        validate_amount(amount)
        validate_slippage(slippage_bps)

        logger.debug(
            f"Preparing conversion {amount} {src} -> {dst} for {sender} "
            f"(slippage: {slippage_bps} bps, exact output: {is_exact_output})"
        )

        try:
            params = await self.backend.fetch_swap_parameters(
                src, dst, amount, sender, slippage_bps, is_exact_output
            )
        except (httpx.RequestError, OSError) as e:
            # Backends other than AggregatorClient may leak raw transport errors
            raise ExternalApiError(
                f"Swap parameters request failed (src={src} dst={dst} amount={amount}): "
                f"{type(e).__name__}: {e}"
            ) from e

        approval_call = build_approval_call(src, params.router_address, params.expected_input_amount)
        swap_call = build_swap_call(params.router_address, params.encoded_calldata)

        logger.info(f"Conversion ready: {describe_swap(params, f'{src} -> {dst}')}")

        return ConversionPlan(
            approval_call=approval_call,
            swap_call=swap_call,
            expected_input=params.expected_input_amount,
            expected_output=params.expected_output_amount,
            gas_estimate=params.gas_estimate,
            router_address=params.router_address,
        )

    async def plan(self, intent: ConversionIntent, from_address: str) -> Optional[ConversionPlan]:
        """Resolve an intent; NoConversion never touches the backend."""
        if isinstance(intent, NoConversion):
            return None
        return await self.prepare_conversion(
            intent.source_token,
            intent.destination_token,
            intent.amount,
            from_address,
            intent.slippage_bps,
            intent.is_exact_output,
        )
