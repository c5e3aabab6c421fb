"""Resolver transaction facade.

Public surface for callers. Composes two capabilities instead of extending
a base resolver:
- escrow call encoding/composition (EscrowOperationComposer)
- token conversion (ConversionOrchestrator over a ConversionBackend)

Every operation returns an UnsignedTransaction. This service NEVER signs
or broadcasts; the caller's submission component does that.
"""

import logging
from typing import Optional, Union

from fusion_resolver.chains import ChainAddressTable, TokenInfo, TokenRegistry
from fusion_resolver.config import get_settings
from fusion_resolver.contracts.calls import ArbitraryCall
from fusion_resolver.contracts.escrow import Immutables
from fusion_resolver.contracts.transactions import UnsignedTransaction
from fusion_resolver.routing.aggregator import AggregatorClient
from fusion_resolver.routing.base import ConversionBackend, Quote
from fusion_resolver.services.composer import EscrowOperationComposer
from fusion_resolver.services.orchestrator import (
    ConversionOrchestrator,
    ConversionIntent,
    NoConversion,
    TokenConversion,
    conversion_intent,
    needs_conversion,
)
from fusion_resolver.utils.validation import (
    checksum_address,
    to_bytes32,
    validate_slippage,
    validate_uint256,
)

logger = logging.getLogger(__name__)


class ResolverFacade:
    """Operation-shaped entry points: deploy-dst, withdraw, cancel with swap.

    Configuration (address table, token registry) is read-only, so one
    instance can serve concurrent operations.
    """

    def __init__(
        self,
        addresses: ChainAddressTable,
        tokens: Optional[TokenRegistry] = None,
        backend: Optional[ConversionBackend] = None,
        aggregator_url: Optional[str] = None,
        api_key: Optional[str] = None,
        default_slippage_bps: Optional[int] = None,
        composer: Optional[EscrowOperationComposer] = None,
    ):
        """Initialize the facade.

        Args:
            addresses: Per-chain resolver / escrow factory addresses
            tokens: Token registry for support checks (default: known tables
                of the configured chains)
            backend: Conversion backend (defaults to an AggregatorClient)
            aggregator_url: Aggregator base URL when no backend is given
            api_key: Aggregator API key when no backend is given
            default_slippage_bps: Slippage used when an operation passes none
            composer: Escrow operation composer
        """
        settings = get_settings()
        self.addresses = addresses
        if tokens is None:
            tokens = TokenRegistry.for_chains(addresses.chain_ids)
        self.tokens = tokens
        self.backend = backend or AggregatorClient(base_url=aggregator_url, api_key=api_key)
        self.orchestrator = ConversionOrchestrator(self.backend)
        self.composer = composer or EscrowOperationComposer()
        self.default_slippage_bps = validate_slippage(
            default_slippage_bps if default_slippage_bps is not None else settings.default_slippage_bps
        )

    # ======================
    # Introspection
    # ======================

    def get_address(self, chain_id: int) -> str:
        """Resolver address on a chain; ConfigurationError if absent."""
        return self.addresses.get_resolver(chain_id)

    def needs_conversion(self, token_a: str, token_b: str) -> bool:
        return needs_conversion(token_a, token_b)

    def is_token_supported(self, token_address: str) -> bool:
        return self.tokens.is_supported(token_address)

    def get_token_info(self, token_address: str) -> Optional[TokenInfo]:
        return self.tokens.get_token_info(token_address)

    async def get_quote(self, source_token: str, destination_token: str, amount: int) -> Quote:
        """Fresh price quote from the backend."""
        return await self.backend.fetch_quote(source_token, destination_token, amount)

    # ======================
    # Escrow operations
    # ======================

    async def deploy_destination_with_swap(
        self,
        chain_id: int,
        immutables: Immutables,
        inventory_token: str,
        swap_amount: Optional[int] = None,
        slippage_bps: Optional[int] = None,
        is_exact_output: bool = False,
        src_cancellation_timestamp: Optional[int] = None,
    ) -> UnsignedTransaction:
        """Deploy the destination escrow, converting inventory first if needed.

        Args:
            chain_id: Destination chain
            immutables: Destination escrow immutables (token = required token)
            inventory_token: Token the resolver currently holds
            swap_amount: Conversion amount (default: immutables.amount)
            slippage_bps: Slippage tolerance (default: configured)
            is_exact_output: Treat swap_amount as exact output
            src_cancellation_timestamp: Default: from immutables timelocks
        """
        resolver = self.addresses.get_resolver(chain_id)
        intent = self._intent(
            inventory_token, immutables.token, _swap_amount(swap_amount, immutables),
            slippage_bps, is_exact_output,
        )
        # Resolve the factory before any network call
        factory = None
        if isinstance(intent, TokenConversion) and not immutables.is_native_token:
            factory = self.addresses.get_escrow_factory(chain_id)

        timestamp = src_cancellation_timestamp
        if timestamp is None:
            timestamp = immutables.timelocks.src_cancellation_timestamp
        validate_uint256(timestamp, "src_cancellation_timestamp")

        self._log_intent("deployDst", chain_id, intent)
        plan = await self.orchestrator.plan(intent, resolver)
        return self.composer.compose_deploy_destination(
            chain_id, resolver, immutables, timestamp, plan, factory
        )

    async def withdraw_with_swap(
        self,
        chain_id: int,
        escrow: str,
        secret: Union[str, bytes],
        immutables: Immutables,
        target_token: Optional[str] = None,
        swap_amount: Optional[int] = None,
        slippage_bps: Optional[int] = None,
        is_exact_output: bool = False,
    ) -> UnsignedTransaction:
        """Withdraw from an escrow, then optionally convert the released token.

        The escrow releases immutables.token; target_token is what the
        resolver wants to end up holding (None = keep as is).
        """
        resolver = self.addresses.get_resolver(chain_id)
        escrow = checksum_address(escrow, "escrow")
        secret = to_bytes32(secret, "secret")
        intent = self._reverse_intent(immutables, target_token, swap_amount, slippage_bps, is_exact_output)

        self._log_intent("withdraw", chain_id, intent)
        plan = await self.orchestrator.plan(intent, resolver)
        return self.composer.compose_withdraw(chain_id, resolver, escrow, secret, immutables, plan)

    async def cancel_with_swap(
        self,
        chain_id: int,
        escrow: str,
        immutables: Immutables,
        target_token: Optional[str] = None,
        swap_amount: Optional[int] = None,
        slippage_bps: Optional[int] = None,
        is_exact_output: bool = False,
    ) -> UnsignedTransaction:
        """Cancel an escrow, then optionally convert the returned token."""
        resolver = self.addresses.get_resolver(chain_id)
        escrow = checksum_address(escrow, "escrow")
        intent = self._reverse_intent(immutables, target_token, swap_amount, slippage_bps, is_exact_output)

        self._log_intent("cancel", chain_id, intent)
        plan = await self.orchestrator.plan(intent, resolver)
        return self.composer.compose_cancel(chain_id, resolver, escrow, immutables, plan)

    def arbitrary_calls(self, chain_id: int, calls: list[ArbitraryCall]) -> UnsignedTransaction:
        """Batch owner-authorized calls through the resolver."""
        resolver = self.addresses.get_resolver(chain_id)
        return self.composer.compose_arbitrary_calls(chain_id, resolver, calls)

    async def close(self) -> None:
        await self.backend.close()

    # ======================
    # Helpers
    # ======================

    def _intent(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
        slippage_bps: Optional[int],
        is_exact_output: bool,
    ) -> ConversionIntent:
        slippage = slippage_bps if slippage_bps is not None else self.default_slippage_bps
        return conversion_intent(source_token, destination_token, amount, slippage, is_exact_output)

    def _reverse_intent(
        self,
        immutables: Immutables,
        target_token: Optional[str],
        swap_amount: Optional[int],
        slippage_bps: Optional[int],
        is_exact_output: bool,
    ) -> ConversionIntent:
        if target_token is None:
            return NoConversion()
        return self._intent(
            immutables.token, target_token, _swap_amount(swap_amount, immutables),
            slippage_bps, is_exact_output,
        )

    def _log_intent(self, operation: str, chain_id: int, intent: ConversionIntent) -> None:
        if isinstance(intent, NoConversion):
            logger.debug(f"{operation} on chain {chain_id}: no conversion needed")
            return
        logger.info(
            f"{operation} on chain {chain_id}: converting {intent.amount} "
            f"{self.tokens.describe(intent.source_token)} -> "
            f"{self.tokens.describe(intent.destination_token)} "
            f"(slippage: {intent.slippage_bps} bps)"
        )


def _swap_amount(swap_amount: Optional[int], immutables: Immutables) -> int:
    """Explicit amount as given (0 is rejected later), else the order amount."""
    return immutables.amount if swap_amount is None else swap_amount

def create_resolver(
    resolvers: dict[int, str],
    escrow_factories: Optional[dict[int, str]] = None,
    tokens: Optional[dict[str, dict]] = None,
    aggregator_url: Optional[str] = None,
    api_key: Optional[str] = None,
) -> ResolverFacade:
    """Create a facade from plain configuration tables.

    Args:
        resolvers: chain_id -> resolver contract address
        escrow_factories: chain_id -> escrow factory address
        tokens: symbol -> {address, decimals}
        aggregator_url: Aggregator base URL (default from settings)
        api_key: Aggregator API key (default from settings)
    """
    return ResolverFacade(
        addresses=ChainAddressTable(resolvers, escrow_factories),
        tokens=TokenRegistry.from_symbols(tokens or {}),
        aggregator_url=aggregator_url,
        api_key=api_key,
    )
