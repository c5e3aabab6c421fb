"""Escrow operation composer.

Merges conversion calls with the canonical escrow call into one unsigned
transaction. Assembly is synchronous and all-or-nothing: either a complete
transaction is returned or an exception is raised.

Execution order per operation:
    deploy-dst:  approve(src->router) -> swap -> approve(dst->factory) -> deployDst
    withdraw:    withdraw -> approve(src->router) -> swap
    cancel:      cancel   -> approve(src->router) -> swap
"""

import logging
from typing import Optional, Union

from fusion_resolver.contracts.calls import ArbitraryCall, CallKind
from fusion_resolver.contracts.escrow import Immutables
from fusion_resolver.contracts.transactions import UnsignedTransaction
from fusion_resolver.errors import ConfigurationError
from fusion_resolver.services.call_builder import build_approval_call
from fusion_resolver.services.escrow_encoder import EscrowCallEncoder
from fusion_resolver.services.orchestrator import ConversionPlan

logger = logging.getLogger(__name__)


def deploy_value(immutables: Immutables) -> int:
    """Native value for deployDst: amount + deposit for native orders, else deposit."""
    if immutables.is_native_token:
        return immutables.amount + immutables.safety_deposit
    return immutables.safety_deposit


class EscrowOperationComposer:
    """Builds unsigned resolver transactions for escrow lifecycle operations."""

    def __init__(self, encoder: Optional[EscrowCallEncoder] = None):
        self.encoder = encoder or EscrowCallEncoder()

    def compose_deploy_destination(
        self,
        chain_id: int,
        resolver_address: str,
        immutables: Immutables,
        src_cancellation_timestamp: int,
        conversion: Optional[ConversionPlan] = None,
        escrow_factory: Optional[str] = None,
    ) -> UnsignedTransaction:
        """Compose deployDst, prepending conversion and factory approval calls.

        Without a conversion the transaction carries the deploy call alone and
        relies on the resolver's standing factory allowance. With one, the
        freshly swapped token is approved to the factory for the exact order
        amount (skipped for native-asset orders, which travel as value).
        """
        preparatory: list[ArbitraryCall] = []
        if conversion is not None:
            preparatory.extend(conversion.calls)
            if not immutables.is_native_token:
                if not escrow_factory:
                    raise ConfigurationError(
                        f"Escrow factory address required to approve {immutables.token} "
                        f"on chain {chain_id}"
                    )
                preparatory.append(
                    build_approval_call(immutables.token, escrow_factory, immutables.amount)
                )

        data = self.encoder.deploy_dst(immutables, src_cancellation_timestamp, preparatory)
        value = deploy_value(immutables)

        logger.info(
            f"Composed deployDst on chain {chain_id}: {len(preparatory)} preparatory call(s), "
            f"amount={immutables.amount} value={value}"
        )
        return UnsignedTransaction(
            chain_id=chain_id,
            to=resolver_address,
            data=data,
            value=value,
            calls=preparatory + [ArbitraryCall(resolver_address, data, CallKind.ESCROW)],
            gas_estimate=conversion.gas_estimate if conversion else None,
            description=_describe("Deploy destination escrow", conversion),
        )

    def compose_withdraw(
        self,
        chain_id: int,
        resolver_address: str,
        escrow: str,
        secret: Union[str, bytes],
        immutables: Immutables,
        conversion: Optional[ConversionPlan] = None,
    ) -> UnsignedTransaction:
        """Compose withdraw; conversion calls run after funds are released."""
        follow_up = conversion.calls if conversion is not None else []
        data = self.encoder.withdraw(escrow, secret, immutables, follow_up)

        logger.info(
            f"Composed withdraw on chain {chain_id} from {escrow}: "
            f"{len(follow_up)} follow-up call(s)"
        )
        return UnsignedTransaction(
            chain_id=chain_id,
            to=resolver_address,
            data=data,
            value=0,
            calls=[ArbitraryCall(resolver_address, data, CallKind.ESCROW)] + follow_up,
            gas_estimate=conversion.gas_estimate if conversion else None,
            description=_describe(f"Withdraw from escrow {escrow}", conversion),
        )

    def compose_cancel(
        self,
        chain_id: int,
        resolver_address: str,
        escrow: str,
        immutables: Immutables,
        conversion: Optional[ConversionPlan] = None,
    ) -> UnsignedTransaction:
        """Compose cancel; conversion calls run after funds are returned."""
        follow_up = conversion.calls if conversion is not None else []
        data = self.encoder.cancel(escrow, immutables, follow_up)

        logger.info(
            f"Composed cancel on chain {chain_id} for {escrow}: "
            f"{len(follow_up)} follow-up call(s)"
        )
        return UnsignedTransaction(
            chain_id=chain_id,
            to=resolver_address,
            data=data,
            value=0,
            calls=[ArbitraryCall(resolver_address, data, CallKind.ESCROW)] + follow_up,
            gas_estimate=conversion.gas_estimate if conversion else None,
            description=_describe(f"Cancel escrow {escrow}", conversion),
        )

    def compose_arbitrary_calls(
        self,
        chain_id: int,
        resolver_address: str,
        calls: list[ArbitraryCall],
    ) -> UnsignedTransaction:
        """Compose a bare batch of resolver calls."""
        data = self.encoder.arbitrary_calls(calls)
        return UnsignedTransaction(
            chain_id=chain_id,
            to=resolver_address,
            data=data,
            value=0,
            calls=list(calls),
            description=f"Execute {len(calls)} arbitrary call(s)",
        )


def _describe(action: str, conversion: Optional[ConversionPlan]) -> str:
    if conversion is None:
        return action
    return (
        f"{action} with swap of {conversion.expected_input} via {conversion.router_address} "
        f"(expected output {conversion.expected_output})"
    )
