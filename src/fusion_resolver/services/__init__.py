"""Transaction composition services."""

from fusion_resolver.services.call_builder import (
    build_approval_call,
    build_swap_call,
    encode_approve,
)
from fusion_resolver.services.composer import EscrowOperationComposer
from fusion_resolver.services.escrow_encoder import EscrowCallEncoder
from fusion_resolver.services.orchestrator import (
    ConversionIntent,
    ConversionOrchestrator,
    ConversionPlan,
    NoConversion,
    TokenConversion,
    conversion_intent,
    needs_conversion,
)
from fusion_resolver.services.resolver import ResolverFacade, create_resolver

__all__ = [
    "ConversionIntent",
    "ConversionOrchestrator",
    "ConversionPlan",
    "EscrowCallEncoder",
    "EscrowOperationComposer",
    "NoConversion",
    "ResolverFacade",
    "TokenConversion",
    "build_approval_call",
    "build_swap_call",
    "conversion_intent",
    "create_resolver",
    "encode_approve",
    "needs_conversion",
]
