"""Routing module: aggregator client and conversion backend interface."""

from fusion_resolver.routing.aggregator import AggregatorClient, create_aggregator_client
from fusion_resolver.routing.base import ConversionBackend, Quote, SwapParameters

__all__ = [
    "AggregatorClient",
    "ConversionBackend",
    "Quote",
    "SwapParameters",
    "create_aggregator_client",
]
