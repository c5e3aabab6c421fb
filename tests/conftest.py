"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock

import pytest

# Set test environment
os.environ["FUSION_ENVIRONMENT"] = "test"
os.environ["FUSION_AGGREGATOR_BASE_URL"] = "https://aggregator.test/v1"
os.environ["FUSION_AGGREGATOR_API_KEY"] = ""
os.environ["FUSION_DEFAULT_SLIPPAGE_BPS"] = "100"
os.environ["FUSION_DEBUG"] = "true"

from fusion_resolver.chains import ETHERLINK_TESTNET, ChainAddressTable, TokenRegistry
from fusion_resolver.config import get_settings
from fusion_resolver.contracts.escrow import Immutables, Timelocks
from fusion_resolver.routing.base import ConversionBackend, Quote, SwapParameters
from fusion_resolver.services.resolver import ResolverFacade

# Lowercase so Web3.is_address never trips on checksum casing
RESOLVER = "0x" + "11" * 20
FACTORY = "0x" + "22" * 20
ROUTER = "0x" + "33" * 20
MAKER = "0x" + "44" * 20
ESCROW = "0x" + "55" * 20
USDC = "0x4c2aa252bee766d3399850569713b55178934849"
WXTZ = "0xb1ea698633d57705e93b0e40c1077d46cd6a51d8"
NATIVE = "0x0000000000000000000000000000000000000000"

ORDER_HASH = "0x" + "ab" * 32
HASHLOCK = "0x" + "cd" * 32
SECRET = "0x" + "ef" * 32

SWAP_CALLDATA = "0xdeadbeef"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Re-read settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def timelocks() -> Timelocks:
    return Timelocks(
        src_withdrawal=10,
        src_public_withdrawal=120,
        src_cancellation=121,
        src_public_cancellation=122,
        dst_withdrawal=10,
        dst_public_withdrawal=100,
        dst_cancellation=101,
        deployed_at=1_700_000_000,
    )


@pytest.fixture
def immutables(timelocks) -> Immutables:
    """Destination escrow immutables: 1 WXTZ with a 0.001 deposit."""
    return Immutables(
        order_hash=ORDER_HASH,
        hashlock=HASHLOCK,
        maker=MAKER,
        taker=RESOLVER,
        token=WXTZ,
        amount=10**18,
        safety_deposit=10**15,
        timelocks=timelocks,
    )


@pytest.fixture
def swap_parameters() -> SwapParameters:
    return SwapParameters(
        router_address=ROUTER,
        encoded_calldata=SWAP_CALLDATA,
        expected_input_amount=2_000_500,
        expected_output_amount=10**18,
        gas_estimate=180_000,
    )


@pytest.fixture
def backend(swap_parameters) -> AsyncMock:
    """Mocked conversion backend returning fixed swap parameters."""
    mock = AsyncMock(spec=ConversionBackend)
    mock.fetch_swap_parameters.return_value = swap_parameters
    mock.fetch_quote.return_value = Quote(
        source_token=USDC,
        destination_token=WXTZ,
        source_amount=2_000_000,
        destination_amount=10**18,
        estimated_gas=150_000,
    )
    return mock


@pytest.fixture
def addresses() -> ChainAddressTable:
    return ChainAddressTable(
        resolvers={ETHERLINK_TESTNET: RESOLVER},
        escrow_factories={ETHERLINK_TESTNET: FACTORY},
    )


@pytest.fixture
def facade(addresses, backend) -> ResolverFacade:
    return ResolverFacade(
        addresses=addresses,
        tokens=TokenRegistry.for_chains([ETHERLINK_TESTNET]),
        backend=backend,
    )
