"""Tests for escrow immutables, timelocks and the escrow call encoder."""

import pytest
from eth_abi import decode

from conftest import ESCROW, HASHLOCK, MAKER, ORDER_HASH, RESOLVER, ROUTER, SECRET, USDC, WXTZ
from fusion_resolver.contracts.calls import ArbitraryCall, CallKind
from fusion_resolver.contracts.escrow import Immutables, Timelocks
from fusion_resolver.errors import InvalidParameterError
from fusion_resolver.services.escrow_encoder import (
    ARBITRARY_CALLS_SIGNATURE,
    CANCEL_SIGNATURE,
    DEPLOY_DST_SIGNATURE,
    DEPLOY_DST_TYPES,
    WITHDRAW_SIGNATURE,
    WITHDRAW_TYPES,
    EscrowCallEncoder,
    function_selector,
)


def selector_hex(signature: str) -> str:
    return "0x" + function_selector(signature).hex()


class TestTimelocks:
    """Tests for packed timelocks."""

    def test_pack_layout(self, timelocks):
        """Test stage offsets land in consecutive 32-bit slots."""
        packed = timelocks.pack()

        assert packed & 0xFFFFFFFF == 10
        assert (packed >> 64) & 0xFFFFFFFF == 121
        assert (packed >> 192) & 0xFFFFFFFF == 101
        assert packed >> 224 == 1_700_000_000

    def test_src_cancellation_timestamp(self, timelocks):
        assert timelocks.src_cancellation_timestamp == 1_700_000_121

    def test_stage_overflow(self):
        """Test stages must fit in 32 bits."""
        with pytest.raises(InvalidParameterError):
            Timelocks(2**32, 0, 0, 0, 0, 0, 0)


class TestImmutables:
    """Tests for escrow immutables."""

    def test_normalization(self, immutables):
        """Test hashes become 0x-hex and addresses are checksummed."""
        assert immutables.order_hash == ORDER_HASH
        assert immutables.hashlock == HASHLOCK
        assert immutables.token.lower() == WXTZ
        assert immutables.token != WXTZ
        assert immutables.is_native_token is False

    def test_build_tuple(self, immutables, timelocks):
        """Test the ABI tuple carries addresses as integers."""
        built = immutables.build()

        assert built[0] == bytes.fromhex("ab" * 32)
        assert built[2] == int(MAKER, 16)
        assert built[3] == int(RESOLVER, 16)
        assert built[4] == int(WXTZ, 16)
        assert built[5] == 10**18
        assert built[6] == 10**15
        assert built[7] == timelocks.pack()

    def test_bad_hash_length(self, timelocks):
        with pytest.raises(InvalidParameterError):
            Immutables("0x1234", HASHLOCK, MAKER, RESOLVER, WXTZ, 1, 0, timelocks)

    def test_negative_amount(self, timelocks):
        with pytest.raises(InvalidParameterError):
            Immutables(ORDER_HASH, HASHLOCK, MAKER, RESOLVER, WXTZ, -1, 0, timelocks)


class TestEscrowCallEncoder:
    """Tests for resolver entry point encoding."""

    def test_deploy_dst(self, immutables):
        """Test deployDst carries calls, immutables and timestamp."""
        calls = [
            ArbitraryCall(USDC, "0x095ea7b3", CallKind.APPROVE),
            ArbitraryCall(ROUTER, "0xdeadbeef", CallKind.SWAP),
        ]
        data = EscrowCallEncoder().deploy_dst(immutables, 1_700_000_121, calls)

        assert data.startswith(selector_hex(DEPLOY_DST_SIGNATURE))
        targets, payloads, built, timestamp = decode(
            DEPLOY_DST_TYPES, bytes.fromhex(data[10:])
        )
        assert [target.lower() for target in targets] == [USDC, ROUTER]
        assert list(payloads) == [bytes.fromhex("095ea7b3"), bytes.fromhex("deadbeef")]
        assert tuple(built) == immutables.build()
        assert timestamp == 1_700_000_121

    def test_deploy_dst_without_calls(self, immutables):
        data = EscrowCallEncoder().deploy_dst(immutables, 1)
        targets, payloads, _, _ = decode(
            DEPLOY_DST_TYPES, bytes.fromhex(data[10:])
        )
        assert list(targets) == []
        assert list(payloads) == []

    def test_deploy_dst_bad_timestamp(self, immutables):
        with pytest.raises(InvalidParameterError):
            EscrowCallEncoder().deploy_dst(immutables, -1)

    def test_withdraw(self, immutables):
        data = EscrowCallEncoder().withdraw(ESCROW, SECRET, immutables)

        assert data.startswith(selector_hex(WITHDRAW_SIGNATURE))
        escrow, secret, _, targets, _ = decode(
            WITHDRAW_TYPES, bytes.fromhex(data[10:])
        )
        assert escrow.lower() == ESCROW
        assert secret == bytes.fromhex("ef" * 32)
        assert list(targets) == []

    def test_withdraw_short_secret(self, immutables):
        with pytest.raises(InvalidParameterError):
            EscrowCallEncoder().withdraw(ESCROW, "0x1234", immutables)

    def test_cancel(self, immutables):
        data = EscrowCallEncoder().cancel(ESCROW, immutables)
        assert data.startswith(selector_hex(CANCEL_SIGNATURE))

    def test_arbitrary_calls(self):
        data = EscrowCallEncoder().arbitrary_calls([ArbitraryCall(USDC, "0x01")])
        assert data.startswith(selector_hex(ARBITRARY_CALLS_SIGNATURE))

    def test_arbitrary_calls_empty(self):
        with pytest.raises(InvalidParameterError):
            EscrowCallEncoder().arbitrary_calls([])
