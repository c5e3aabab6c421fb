"""ABI encoding for the resolver contract's escrow entry points.

Entry points (resolver contract):
- deployDst(targets, data, immutables, srcCancellationTimestamp)  payable
- withdraw(escrow, secret, immutables, targets, data)
- cancel(escrow, immutables, targets, data)
- arbitraryCalls(targets, data)

deployDst runs its calls BEFORE deploying the escrow; withdraw and cancel
run theirs AFTER the escrow has released funds.
"""

import logging
from typing import Sequence, Union

from eth_abi import encode
from web3 import Web3

from fusion_resolver.contracts.calls import ArbitraryCall, split_calls
from fusion_resolver.contracts.escrow import Immutables
from fusion_resolver.errors import InvalidParameterError
from fusion_resolver.utils.validation import checksum_address, to_bytes32, validate_uint256

logger = logging.getLogger(__name__)

IMMUTABLES_TYPE = "(bytes32,bytes32,uint256,uint256,uint256,uint256,uint256,uint256)"

DEPLOY_DST_SIGNATURE = f"deployDst(address[],bytes[],{IMMUTABLES_TYPE},uint256)"
DEPLOY_DST_TYPES = ["address[]", "bytes[]", IMMUTABLES_TYPE, "uint256"]

WITHDRAW_SIGNATURE = f"withdraw(address,bytes32,{IMMUTABLES_TYPE},address[],bytes[])"
WITHDRAW_TYPES = ["address", "bytes32", IMMUTABLES_TYPE, "address[]", "bytes[]"]

CANCEL_SIGNATURE = f"cancel(address,{IMMUTABLES_TYPE},address[],bytes[])"
CANCEL_TYPES = ["address", IMMUTABLES_TYPE, "address[]", "bytes[]"]

ARBITRARY_CALLS_SIGNATURE = "arbitraryCalls(address[],bytes[])"
ARBITRARY_CALLS_TYPES = ["address[]", "bytes[]"]


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256(signature)."""
    return bytes(Web3.keccak(text=signature)[:4])


def encode_function_call(signature: str, types: list[str], args: list) -> str:
    """Selector + ABI-encoded arguments as 0x-hex."""
    payload = function_selector(signature) + encode(types, args)
    return "0x" + payload.hex()


class EscrowCallEncoder:
    """Encodes resolver contract calls. Stateless and pure."""

    def deploy_dst(
        self,
        immutables: Immutables,
        src_cancellation_timestamp: int,
        calls: Sequence[ArbitraryCall] = (),
    ) -> str:
        """Encode deployDst with preparatory calls."""
        validate_uint256(src_cancellation_timestamp, "src_cancellation_timestamp")
        targets, payloads = split_calls(list(calls))
        return encode_function_call(
            DEPLOY_DST_SIGNATURE,
            DEPLOY_DST_TYPES,
            [targets, payloads, immutables.build(), src_cancellation_timestamp],
        )

    def withdraw(
        self,
        escrow: str,
        secret: Union[str, bytes],
        immutables: Immutables,
        calls: Sequence[ArbitraryCall] = (),
    ) -> str:
        """Encode withdraw with follow-up calls."""
        targets, payloads = split_calls(list(calls))
        return encode_function_call(
            WITHDRAW_SIGNATURE,
            WITHDRAW_TYPES,
            [
                checksum_address(escrow, "escrow"),
                to_bytes32(secret, "secret"),
                immutables.build(),
                targets,
                payloads,
            ],
        )

    def cancel(
        self,
        escrow: str,
        immutables: Immutables,
        calls: Sequence[ArbitraryCall] = (),
    ) -> str:
        """Encode cancel with follow-up calls."""
        targets, payloads = split_calls(list(calls))
        return encode_function_call(
            CANCEL_SIGNATURE,
            CANCEL_TYPES,
            [checksum_address(escrow, "escrow"), immutables.build(), targets, payloads],
        )

    def arbitrary_calls(self, calls: list[ArbitraryCall]) -> str:
        """Encode a bare batch of owner-authorized calls."""
        if not calls:
            raise InvalidParameterError("arbitraryCalls needs at least one call")
        targets, payloads = split_calls(list(calls))
        return encode_function_call(ARBITRARY_CALLS_SIGNATURE, ARBITRARY_CALLS_TYPES, [targets, payloads])
