"""Call builders for conversion steps.

Both builders are pure: no I/O, deterministic for identical inputs.
"""

import logging
from typing import Union

from fusion_resolver.contracts.calls import ArbitraryCall, CallKind
from fusion_resolver.errors import InvalidParameterError
from fusion_resolver.utils.validation import (
    MAX_UINT256,
    checksum_address,
    is_native,
    to_hex_data,
)

logger = logging.getLogger(__name__)


# ERC-20 ABI fragments
ERC20_APPROVE_SELECTOR = "0x095ea7b3"  # approve(address,uint256)


def encode_approve(spender: str, amount: int) -> str:
    """Encode approve(spender, amount): selector + 32-byte spender + 32-byte amount."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidParameterError(f"Approval amount must be an integer, got {amount!r}")
    if not 0 <= amount <= MAX_UINT256:
        raise InvalidParameterError(f"Approval amount out of uint256 range: {amount}")

    spender_padded = checksum_address(spender, "spender").lower().replace("0x", "").zfill(64)
    amount_hex = hex(amount)[2:].zfill(64)
    return f"{ERC20_APPROVE_SELECTOR}{spender_padded}{amount_hex}"


def build_approval_call(token: str, spender: str, amount: int) -> ArbitraryCall:
    """Build an ERC-20 approval call executed by the resolver.

    Args:
        token: Token contract address
        spender: Address allowed to pull the tokens (router or factory)
        amount: Allowance in smallest units, up to 2**256 - 1

    Returns:
        ArbitraryCall targeting the token contract
    """
    token_address = checksum_address(token, "token")
    if is_native(token_address):
        raise InvalidParameterError("Native asset cannot be approved")

    return ArbitraryCall(
        target=token_address,
        data=encode_approve(spender, amount),
        kind=CallKind.APPROVE,
    )


def build_swap_call(router_address: str, swap_calldata: Union[str, bytes]) -> ArbitraryCall:
    """Wrap aggregator calldata for its router, passed through untouched."""
    return ArbitraryCall(
        target=checksum_address(router_address, "router_address"),
        data=to_hex_data(swap_calldata, "swap_calldata"),
        kind=CallKind.SWAP,
    )
