"""Utility helpers."""

from fusion_resolver.utils.validation import (
    MAX_UINT256,
    NATIVE_TOKEN,
    checksum_address,
    is_native,
    to_bytes32,
    to_hex_data,
    validate_amount,
    validate_slippage,
    validate_uint256,
)

__all__ = [
    "MAX_UINT256",
    "NATIVE_TOKEN",
    "checksum_address",
    "is_native",
    "to_bytes32",
    "to_hex_data",
    "validate_amount",
    "validate_slippage",
    "validate_uint256",
]
