"""Input validation shared by the client, builders and composer.

All checks run synchronously and raise InvalidParameterError, so bad
input never reaches the aggregator.
"""

from typing import Union

from web3 import Web3

from fusion_resolver.errors import InvalidParameterError

# Native asset sentinel used by the aggregator and escrow immutables
NATIVE_TOKEN = "0x0000000000000000000000000000000000000000"

MAX_UINT256 = 2**256 - 1
MAX_SLIPPAGE_BPS = 5000


def is_native(token: str) -> bool:
    """Check whether an address is the native-asset sentinel."""
    return token.lower() == NATIVE_TOKEN


def checksum_address(address: str, field: str = "address") -> str:
    """Validate a 20-byte hex address and return its checksummed form."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise InvalidParameterError(f"Malformed {field}: {address!r}")
    return Web3.to_checksum_address(address)


def validate_amount(amount: int, field: str = "amount") -> int:
    """Validate a positive uint256 amount in smallest token units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidParameterError(
            f"{field} must be an integer in smallest units, got {type(amount).__name__}"
        )
    if amount <= 0:
        raise InvalidParameterError(f"{field} must be positive, got {amount}")
    if amount > MAX_UINT256:
        raise InvalidParameterError(f"{field} exceeds uint256: {amount}")
    return amount


def validate_slippage(slippage_bps: int) -> int:
    """Validate slippage in basis points, allowed range (0, 5000]."""
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise InvalidParameterError(f"slippage_bps must be an integer, got {slippage_bps!r}")
    if not 0 < slippage_bps <= MAX_SLIPPAGE_BPS:
        raise InvalidParameterError(
            f"slippage_bps must be in (0, {MAX_SLIPPAGE_BPS}], got {slippage_bps}"
        )
    return slippage_bps


def to_bytes32(value: Union[str, bytes], field: str = "value") -> bytes:
    """Convert a 0x-hex string or raw bytes to exactly 32 bytes."""
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidParameterError(f"{field} is not valid hex: {value!r}") from e
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise InvalidParameterError(f"{field} must be hex string or bytes")

    if len(raw) != 32:
        raise InvalidParameterError(f"{field} must be 32 bytes, got {len(raw)}")
    return raw


def to_hex_data(value: Union[str, bytes], field: str = "data") -> str:
    """Validate calldata and return it 0x-prefixed, otherwise unchanged."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if not isinstance(value, str):
        raise InvalidParameterError(f"{field} must be hex string or bytes")
    text = value[2:] if value.startswith(("0x", "0X")) else value
    if len(text) % 2:
        raise InvalidParameterError(f"{field} has odd hex length")
    try:
        bytes.fromhex(text)
    except ValueError as e:
        raise InvalidParameterError(f"{field} is not valid hex: {value[:20]!r}") from e
    return "0x" + text


def validate_uint256(value: int, field: str = "value") -> int:
    """Validate a non-negative integer that fits in uint256."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_UINT256:
        raise InvalidParameterError(f"{field} must be a uint256, got {value!r}")
    return value
