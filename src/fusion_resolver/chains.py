"""Chain configuration, token registry and resolver address table.

Known chains:
- Ethereum mainnet (source side of most orders)
- Etherlink testnet / mainnet (destination side, 3route aggregator)

Both tables are read-only after construction, so one facade instance can
serve concurrent operations without locking.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from fusion_resolver.errors import ConfigurationError
from fusion_resolver.utils.validation import checksum_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenInfo:
    """Token metadata used for introspection only."""

    symbol: str
    decimals: int
    address: Optional[str] = None
    is_native: bool = False


@dataclass
class ChainConfig:
    """Configuration for an EVM chain."""

    name: str
    chain_id: int
    native_symbol: str
    tokens: dict[str, TokenInfo] = field(default_factory=dict)


# ======================
# Chain Configurations
# ======================

ETHEREUM = 1
ETHERLINK_TESTNET = 128123
ETHERLINK_MAINNET = 42793

CHAINS: dict[int, ChainConfig] = {
    ETHEREUM: ChainConfig(
        name="Ethereum",
        chain_id=ETHEREUM,
        native_symbol="ETH",
        tokens={
            "USDC": TokenInfo("USDC", 6, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
            "WETH": TokenInfo("WETH", 18, "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),
        },
    ),
    ETHERLINK_TESTNET: ChainConfig(
        name="Etherlink Testnet",
        chain_id=ETHERLINK_TESTNET,
        native_symbol="XTZ",
        tokens={
            "XTZ": TokenInfo("XTZ", 18, "0x0000000000000000000000000000000000000000", is_native=True),
            "USDC": TokenInfo("USDC", 6, "0x4C2AA252BEe766D3399850569713b55178934849"),
            "WETH": TokenInfo("WETH", 18, "0x86932ff467A7e055d679F7578A0A4F96Be287861"),
            "WBTC": TokenInfo("WBTC", 18, "0x92d81a25F6f46CD52B8230ef6ceA5747Bc3826Db"),
            "WXTZ": TokenInfo("WXTZ", 18, "0xB1Ea698633d57705e93b0E40c1077d46CD6A51d8"),
        },
    ),
    ETHERLINK_MAINNET: ChainConfig(
        name="Etherlink Mainnet",
        chain_id=ETHERLINK_MAINNET,
        native_symbol="XTZ",
        tokens={
            "XTZ": TokenInfo("XTZ", 18, "0x0000000000000000000000000000000000000000", is_native=True),
            "WXTZ": TokenInfo("WXTZ", 18, "0xc9b53ab2679f573e480d01e0f49e2b5cfb7a3eab"),
            "USDC": TokenInfo("USDC", 6, "0x796Ea11Fa2dD751eD01b53C372fFDB4AAa8f00F9"),
            "USDT": TokenInfo("USDT", 6, "0x2C03058C8AFC06713be23e58D2febC8337dbfE6A"),
            "WETH": TokenInfo("WETH", 18, "0xfc24f770F94edBca6D6f885E12d4317320BcB401"),
            "WBTC": TokenInfo("WBTC", 8, "0xbFc94CD2B1E55999Cfc7347a9313e88702B83d0F"),
        },
    ),
}


class TokenRegistry:
    """Lowercased token address -> TokenInfo lookup.

    Used for support checks and log context; swap amounts always come
    from the aggregator.
    """

    def __init__(self, tokens: Optional[Mapping[str, TokenInfo]] = None):
        entries = {}
        for address, info in (tokens or {}).items():
            entries[address.lower()] = info
        self._tokens: Mapping[str, TokenInfo] = MappingProxyType(entries)

    @classmethod
    def from_symbols(cls, table: Mapping[str, Mapping]) -> "TokenRegistry":
        """Build from a symbol -> {address, decimals} table."""
        tokens = {}
        for symbol, entry in table.items():
            address = checksum_address(entry["address"], f"{symbol} address")
            tokens[address] = TokenInfo(
                symbol=symbol,
                decimals=int(entry["decimals"]),
                address=address,
                is_native=bool(entry.get("is_native", False)),
            )
        return cls(tokens)

    @classmethod
    def for_chains(cls, chain_ids: Iterable[int]) -> "TokenRegistry":
        """Merge the token tables of known chains; unknown chains contribute nothing."""
        tokens = {}
        for chain_id in chain_ids:
            chain = CHAINS.get(chain_id)
            if chain is None:
                logger.debug(f"No token table for chain {chain_id}")
                continue
            tokens.update({info.address: info for info in chain.tokens.values()})
        return cls(tokens)

    def __contains__(self, address: str) -> bool:
        return self.is_supported(address)

    def __len__(self) -> int:
        return len(self._tokens)

    def is_supported(self, address: str) -> bool:
        """Check if a token address is registered (case-insensitive)."""
        return address.lower() in self._tokens

    def get_token_info(self, address: str) -> Optional[TokenInfo]:
        """Get token info, or None when unregistered."""
        return self._tokens.get(address.lower())

    def describe(self, address: str) -> str:
        """Human-readable label for logs: symbol when known, else address."""
        info = self.get_token_info(address)
        return info.symbol if info else address


class ChainAddressTable:
    """Per-chain resolver (and escrow factory) contract addresses."""

    def __init__(
        self,
        resolvers: Mapping[int, str],
        escrow_factories: Optional[Mapping[int, str]] = None,
    ):
        self._resolvers: Mapping[int, str] = MappingProxyType(
            {int(chain_id): checksum_address(address, f"resolver on chain {chain_id}")
             for chain_id, address in resolvers.items()}
        )
        self._factories: Mapping[int, str] = MappingProxyType(
            {int(chain_id): checksum_address(address, f"escrow factory on chain {chain_id}")
             for chain_id, address in (escrow_factories or {}).items()}
        )

    @property
    def chain_ids(self) -> list[int]:
        return sorted(self._resolvers)

    def get_resolver(self, chain_id: int) -> str:
        """Resolver contract address on a chain."""
        address = self._resolvers.get(chain_id)
        if not address:
            raise ConfigurationError(f"No resolver address configured for chain {chain_id}")
        return address

    def get_escrow_factory(self, chain_id: int) -> str:
        """Escrow factory address on a chain."""
        address = self._factories.get(chain_id)
        if not address:
            raise ConfigurationError(f"No escrow factory address configured for chain {chain_id}")
        return address
