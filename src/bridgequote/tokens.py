"""Token whitelist and registry.

Maps (network, symbol) to the on-chain token identifier and decimal
precision used by the upstream route provider.

Supported networks: solana, ethereum, bsc, arbitrum, base.
Supported symbols: USDC, USDT, ETH, SOL (not every symbol on every network).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from bridgequote.amounts import MAX_DECIMALS
from bridgequote.errors import UnsupportedTokenError

logger = logging.getLogger(__name__)

# Native assets are addressed with the zero address by the route provider
NATIVE_TOKEN_ID = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class TokenDescriptor:
    """A whitelisted token on one network."""

    network: str
    symbol: str
    on_chain_id: str
    decimals: int
    is_native: bool = False

    def __post_init__(self):
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise ValueError(
                f"{self.symbol} on {self.network}: decimals must be 0-{MAX_DECIMALS}, got {self.decimals}"
            )

    @property
    def key(self) -> tuple[str, str]:
        return (self.network, self.symbol)


# ======================
# Token Whitelist
# ======================

TOKENS: list[TokenDescriptor] = [
    # Solana
    TokenDescriptor("solana", "USDC", "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", 6),
    TokenDescriptor("solana", "USDT", "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", 6),
    TokenDescriptor("solana", "SOL", NATIVE_TOKEN_ID, 9, is_native=True),
    TokenDescriptor("solana", "ETH", "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs", 8),  # Wormhole ETH

    # Ethereum
    TokenDescriptor("ethereum", "USDC", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6),
    TokenDescriptor("ethereum", "USDT", "0xdAC17F958D2ee523a2206206994597C13D831ec7", 6),
    TokenDescriptor("ethereum", "ETH", NATIVE_TOKEN_ID, 18, is_native=True),

    # BNB Smart Chain (Binance-peg stablecoins use 18 decimals)
    TokenDescriptor("bsc", "USDC", "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d", 18),
    TokenDescriptor("bsc", "USDT", "0x55d398326f99059fF775485246999027B3197955", 18),
    TokenDescriptor("bsc", "ETH", "0x2170Ed0880ac9A755fd29B2688956BD959F933F8", 18),

    # Arbitrum One
    TokenDescriptor("arbitrum", "USDC", "0xaf88d065e77c8cC2239327C5EDb3A432268e5831", 6),
    TokenDescriptor("arbitrum", "USDT", "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9", 6),
    TokenDescriptor("arbitrum", "ETH", NATIVE_TOKEN_ID, 18, is_native=True),

    # Base
    TokenDescriptor("base", "USDC", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", 6),
    TokenDescriptor("base", "USDT", "0xfde4C96c8593536E31F229EA8f37b2ADa2699bb2", 6),
    TokenDescriptor("base", "ETH", NATIVE_TOKEN_ID, 18, is_native=True),
]


class TokenRegistry:
    """Read-only lookup of whitelisted tokens.

    Built once at startup and shared by every request.
    """

    def __init__(
        self,
        tokens: Iterable[TokenDescriptor] = TOKENS,
        networks: Optional[Iterable[str]] = None,
    ):
        """Initialize registry.

        Args:
            tokens: Token descriptors to register
            networks: Optional network whitelist; tokens on other networks are skipped
        """
        allowed = {n.strip().lower() for n in networks} if networks is not None else None
        self._tokens: dict[tuple[str, str], TokenDescriptor] = {}

        for token in tokens:
            key = (token.network.lower(), token.symbol.upper())
            if allowed is not None and key[0] not in allowed:
                continue
            if key in self._tokens:
                raise ValueError(f"Duplicate token entry: {token.symbol} on {token.network}")
            self._tokens[key] = token

        logger.debug(f"Token registry loaded with {len(self._tokens)} tokens on {len(self.networks)} networks")

    @classmethod
    def from_settings(cls, settings) -> "TokenRegistry":
        """Create registry restricted to the configured networks."""
        return cls(TOKENS, networks=settings.networks)

    @property
    def networks(self) -> list[str]:
        """Supported network names, in whitelist order."""
        return list(dict.fromkeys(network for network, _ in self._tokens))

    @property
    def symbols(self) -> list[str]:
        """Supported token symbols, in whitelist order."""
        return list(dict.fromkeys(symbol for _, symbol in self._tokens))

    def tokens(self) -> list[TokenDescriptor]:
        """All registered tokens."""
        return list(self._tokens.values())

    def supports(self, network: str, symbol: str) -> bool:
        return (network.strip().lower(), symbol.strip().upper()) in self._tokens

    def lookup(self, network: str, symbol: str) -> TokenDescriptor:
        """Get the descriptor for a token on a network.

        Raises:
            UnsupportedTokenError: If the pair is not whitelisted
        """
        token = self._tokens.get((network.strip().lower(), symbol.strip().upper()))
        if token is None:
            raise UnsupportedTokenError(network, symbol)
        return token
