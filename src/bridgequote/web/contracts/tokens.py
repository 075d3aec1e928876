"""Token whitelist contracts."""

from pydantic import BaseModel, Field

from bridgequote.tokens import TokenDescriptor


class TokenInfo(BaseModel):
    """Information about a whitelisted token."""

    network: str = Field(..., description="Network name (solana, ethereum, ...)")
    symbol: str = Field(..., description="Token symbol")
    on_chain_id: str = Field(..., description="Mint or contract address")
    decimals: int = Field(..., description="Token decimals")
    is_native: bool = Field(default=False, description="Whether this is the network's native asset")

    @classmethod
    def from_descriptor(cls, token: TokenDescriptor) -> "TokenInfo":
        return cls(
            network=token.network,
            symbol=token.symbol,
            on_chain_id=token.on_chain_id,
            decimals=token.decimals,
            is_native=token.is_native,
        )


class TokenListResponse(BaseModel):
    """Response containing the token whitelist."""

    success: bool = True
    networks: list[str] = Field(default_factory=list)
    tokens: list[TokenInfo] = Field(default_factory=list)
    total: int = Field(default=0, description="Total number of tokens")
