"""Application configuration using pydantic-settings.

Settings are read once at startup and passed explicitly into the quote
service and the app factory; business logic never reads the environment.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bridgequote.fees import DEFAULT_FEE_BPS, resolve_fee_bps


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("api_port", "port"),
        description="API server port",
    )
    frontend_origin: Optional[str] = Field(default=None, description="Extra allowed CORS origin")

    # ======================
    # Fees / Referrer
    # ======================
    fee_bps: int = Field(
        default=DEFAULT_FEE_BPS,
        validation_alias=AliasChoices("fee_bps", "mayan_referrer_bps", "mayan_fee_bps"),
        description="Protocol fee in basis points (50 = 0.5%)",
    )
    referrer_address: Optional[str] = Field(
        default=None, description="Referrer identity sent to the route provider"
    )
    referrer_bps: int = Field(
        default=DEFAULT_FEE_BPS, description="Referrer fee rate sent to the route provider"
    )

    # ======================
    # Token Whitelist
    # ======================
    supported_networks: str = Field(
        default="solana,ethereum,bsc,arbitrum,base",
        description="Comma-separated list of enabled networks",
    )
    default_token_symbol: str = Field(
        default="USDC", description="Token used when a request does not name one"
    )

    # ======================
    # Route Provider
    # ======================
    dry_run: bool = Field(default=True, description="Use simulated routes instead of the live API")
    price_api_url: str = Field(
        default="https://price-api.mayan.finance/v3/quote",
        description="Route provider quote endpoint",
    )
    upstream_timeout_seconds: float = Field(
        default=30.0, description="HTTP timeout for the route provider"
    )
    quote_timeout_seconds: float = Field(
        default=45.0, description="Timeout the HTTP layer imposes around a quote"
    )
    refuel_gas_drop: Decimal = Field(
        default=Decimal("0.005"),
        ge=0,
        description="Destination gas drop (native units) requested when refuel is enabled",
    )
    solana_program: Optional[str] = Field(default=None, description="Solana program id")
    forwarder_address: Optional[str] = Field(default=None, description="EVM forwarder address")

    @field_validator("fee_bps", "referrer_bps", mode="before")
    @classmethod
    def _fallback_fee_bps(cls, value: Any) -> int:
        return resolve_fee_bps(value)

    @property
    def networks(self) -> list[str]:
        """Parse supported networks into a list."""
        if not self.supported_networks:
            return []
        return [n.strip().lower() for n in self.supported_networks.split(",") if n.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Allowed browser origins."""
        origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ]
        if self.frontend_origin:
            origins.append(self.frontend_origin)
        return origins

    def get_safe_dict(self) -> dict:
        """Return settings dict with identities redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "fee_bps": self.fee_bps,
            "referrer_address": "***" if self.referrer_address else "(not set)",
            "referrer_bps": self.referrer_bps,
            "networks": self.networks,
            "default_token_symbol": self.default_token_symbol,
            "provider": {
                "price_api_url": self.price_api_url,
                "timeout_seconds": self.upstream_timeout_seconds,
                "solana_program": "***" if self.solana_program else "(not set)",
                "forwarder_address": "***" if self.forwarder_address else "(not set)",
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
