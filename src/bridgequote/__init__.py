"""Cross-chain transfer quote engine."""

__version__ = "0.1.0"
