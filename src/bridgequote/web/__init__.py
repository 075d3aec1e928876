"""Web boundary layer for the quote API.

This layer translates query strings into quote requests and quote results
into JSON. It never signs or broadcasts transactions, and it never echoes
raw upstream errors to the client.
"""

__all__ = [
    "contracts",
    "controllers",
]
