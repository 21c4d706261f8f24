"""Discover recent transactions for an address across several chains using plain JSON-RPC."""

__version__ = "0.1.0"
