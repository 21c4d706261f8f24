"""Pricing services for USD value display."""

from chain_tx_tracker.pricing.placeholder import PlaceholderPricing

__all__ = [
    "PlaceholderPricing",
]
