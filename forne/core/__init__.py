"""
Core session engine: the card set model, weighted sampling, and the driver.
"""

from .driver import TEST_RESPONSES, Driver
from .sampler import Exhausted, WeightedSampler
from .set import Card, CardSet, CardType, MethodData, SlimCard, normalize_method_data

__all__ = [
    "Card",
    "CardSet",
    "CardType",
    "Driver",
    "Exhausted",
    "MethodData",
    "SlimCard",
    "TEST_RESPONSES",
    "WeightedSampler",
    "normalize_method_data",
]
