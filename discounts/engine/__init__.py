# Tiered cart discount engine

from .cart import CartLine, CartSnapshot
from .config import Configuration, ConfigurationError, dump_configuration, load_configuration
from .decision import ApplicationStrategy, DiscountDecision, EmptyReason
from .resolver import resolve
from .tiers import Tier

__all__ = [
    "ApplicationStrategy",
    "CartLine",
    "CartSnapshot",
    "Configuration",
    "ConfigurationError",
    "DiscountDecision",
    "EmptyReason",
    "Tier",
    "dump_configuration",
    "load_configuration",
    "resolve",
]
