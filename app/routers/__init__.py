# Routers package for the tiered discount service

from . import discounts

__all__ = [
    "discounts",
]
