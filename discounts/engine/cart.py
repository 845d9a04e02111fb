# discounts/engine/cart.py
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

PRODUCT_VARIANT = "ProductVariant"


@dataclass(frozen=True)
class CartLine:
    amount: Decimal
    merchandise_type: str
    variant_id: Optional[str] = None
    has_any_tag: bool = False

    @property
    def is_product_variant(self) -> bool:
        return self.merchandise_type == PRODUCT_VARIANT


EligibilityFn = Callable[[CartLine], bool]


def has_any_tag(line: CartLine) -> bool:
    return line.has_any_tag


@dataclass(frozen=True)
class CartSnapshot:
    lines: Tuple[CartLine, ...] = field(default_factory=tuple)

    def eligible(self, is_eligible: Optional[EligibilityFn] = None) -> Tuple[Decimal, List[str]]:
        """
        One pass over the lines: returns (cart_total, targets).
        Only product-variant lines with a variant id that pass is_eligible count, for both.
        """
        check = is_eligible or has_any_tag
        total = Decimal("0")
        targets: List[str] = []
        for line in self.lines:
            if not line.is_product_variant or not line.variant_id or not check(line):
                continue
            total += line.amount
            targets.append(line.variant_id)
        return total, targets
