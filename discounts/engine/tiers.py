# discounts/engine/tiers.py
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

# Wire encoding of "no upper limit" for tier.to
UNBOUNDED = -1


def to_decimal(v: Any) -> Decimal:
    if isinstance(v, Decimal):
        return v
    if isinstance(v, bool) or v is None:
        raise ValueError(f"Not a number: {v!r}")
    try:
        d = Decimal(str(v).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {v!r}")
    if not d.is_finite():
        raise ValueError(f"Not a number: {v!r}")
    return d


@dataclass(frozen=True)
class Tier:
    """Cart-total range [from_, to] mapped to a discount percentage. to=None is unbounded."""

    from_: Decimal
    to: Optional[Decimal]
    discount: Decimal

    @property
    def unbounded(self) -> bool:
        return self.to is None

    def contains(self, total: Decimal) -> bool:
        return self.from_ <= total and (self.to is None or self.to >= total)

    @classmethod
    def from_wire(cls, raw: Dict[str, Any]) -> "Tier":
        to = to_decimal(raw["to"])
        return cls(
            from_=to_decimal(raw["from"]),
            to=None if to == UNBOUNDED else to,
            discount=to_decimal(raw["discount"]),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "from": _json_number(self.from_),
            "to": UNBOUNDED if self.to is None else _json_number(self.to),
            "discount": _json_number(self.discount),
        }


def _json_number(d: Decimal):
    # ints stay ints on the wire, everything else becomes a float
    if d == d.to_integral_value():
        return int(d)
    return float(d)


def sort_tiers(tiers) -> list[Tier]:
    return sorted(tiers, key=lambda t: t.from_)
