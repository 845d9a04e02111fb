# discounts/engine/messages.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping

CENTS = Decimal("0.01")


def round2(x: Decimal) -> Decimal:
    return x.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_number(x: Any) -> str:
    """Plain string form of a number: 5 -> "5", 7.50 -> "7.5", never exponent notation."""
    if not isinstance(x, Decimal):
        if isinstance(x, str):
            return x
        x = Decimal(str(x))
    if x == 0:
        return "0"
    return format(x.normalize(), "f")


def render_message(template: str, replaces: Mapping[str, Any]) -> str:
    """Replace every {{key}} in template with the string form of replaces[key]."""
    for key, value in replaces.items():
        template = template.replace("{{" + key + "}}", format_number(value))
    return template
