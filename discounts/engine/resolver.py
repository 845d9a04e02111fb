# discounts/engine/resolver.py
from __future__ import annotations
from typing import Optional

from .cart import CartSnapshot, EligibilityFn
from .config import Configuration
from .decision import ApplicationStrategy, DiscountDecision, EmptyReason, empty_decision
from .messages import format_number, render_message, round2
from .tiers import sort_tiers


def resolve(
    configuration: Configuration,
    cart: CartSnapshot,
    is_eligible: Optional[EligibilityFn] = None,
) -> DiscountDecision:
    """
    Pick the tier for the cart's eligible total and build the discount decision.

    Tiers are sorted by `from` but not validated: with overlapping tiers the
    lowest `from` wins. Every "no discount" outcome is the same empty decision,
    only the reason differs.
    """
    if not configuration.is_tiered or not configuration.tiers:
        return empty_decision(EmptyReason.CONFIGURATION_MISMATCH)

    tiers = sort_tiers(configuration.tiers)
    cart_total, targets = cart.eligible(is_eligible)

    index = next((i for i, t in enumerate(tiers) if t.contains(cart_total)), None)

    if not targets:
        return empty_decision(EmptyReason.NO_ELIGIBLE_TARGET)
    if index is None:
        return empty_decision(EmptyReason.NO_MATCHING_TIER)

    tier = tiers[index]
    if tier.discount <= 0:
        return empty_decision(EmptyReason.NON_POSITIVE_DISCOUNT)

    messages = [render_message(configuration.message, {"percentage": tier.discount})]

    if index + 1 < len(tiers) and configuration.next_message:
        next_tier = tiers[index + 1]
        messages.append(
            render_message(
                configuration.next_message,
                {
                    "percentage": next_tier.discount,
                    "remaining": round2(next_tier.from_ - cart_total),
                },
            )
        )

    return DiscountDecision(
        targets=tuple(targets),
        percentage=format_number(tier.discount),
        message=" ".join(messages),
        strategy=ApplicationStrategy.MAXIMUM,
    )
