# discounts/engine/decision.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ApplicationStrategy(str, Enum):
    FIRST = "FIRST"
    MAXIMUM = "MAXIMUM"


class EmptyReason(str, Enum):
    CONFIGURATION_MISMATCH = "configuration_mismatch"
    NO_ELIGIBLE_TARGET = "no_eligible_target"
    NO_MATCHING_TIER = "no_matching_tier"
    NON_POSITIVE_DISCOUNT = "non_positive_discount"


@dataclass(frozen=True)
class DiscountDecision:
    targets: Tuple[str, ...] = field(default_factory=tuple)
    percentage: Optional[str] = None
    message: str = ""
    strategy: ApplicationStrategy = ApplicationStrategy.FIRST
    reason: Optional[EmptyReason] = None  # set only on the empty decision

    @property
    def applies(self) -> bool:
        return self.reason is None

    @property
    def outcome(self) -> str:
        return "applied" if self.reason is None else self.reason.value

    def to_wire(self) -> dict:
        if not self.applies:
            return {"discountApplicationStrategy": self.strategy.value, "discounts": []}
        return {
            "discountApplicationStrategy": self.strategy.value,
            "discounts": [
                {
                    # platform Target shape: {"productVariant": {"id": ...}}
                    "targets": [{"productVariant": {"id": t}} for t in self.targets],
                    "value": {"percentage": {"value": self.percentage}},
                    "message": self.message,
                }
            ],
        }


def empty_decision(reason: EmptyReason) -> DiscountDecision:
    return DiscountDecision(reason=reason)
