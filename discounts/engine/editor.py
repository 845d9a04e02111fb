# discounts/engine/editor.py
"""
Edit-time rules for tier lists.

The resolver trusts whatever it gets, so everything that makes a tier list
invalid has to be caught here, before the configuration is stored.
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_MESSAGE, DEFAULT_NEXT_MESSAGE, TIERED, Configuration
from .tiers import UNBOUNDED, Tier, to_decimal

TIER_STEP = Decimal("0.01")

MSG_UNBOUNDED_EXISTS = "There is a tier that includes unlimited for cart total upto."
MSG_ZERO_UPTO = "The cart total upto cannot be zero."
MSG_FROM_AFTER_TO = "The cart total from cannot be less than cart total upto."
MSG_LAST_TIER = "At least one tier is required."
MSG_NEGATIVE_FROM = "The cart total from cannot be negative."
MSG_DISCOUNT_RANGE = "The discount must be more than 0 and at most 100."


@dataclass(frozen=True)
class TierIssue:
    index: Optional[int]  # None = list-level
    field: Optional[str]
    code: str
    message: str


class TierValidationError(ValueError):
    def __init__(self, issues: List[TierIssue]):
        self.issues = issues
        super().__init__("; ".join(i.message for i in issues))

    @property
    def messages(self) -> List[str]:
        return [i.message for i in self.issues]


def parse_tier(raw: Dict[str, Any], index: Optional[int] = None) -> Tier:
    """Form values (str or number) -> Tier. Every field must parse as a number."""
    issues: List[TierIssue] = []
    values: Dict[str, Decimal] = {}
    for name in ("from", "to", "discount"):
        try:
            values[name] = to_decimal(raw.get(name))
        except ValueError:
            issues.append(
                TierIssue(index, name, "INVALID_NUMBER", f"Tier field '{name}' must be a valid number.")
            )
    if issues:
        raise TierValidationError(issues)

    to = values["to"]
    return Tier(
        from_=values["from"],
        to=None if to == UNBOUNDED else to,
        discount=values["discount"],
    )


def parse_tiers(raw_tiers: Sequence[Dict[str, Any]]) -> List[Tier]:
    issues: List[TierIssue] = []
    tiers: List[Tier] = []
    for i, raw in enumerate(raw_tiers):
        try:
            tiers.append(parse_tier(raw, index=i))
        except TierValidationError as e:
            issues.extend(e.issues)
    if issues:
        raise TierValidationError(issues)
    return tiers


def validate_tiers(tiers: Sequence[Tier], adding: bool = False) -> None:
    """
    Raises TierValidationError when:
      - a tier's from is negative or its discount is outside (0, 100]
      - a tier's upto is 0
      - a bounded upto is <= from
      - adding is True and an unbounded tier already exists
    Editing or removing an unbounded tier is never blocked, only adding a second one.
    """
    issues: List[TierIssue] = []
    has_unbounded = False

    for i, t in enumerate(tiers):
        if t.from_ < 0:
            issues.append(TierIssue(i, "from", "NEGATIVE_FROM", MSG_NEGATIVE_FROM))
        if not 0 < t.discount <= 100:
            issues.append(TierIssue(i, "discount", "DISCOUNT_OUT_OF_RANGE", MSG_DISCOUNT_RANGE))
        if t.unbounded:
            has_unbounded = True
            continue
        if t.to == 0:
            issues.append(TierIssue(i, "to", "ZERO_UPTO", MSG_ZERO_UPTO))
        elif t.to <= t.from_:
            issues.append(TierIssue(i, "to", "INVALID_RANGE", MSG_FROM_AFTER_TO))

    if adding and has_unbounded:
        issues.insert(0, TierIssue(None, "to", "UNBOUNDED_EXISTS", MSG_UNBOUNDED_EXISTS))

    if issues:
        raise TierValidationError(issues)


def add_tier(tiers: Sequence[Tier]) -> List[Tier]:
    """Append a new unbounded tier that starts just above the previous tier's upto."""
    validate_tiers(tiers, adding=True)

    start = Decimal("0")
    if tiers:
        previous = tiers[-1]
        if previous.to is not None and previous.to > 0:
            start = previous.to + TIER_STEP

    return [*tiers, Tier(from_=start, to=None, discount=Decimal("1"))]


def remove_tier(tiers: Sequence[Tier], index: int) -> List[Tier]:
    if len(tiers) <= 1:
        raise TierValidationError([TierIssue(index, None, "LAST_TIER", MSG_LAST_TIER)])
    if not 0 <= index < len(tiers):
        raise IndexError(f"Tier index out of range: {index}")
    return [t for i, t in enumerate(tiers) if i != index]


def new_configuration() -> Configuration:
    return Configuration(
        tiers=(Tier(from_=Decimal("0"), to=None, discount=Decimal("1")),),
        type=TIERED,
        message=DEFAULT_MESSAGE,
        next_message=DEFAULT_NEXT_MESSAGE,
    )


def build_configuration(
    tiers: Sequence[Tier],
    message: Optional[str] = None,
    next_message: Optional[str] = None,
) -> Configuration:
    """Validate and freeze an editor submission."""
    validate_tiers(tiers)
    return Configuration(
        tiers=tuple(tiers),
        type=TIERED,
        message=message or DEFAULT_MESSAGE,
        next_message=next_message or None,
    )
