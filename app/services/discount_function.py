# app/services/discount_function.py
from __future__ import annotations

import time
from typing import Optional

from app.core.logging_config import logger
from app.core.settings import settings
from app.observability.metrics import decision_counter, evaluation_latency_hist
from app.schemas.discount import FunctionInput, FunctionResult
from discounts.engine import (
    CartLine,
    CartSnapshot,
    Configuration,
    ConfigurationError,
    DiscountDecision,
    load_configuration,
    resolve,
)


def build_cart(payload: FunctionInput) -> CartSnapshot:
    lines = []
    for line in payload.cart.lines:
        merchandise = line.merchandise
        lines.append(
            CartLine(
                amount=line.cost.totalAmount.amount,
                merchandise_type=merchandise.typename,
                variant_id=merchandise.id,
                has_any_tag=bool(merchandise.product and merchandise.product.hasAnyTag),
            )
        )
    return CartSnapshot(lines=tuple(lines))


def metafield_value(payload: FunctionInput) -> Optional[str]:
    node = payload.discountNode
    if node is None or node.metafield is None:
        return None
    return node.metafield.value


def _record(outcome: str, started: Optional[float] = None) -> None:
    if not settings.METRICS_ENABLED:
        return
    decision_counter.labels(outcome=outcome).inc()
    if started is not None:
        evaluation_latency_hist.observe(time.perf_counter() - started)


def evaluate(payload: FunctionInput) -> DiscountDecision:
    """
    Function input -> typed configuration + cart -> decision.
    Raises ConfigurationError when the metafield holds something that is not a configuration.
    """
    t0 = time.perf_counter()

    try:
        configuration: Configuration = load_configuration(metafield_value(payload))
    except ConfigurationError as e:
        _record("invalid_configuration")
        logger.warning("discount_configuration_invalid", error=str(e))
        raise

    decision = resolve(configuration, build_cart(payload))
    _record(decision.outcome, t0)

    bound = logger.bind(
        outcome=decision.outcome,
        line_count=len(payload.cart.lines),
        target_count=len(decision.targets),
        tier_count=len(configuration.tiers),
    )
    if decision.applies:
        bound.info("discount_applied", percentage=decision.percentage)
    elif settings.LOG_EMPTY_DECISION_INPUT:
        bound.warning("discount_not_applied", input=payload.model_dump(mode="json", by_alias=True))
    else:
        bound.debug("discount_not_applied")

    return decision


def run_discount_function(payload: FunctionInput) -> FunctionResult:
    return FunctionResult.model_validate(evaluate(payload).to_wire())
