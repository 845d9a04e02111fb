# app/services/discount_editor.py
from __future__ import annotations

from typing import Any, Dict

from app.core.logging_config import logger
from app.core.settings import settings
from app.observability.metrics import validation_counter
from app.schemas.discount import TieredConfigurationIn
from discounts.engine import Configuration, dump_configuration
from discounts.engine.config import DEFAULT_MESSAGE
from discounts.engine.editor import (
    TierValidationError,
    add_tier,
    build_configuration,
    parse_tiers,
    validate_tiers,
)


def _record(result: str) -> None:
    if settings.METRICS_ENABLED:
        validation_counter.labels(result=result).inc()


def validate_submission(payload: TieredConfigurationIn) -> Configuration:
    """Editor submit: parse + validate the tiers and freeze them into a Configuration."""
    try:
        tiers = parse_tiers(payload.raw_tiers())
        if payload.adding:
            validate_tiers(tiers, adding=True)
        configuration = build_configuration(tiers, payload.message, payload.next_message)
    except TierValidationError as e:
        _record("invalid")
        logger.info("tiers_invalid", errors=e.messages)
        raise

    _record("valid")
    return configuration


def append_tier(payload: TieredConfigurationIn) -> Dict[str, Any]:
    """'+ Add another tier': returns the submission with one new unbounded tier appended."""
    try:
        tiers = add_tier(parse_tiers(payload.raw_tiers()))
    except TierValidationError as e:
        _record("invalid")
        logger.info("tiers_invalid", errors=e.messages, adding=True)
        raise

    _record("valid")
    configuration = Configuration(
        tiers=tuple(tiers),
        message=payload.message or DEFAULT_MESSAGE,
        next_message=payload.next_message or None,
    )
    return dump_configuration(configuration)
