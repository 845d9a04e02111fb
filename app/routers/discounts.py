# app/routers/discounts.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from app.schemas.discount import (
    FunctionInput,
    FunctionResult,
    TieredConfigurationIn,
    TieredConfigurationOut,
    ValidationOut,
)
from app.services.discount_editor import append_tier, validate_submission
from app.services.discount_function import run_discount_function
from discounts.engine import ConfigurationError, dump_configuration
from discounts.engine.editor import TierValidationError, new_configuration

router = APIRouter(prefix="/discounts", tags=["discounts"])


def _invalid(e: TierValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "errors": e.messages,
            "issues": [
                {"index": i.index, "field": i.field, "code": i.code, "message": i.message}
                for i in e.issues
            ],
        },
    )


# ----------------------------
# 1) Discount function
# ----------------------------
@router.post("/function/run", response_model=FunctionResult)
def run_function(payload: FunctionInput) -> FunctionResult:
    try:
        return run_discount_function(payload)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ----------------------------
# 2) Editor
# ----------------------------
@router.get("/tiered/defaults", response_model=TieredConfigurationOut)
def tiered_defaults():
    return dump_configuration(new_configuration())


@router.post("/tiered/validate", response_model=ValidationOut)
def validate_tiered(payload: TieredConfigurationIn):
    try:
        configuration = validate_submission(payload)
    except TierValidationError as e:
        raise _invalid(e)
    return {"valid": True, "configuration": dump_configuration(configuration)}


@router.post("/tiered/tiers", response_model=TieredConfigurationOut)
def add_tiered_tier(payload: TieredConfigurationIn):
    try:
        return append_tier(payload)
    except TierValidationError as e:
        raise _invalid(e)
