# app/schemas/discount.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------
# Function input (subset of the platform input query)
# ----------------------------
class MoneyIn(BaseModel):
    amount: Decimal


class CostIn(BaseModel):
    totalAmount: MoneyIn


class ProductIn(BaseModel):
    hasAnyTag: bool = False


class MerchandiseIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    typename: str = Field(alias="__typename")
    id: Optional[str] = None
    product: Optional[ProductIn] = None


class CartLineIn(BaseModel):
    cost: CostIn
    merchandise: MerchandiseIn


class CartIn(BaseModel):
    lines: List[CartLineIn] = Field(default_factory=list)


class MetafieldIn(BaseModel):
    value: Optional[str] = None


class DiscountNodeIn(BaseModel):
    metafield: Optional[MetafieldIn] = None


class FunctionInput(BaseModel):
    cart: CartIn
    discountNode: Optional[DiscountNodeIn] = None


# ----------------------------
# Function result
# ----------------------------
class ProductVariantOut(BaseModel):
    id: str


class TargetOut(BaseModel):
    productVariant: ProductVariantOut


class PercentageOut(BaseModel):
    value: str


class ValueOut(BaseModel):
    percentage: PercentageOut


class DiscountOut(BaseModel):
    targets: List[TargetOut]
    value: ValueOut
    message: str


class FunctionResult(BaseModel):
    discountApplicationStrategy: Literal["FIRST", "MAXIMUM"]
    discounts: List[DiscountOut] = Field(default_factory=list)


# ----------------------------
# Editor
# ----------------------------
class TierIn(BaseModel):
    """Raw form values; numbers may arrive as strings and are parsed by the editor."""

    model_config = ConfigDict(populate_by_name=True)

    from_: Any = Field(default=None, alias="from")
    to: Any = None
    discount: Any = None


class TieredConfigurationIn(BaseModel):
    tiers: List[TierIn] = Field(min_length=1)
    message: Optional[str] = None
    next_message: Optional[str] = None
    adding: bool = False

    def raw_tiers(self) -> List[dict]:
        return [t.model_dump(by_alias=True) for t in self.tiers]


class TierOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: Union[int, float] = Field(alias="from")
    to: Union[int, float]
    discount: Union[int, float]


class TieredConfigurationOut(BaseModel):
    tiers: List[TierOut]
    type: str
    message: str
    next_message: str


class ValidationOut(BaseModel):
    valid: bool
    configuration: TieredConfigurationOut
