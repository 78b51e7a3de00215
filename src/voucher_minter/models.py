"""Pydantic models for the Stripe objects Voucher Minter reads and writes.

Response models ignore fields they do not name, so additions to the Stripe
schema never break parsing.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

FormPairs = List[Tuple[str, str]]


def _form_number(value: float) -> str:
    """Render a number the way Stripe's form decoder expects (100.0 -> "100")."""
    return f"{value:g}"


def _form_bool(value: bool) -> str:
    return "true" if value else "false"


class Product(BaseModel):
    """Product listed on the Stripe account."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Stripe product ID (prod_...)")
    name: str = Field(description="Display name")
    active: bool = Field(default=True)
    description: Optional[str] = None
    default_price: Optional[str] = None
    created: Optional[int] = None
    livemode: bool = False
    metadata: Dict[str, str] = Field(default_factory=dict)


class ProductList(BaseModel):
    """One page of the /products listing."""

    model_config = ConfigDict(extra="ignore")

    data: List[Product] = Field(default_factory=list)
    has_more: bool = False
    url: Optional[str] = None


class CouponAppliesTo(BaseModel):
    products: List[str] = Field(default_factory=list)


class Coupon(BaseModel):
    """Coupon as returned by Stripe."""

    model_config = ConfigDict(extra="ignore")

    id: str
    percent_off: Optional[float] = None
    redeem_by: Optional[int] = None
    valid: bool = True
    name: Optional[str] = None
    applies_to: Optional[CouponAppliesTo] = None


class PromotionCode(BaseModel):
    """Promotion code as returned by Stripe."""

    model_config = ConfigDict(extra="ignore")

    id: str
    code: str
    coupon: Optional[dict] = None
    active: bool = True
    max_redemptions: Optional[int] = None
    expires_at: Optional[int] = None


class CouponRequest(BaseModel):
    """Body of POST /coupons."""

    name: str
    percent_off: float = 100.0
    redeem_by: int = Field(description="Epoch seconds after which the coupon can't be redeemed")
    products: List[str] = Field(description="Products the coupon is restricted to")

    def to_form(self) -> FormPairs:
        pairs = [
            ("name", self.name),
            ("percent_off", _form_number(self.percent_off)),
            ("redeem_by", str(self.redeem_by)),
        ]
        for index, product_id in enumerate(self.products):
            pairs.append((f"applies_to[products][{index}]", product_id))
        return pairs


class PromotionCodeRequest(BaseModel):
    """Body of POST /promotion_codes."""

    coupon: str
    code: str
    expires_at: int
    max_redemptions: int = 1
    first_time_transaction: bool = False

    def to_form(self) -> FormPairs:
        return [
            ("coupon", self.coupon),
            ("code", self.code),
            ("expires_at", str(self.expires_at)),
            ("max_redemptions", str(self.max_redemptions)),
            ("restrictions[first_time_transaction]", _form_bool(self.first_time_transaction)),
        ]
