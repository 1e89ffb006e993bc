"""Pydantic schemas for inventory items: write input, wire shape, search and restock."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SweetCategory = Literal[
    "Chocolate",
    "Candy",
    "Pastry",
    "Cookie",
    "Cake",
    "Ice Cream",
    "Traditional",
    "Other",
]

NAME_MAX_LEN = 100
MIN_PRICE = 0.01
# Numeric(10, 2): eight integer digits, two decimals.
MAX_PRICE = 99_999_999.99
# Upper bound of the 32-bit INTEGER quantity column.
MAX_QUANTITY = 2**31 - 1


class SweetInput(BaseModel):
    """
    Field constraints for creating or fully replacing a sweet.

    All constraints are checked in one pass; every failing field is reported.
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Display name")
    category: SweetCategory = Field(..., description="One of the fixed shop categories")
    price: float = Field(
        ...,
        ge=MIN_PRICE,
        le=MAX_PRICE,
        strict=True,
        allow_inf_nan=False,
        description="Unit price, at least 0.01, at most two decimal places",
    )
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, strict=True, description="Units in stock")

    @field_validator("price")
    @classmethod
    def validate_price_cents(cls, v: float) -> float:
        if Decimal(repr(v)).as_tuple().exponent < -2:
            raise ValueError("Price must have at most two decimal places")
        return v


class SweetOut(BaseModel):
    """Wire shape of a persisted sweet."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    price: float
    quantity: int


class SweetSearch(BaseModel):
    """Search filters; None means the filter is not applied. Filters combine with AND."""

    name: str | None = None
    category: SweetCategory | None = None
    min_price: float | None = Field(default=None, allow_inf_nan=False)
    max_price: float | None = Field(default=None, allow_inf_nan=False)


class RestockRequest(BaseModel):
    """Units to add to stock."""

    amount: int = Field(..., ge=1, le=MAX_QUANTITY, strict=True, description="Positive number of units to add")


class MessageResponse(BaseModel):
    message: str
