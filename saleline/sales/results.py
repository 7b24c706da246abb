"""
Sale Line Result Models

A calculation produces two parallel records:
- WithDiscountValues: the line as sold, with the registered discounts applied
- WithoutDiscountValues: the same line as if no discount had been registered

Field names serialize in camelCase and Decimals as exact base-10 strings:

    {"withDiscount":{"net":"879","brute":"1247.492",...},
     "withoutDiscount":{"net":"1000","brute":"1404.55",...}}

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from saleline.core.numbers import ZERO, format_decimal, round_decimal

# Decimal kept as-is in Python, rendered as a plain string in JSON
DecimalString = Annotated[Decimal, PlainSerializer(format_decimal, return_type=str, when_used="json")]


class WithDiscountValues(BaseModel):
    """Figures of the line with the registered discounts applied."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Subtotal without taxes
    net: DecimalString = ZERO
    # Subtotal with taxes
    brute: DecimalString = ZERO
    # Accumulated taxes
    tax: DecimalString = ZERO
    # Accumulated discount as a percentage
    discount: DecimalString = ZERO
    # Value of the discounts without taxes
    discounted_value: DecimalString = Field(default=ZERO, alias="discountedValue")
    # Value of the discounts with taxes
    discounted_value_brute: DecimalString = Field(default=ZERO, alias="discountedValueBrute")
    # Unit value recalculated from the subtotals
    unit_value: DecimalString = Field(default=ZERO, alias="unitValue")

    def round(self, scale: int) -> "WithDiscountValues":
        """Return a copy with every figure rounded half away from zero to scale digits."""
        return self.model_copy(
            update={name: round_decimal(getattr(self, name), scale) for name in type(self).model_fields}
        )


class WithoutDiscountValues(BaseModel):
    """Figures of the line as if no discount had been registered."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    net: DecimalString = ZERO
    brute: DecimalString = ZERO
    tax: DecimalString = ZERO
    unit_value: DecimalString = Field(default=ZERO, alias="unitValue")

    def round(self, scale: int) -> "WithoutDiscountValues":
        """Return a copy with every figure rounded half away from zero to scale digits."""
        return self.model_copy(
            update={name: round_decimal(getattr(self, name), scale) for name in type(self).model_fields}
        )


class SaleResult(BaseModel):
    """
    Result of a sale line calculation.

    Invariant: with_discount.discounted_value_brute equals
    without_discount.brute - with_discount.brute (it is derived from them).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    with_discount: WithDiscountValues = Field(default_factory=WithDiscountValues, alias="withDiscount")
    without_discount: WithoutDiscountValues = Field(default_factory=WithoutDiscountValues, alias="withoutDiscount")

    def round(self, scale: int) -> "SaleResult":
        """Return a copy with both records rounded to scale digits."""
        return SaleResult(
            with_discount=self.with_discount.round(scale),
            without_discount=self.without_discount.round(scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable dict with camelCase keys and string figures."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Compact JSON with camelCase keys and string figures."""
        return self.model_dump_json(by_alias=True)

    def __str__(self) -> str:
        return self.to_json()
