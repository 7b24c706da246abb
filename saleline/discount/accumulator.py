"""
Discount Accumulator

Holds the discounts registered for a sale line and applies them together:

    discounted = (unit_value * percent/100 + amount_per_unit) * qty + amount_per_line

The inverse (undiscount) recovers the value the discounts were applied to.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from typing import NamedTuple, Optional

from saleline.core.config import get_settings
from saleline.core.enums import CodedEnum
from saleline.core.errors import (
    InvalidModeError,
    NegativeAmountPerLineError,
    NegativeAmountPerUnitError,
    NegativeDiscountableError,
    NegativePercentError,
    NegativeQuantityError,
    NegativeUnitValueError,
    OverMaxDiscountError,
)
from saleline.core.numbers import (
    HUNDRED,
    ZERO,
    NumberLike,
    div,
    exact_arithmetic,
    percent_of,
    to_decimal,
)
from saleline.utils.logging_config import setup_logger

logger = setup_logger(__name__)


class DiscountMode(CodedEnum):
    """How a discount component accumulates."""

    # A rate over the unit value, as in "10% off"
    PERCENTUAL = 0
    # A fixed amount off the whole line regardless of quantity
    AMOUNT_PER_LINE = 1
    # A fixed amount off each unit
    AMOUNT_PER_UNIT = 2

    @classmethod
    def _invalid(cls, value, detail):
        return InvalidModeError(value, detail)

    @classmethod
    def _aliases(cls):
        return {
            "PERCENT": cls.PERCENTUAL,
            "AMOUNTLINE": cls.AMOUNT_PER_LINE,
            "AMOUNTUNIT": cls.AMOUNT_PER_UNIT,
        }


class ComputedDiscount(NamedTuple):
    """Result of applying the registered discounts to a line."""

    value: Decimal    # discounted amount, net space
    percent: Decimal  # equivalent percentage of unit_value * qty


class DiscountAccumulator:
    """
    Discount calculator over three additive components.

    Components only grow through add_discount() or are wholly reset.

    Usage:
        discounts = DiscountAccumulator()
        discounts.add_discount("10", DiscountMode.PERCENTUAL)
        discounts.add_discount("2", DiscountMode.AMOUNT_PER_UNIT)
        value, percent = discounts.compute("100", "10", "100")   # 120, 12
    """

    def __init__(self, precision: Optional[int] = None):
        self.precision = precision if precision is not None else get_settings().division_precision
        self._percent = ZERO
        self._amount_per_unit = ZERO
        self._amount_per_line = ZERO

    @property
    def percent(self) -> Decimal:
        return self._percent

    @property
    def amount_per_unit(self) -> Decimal:
        return self._amount_per_unit

    @property
    def amount_per_line(self) -> Decimal:
        return self._amount_per_line

    def add_discount(self, value: NumberLike, mode: DiscountMode) -> None:
        """
        Register a discount component.

        Raises:
            InvalidModeError: Unknown mode
            InvalidDecimalError: value is not a decimal
            NegativePercentError / NegativeAmountPerUnitError /
            NegativeAmountPerLineError: value < 0
        """
        mode = DiscountMode.normalize(mode)
        discount = to_decimal(value)

        with exact_arithmetic():
            if mode is DiscountMode.PERCENTUAL:
                if discount < 0:
                    raise NegativePercentError(discount, "discount")
                self._percent += discount
            elif mode is DiscountMode.AMOUNT_PER_UNIT:
                if discount < 0:
                    raise NegativeAmountPerUnitError(discount, "discount")
                self._amount_per_unit += discount
            else:
                if discount < 0:
                    raise NegativeAmountPerLineError(discount, "discount")
                self._amount_per_line += discount

    def compute(self, unit_value: NumberLike, qty: NumberLike, max_discount: NumberLike) -> ComputedDiscount:
        """
        Apply the registered discounts to qty units of unit_value.

        Args:
            unit_value: Value of one unit before discount
            qty: Quantity sold
            max_discount: Ceiling as a percent of unit_value * qty. Values
                outside [0, 100] are replaced by 100

        Returns:
            ComputedDiscount(value, percent). A free good (unit_value == 0)
            counts as fully discounted: percent is 100

        Raises:
            NegativeUnitValueError: unit_value < 0
            NegativeQuantityError: qty < 0, or qty == 0 with unit_value != 0
            OverMaxDiscountError: the discount exceeds the ceiling (boundary inclusive)
        """
        unit_value = to_decimal(unit_value)
        qty = to_decimal(qty)
        max_discount = to_decimal(max_discount)

        if unit_value < 0:
            raise NegativeUnitValueError(unit_value)

        if qty < 0:
            raise NegativeQuantityError(qty, "discount")

        if max_discount < 0 or max_discount > HUNDRED:
            logger.warning(f"Max discount {max_discount} outside [0, 100], using 100")
            max_discount = HUNDRED

        with exact_arithmetic():
            max_value = percent_of(unit_value, max_discount, self.precision) * qty
            discounted = (
                (percent_of(unit_value, self._percent, self.precision) + self._amount_per_unit) * qty
                + self._amount_per_line
            )

            if discounted > max_value:
                raise OverMaxDiscountError(
                    discounted, f"max discount {max_discount}% allows {max_value}"
                )

            if unit_value == 0:
                percent = HUNDRED
            elif qty == 0:
                raise NegativeQuantityError(qty, "quantity must be greater than zero to derive a discount percent")
            else:
                percent = div(discounted * HUNDRED, unit_value * qty, self.precision)

        logger.debug(f"Discount over {unit_value} x {qty}: value={discounted} percent={percent}")

        return ComputedDiscount(value=discounted, percent=percent)

    def undiscount(self, discounted: NumberLike, qty: NumberLike) -> Decimal:
        """
        Recover the value the registered discounts were applied to.

        Undoes compute() right to left: adds back the per-line amount,
        then the per-unit amounts, then scales out the percentual part.
        With an accumulated percent of exactly 100 the last step would
        divide by zero and the value is returned unscaled.

        Raises:
            NegativeDiscountableError: If an intermediate value is negative
        """
        discounted = to_decimal(discounted)
        qty = to_decimal(qty)

        with exact_arithmetic():
            original = discounted + self._amount_per_line

            if original < 0:
                raise NegativeDiscountableError(
                    original,
                    f"after adding back amount per line {self._amount_per_line} to {discounted}",
                )

            original += self._amount_per_unit * qty

            if original < 0:
                raise NegativeDiscountableError(
                    original,
                    f"after adding back amount per unit {self._amount_per_unit} x {qty} to {discounted}",
                )

            if self._percent == HUNDRED:
                logger.warning("Accumulated discount is 100%, undiscount leaves the percentual part unscaled")
            else:
                original = div(original, HUNDRED - self._percent, self.precision) * HUNDRED

        return original

    def ratio(self, discounted: NumberLike, discount: NumberLike) -> Decimal:
        """
        Percent a discount represents of the pre-discount value.

        100 * discount / (discounted + discount)
        """
        discounted = to_decimal(discounted)
        discount = to_decimal(discount)

        with exact_arithmetic():
            return div(HUNDRED * discount, discounted + discount, self.precision)

    def reset(self) -> None:
        """Zero every component."""
        self._percent = ZERO
        self._amount_per_unit = ZERO
        self._amount_per_line = ZERO
        logger.debug("Discounts reset")

    def __repr__(self) -> str:
        return (
            f"DiscountAccumulator(percent={self._percent}, "
            f"amount_per_unit={self._amount_per_unit}, "
            f"amount_per_line={self._amount_per_line})"
        )
