"""
Tax Stage

One stage of the tax pipeline. A stage accumulates three additive
components and applies them together:

    tax = (taxable * percent/100 + amount_per_unit) * qty + amount_per_line

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from typing import Optional

from saleline.core.config import get_settings
from saleline.core.errors import (
    NegativeAmountPerLineError,
    NegativeAmountPerUnitError,
    NegativePercentError,
    NegativeQuantityError,
    NegativeTaxableError,
)
from saleline.core.numbers import (
    HUNDRED,
    ONE,
    ZERO,
    NumberLike,
    div,
    exact_arithmetic,
    to_decimal,
)
from saleline.tax.modes import TaxMode
from saleline.utils.logging_config import setup_logger

logger = setup_logger(__name__)


class TaxStage:
    """
    Accumulator for the taxes registered in one pipeline stage.

    Components only grow through the add_* methods or are wholly reset.
    """

    def __init__(self, name: str = "stage", precision: Optional[int] = None):
        self.name = name
        self.precision = precision if precision is not None else get_settings().division_precision
        self._percent = ZERO
        self._amount_per_unit = ZERO
        self._amount_per_line = ZERO
        self._last_taxable = ZERO

    @property
    def percent(self) -> Decimal:
        """Accumulated percentual tax (16 means 16%)."""
        return self._percent

    @property
    def amount_per_unit(self) -> Decimal:
        return self._amount_per_unit

    @property
    def amount_per_line(self) -> Decimal:
        return self._amount_per_line

    @property
    def last_taxable(self) -> Decimal:
        """Taxable value used by the last tax() call. Diagnostic only."""
        return self._last_taxable

    def add_percentual(self, value: NumberLike) -> None:
        """Register a percentual tax (e.g. 16 for 16%)."""
        tax = to_decimal(value)
        if tax < 0:
            raise NegativePercentError(tax, f"stage {self.name}")

        with exact_arithmetic():
            self._percent += tax

    def add_amount_per_unit(self, value: NumberLike) -> None:
        """Register a fixed tax charged for each unit."""
        tax = to_decimal(value)
        if tax < 0:
            raise NegativeAmountPerUnitError(tax, f"stage {self.name}")

        with exact_arithmetic():
            self._amount_per_unit += tax

    def add_amount_per_line(self, value: NumberLike) -> None:
        """Register a fixed tax charged once for the whole line."""
        tax = to_decimal(value)
        if tax < 0:
            raise NegativeAmountPerLineError(tax, f"stage {self.name}")

        with exact_arithmetic():
            self._amount_per_line += tax

    def add(self, value: NumberLike, mode: TaxMode) -> None:
        """Register a tax component, routed by mode."""
        mode = TaxMode.normalize(mode)

        if mode is TaxMode.PERCENTUAL:
            self.add_percentual(value)
        elif mode is TaxMode.AMOUNT_PER_UNIT:
            self.add_amount_per_unit(value)
        else:
            self.add_amount_per_line(value)

    def rate(self) -> Decimal:
        """Percent as a fraction: percent / 100."""
        return div(self._percent, HUNDRED, self.precision)

    def factor(self) -> Decimal:
        """Growth factor applied by the percentual component: 1 + percent/100."""
        with exact_arithmetic():
            return ONE + self.rate()

    def fixed_amounts(self, qty: Decimal) -> Decimal:
        """Amount components for a line of qty units: amount_per_line + amount_per_unit * qty."""
        with exact_arithmetic():
            return self._amount_per_line + self._amount_per_unit * qty

    def tax(self, taxable: NumberLike, qty: NumberLike) -> Decimal:
        """
        Calculate the stage tax over a unit taxable value.

        Args:
            taxable: Taxable value of one unit
            qty: Quantity sold

        Returns:
            (taxable * percent/100 + amount_per_unit) * qty + amount_per_line

        Raises:
            NegativeTaxableError: If taxable < 0
            NegativeQuantityError: If qty < 0
        """
        taxable = to_decimal(taxable)
        qty = to_decimal(qty)

        if taxable < 0:
            raise NegativeTaxableError(taxable, f"stage {self.name}")

        if qty < 0:
            raise NegativeQuantityError(qty, f"stage {self.name}")

        self._last_taxable = taxable

        with exact_arithmetic():
            return (taxable * self.rate() + self._amount_per_unit) * qty + self._amount_per_line

    def untax(self, taxed: NumberLike, qty: NumberLike) -> Decimal:
        """
        Remove this stage's taxes from a taxed line total.

        (taxed - amount_per_line - amount_per_unit * qty) / (1 + percent/100)

        The result is not guarded against going negative; callers validate it.
        """
        taxed = to_decimal(taxed)
        qty = to_decimal(qty)

        with exact_arithmetic():
            stripped = taxed - self.fixed_amounts(qty)

        return div(stripped, self.factor(), self.precision)

    def reset(self) -> None:
        """Zero every component."""
        self._percent = ZERO
        self._amount_per_unit = ZERO
        self._amount_per_line = ZERO
        self._last_taxable = ZERO
        logger.debug(f"Tax stage {self.name} reset")

    def __repr__(self) -> str:
        return (
            f"TaxStage({self.name}, percent={self._percent}, "
            f"amount_per_unit={self._amount_per_unit}, "
            f"amount_per_line={self._amount_per_line})"
        )
