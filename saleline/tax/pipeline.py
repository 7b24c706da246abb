"""
Tax Pipeline - Three Fixed Stages

Wires three TaxStages in a fixed order:

    t1 = over_taxable.tax(u, q)
    t2 = over_tax.tax(u + t1/q, q)          # tax on tax
    t3 = over_tax_ignorable.tax(u, q)       # original base, not in t2's base
    total = t1 + t2 + t3

The inverse (untax) recovers the unit taxable value from a brute line
total. Because OVER_TAX_IGNORABLE's percentual applies to the original
base while OVER_TAX grows on top of OVER_TAXABLE, the stages cannot be
undone one after the other; the composed tax is affine in the unit value
and is inverted as a whole:

    brute = u*q*((1+r1)(1+r2) + r3) + A3 + A2 + A1*(1+r2)

where r_i is a stage rate and A_i a stage's fixed amounts for q units.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from saleline.core.config import get_settings
from saleline.core.errors import NegativeQuantityError
from saleline.core.numbers import HUNDRED, NumberLike, div, exact_arithmetic, to_decimal
from saleline.tax.modes import TaxMode, TaxPipelineStage
from saleline.tax.stage import TaxStage
from saleline.utils.logging_config import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class TaxBreakdown:
    """Tax of a line split by pipeline stage."""

    over_taxable: Decimal
    over_tax: Decimal
    over_tax_ignorable: Decimal

    @property
    def total(self) -> Decimal:
        with exact_arithmetic():
            return self.over_taxable + self.over_tax + self.over_tax_ignorable


class TaxPipeline:
    """
    Tax handler holding one TaxStage per pipeline stage.

    Usage:
        pipeline = TaxPipeline()
        pipeline.add_tax("16", TaxMode.PERCENTUAL, TaxPipelineStage.OVER_TAXABLE)
        total_tax = pipeline.tax("100", "10")      # Decimal('160.00...')
        unit_value = pipeline.untax("1160", "10")   # Decimal('100.00...')
    """

    def __init__(self, precision: Optional[int] = None):
        self.precision = precision if precision is not None else get_settings().division_precision
        self.over_taxable = TaxStage("over_taxable", self.precision)
        self.over_tax = TaxStage("over_tax", self.precision)
        self.over_tax_ignorable = TaxStage("over_tax_ignorable", self.precision)

    @property
    def stages(self) -> Dict[TaxPipelineStage, TaxStage]:
        return {
            TaxPipelineStage.OVER_TAXABLE: self.over_taxable,
            TaxPipelineStage.OVER_TAX: self.over_tax,
            TaxPipelineStage.OVER_TAX_IGNORABLE: self.over_tax_ignorable,
        }

    def stage(self, stage: TaxPipelineStage) -> TaxStage:
        """Return the TaxStage behind a pipeline stage."""
        return self.stages[TaxPipelineStage.normalize(stage)]

    def add_tax(self, value: NumberLike, mode: TaxMode, stage: TaxPipelineStage) -> None:
        """
        Register a tax component in a stage.

        Raises:
            InvalidStageError: Unknown stage
            InvalidModeError: Unknown mode
            NegativeValueError: value < 0 (subclass per mode)
        """
        target = self.stage(stage)
        target.add(value, TaxMode.normalize(mode))

    def breakdown(self, unit_taxable: NumberLike, qty: NumberLike) -> TaxBreakdown:
        """
        Calculate the tax of each stage for qty units of unit_taxable.

        Raises:
            NegativeTaxableError: unit_taxable < 0
            NegativeQuantityError: qty < 0, or qty == 0 (the OVER_TAX base
                needs the per-unit share of the OVER_TAXABLE tax)
        """
        unit_taxable = to_decimal(unit_taxable)
        qty = to_decimal(qty)

        over_taxable = self.over_taxable.tax(unit_taxable, qty)

        if qty == 0:
            raise NegativeQuantityError(qty, "quantity must be greater than zero to tax over taxes")

        with exact_arithmetic():
            over_tax_base = unit_taxable + div(over_taxable, qty, self.precision)

        over_tax = self.over_tax.tax(over_tax_base, qty)
        over_tax_ignorable = self.over_tax_ignorable.tax(unit_taxable, qty)

        return TaxBreakdown(
            over_taxable=over_taxable,
            over_tax=over_tax,
            over_tax_ignorable=over_tax_ignorable,
        )

    def tax(self, unit_taxable: NumberLike, qty: NumberLike) -> Decimal:
        """Total tax of qty units of unit_taxable across all stages."""
        return self.breakdown(unit_taxable, qty).total

    def untax(self, brute: NumberLike, qty: NumberLike) -> Decimal:
        """
        Recover the unit taxable value from a brute (taxed) line total.

        Stage effects are peeled in reverse pipeline order (ignorable
        amounts, over-tax amounts, then over-taxable amounts as grown by
        the over-tax rate) and the remainder is divided once by the
        combined rate times qty.

        Args:
            brute: Line total including all taxes
            qty: Quantity sold, must be > 0

        Returns:
            Unit taxable value

        Raises:
            NegativeQuantityError: If qty <= 0
        """
        brute = to_decimal(brute)
        qty = to_decimal(qty)

        if qty <= 0:
            raise NegativeQuantityError(qty, f"untaxing {brute} needs a quantity greater than zero")

        with exact_arithmetic():
            stripped = brute - self.over_tax_ignorable.fixed_amounts(qty)
            stripped -= self.over_tax.fixed_amounts(qty)
            stripped -= self.over_taxable.fixed_amounts(qty) * self.over_tax.factor()

            combined_rate = (
                self.over_taxable.factor() * self.over_tax.factor()
                + self.over_tax_ignorable.rate()
            )
            divisor = combined_rate * qty

        unit_taxable = div(stripped, divisor, self.precision)

        if unit_taxable < 0:
            logger.warning(
                f"Untax produced a negative unit value {unit_taxable} "
                f"(brute {brute} is below the fixed tax amounts for qty {qty})"
            )

        return unit_taxable

    def line_tax(self, taxable: NumberLike, qty: NumberLike, value: NumberLike, mode: TaxMode) -> Decimal:
        """
        Tax of a single ad-hoc component over a line, without registering it.

        PERCENTUAL: taxable * value/100
        AMOUNT_PER_LINE: value
        AMOUNT_PER_UNIT: value * qty
        """
        mode = TaxMode.normalize(mode)
        taxable = to_decimal(taxable)
        qty = to_decimal(qty)
        value = to_decimal(value)

        with exact_arithmetic():
            if mode is TaxMode.PERCENTUAL:
                return taxable * div(value, HUNDRED, self.precision)
            if mode is TaxMode.AMOUNT_PER_LINE:
                return value
            return value * qty

    def reset(self) -> None:
        """Reset all three stages."""
        for stage in self.stages.values():
            stage.reset()
