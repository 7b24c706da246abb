"""
Sales Calculator - Composition Layer

Orchestrates a DiscountAccumulator and a TaxPipeline to produce a
SaleResult for one sale line, forward from a unit value or backward from
a brute (taxed) total.

The forward and backward paths are not exact inverses: every division
rounds to the configured number of digits, so a backward calculation can
differ from the forward one by a residue of that order.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from typing import Optional

from saleline.core.config import get_settings
from saleline.core.errors import CalculationError, NegativeQuantityError, SaleLineError
from saleline.core.numbers import HUNDRED, NumberLike, div, exact_arithmetic, to_decimal
from saleline.discount.accumulator import ComputedDiscount, DiscountAccumulator, DiscountMode
from saleline.sales.results import SaleResult, WithDiscountValues, WithoutDiscountValues
from saleline.tax.modes import TaxMode, TaxPipelineStage
from saleline.tax.pipeline import TaxPipeline
from saleline.tax.stage import TaxStage
from saleline.utils.logging_config import get_perf_logger, setup_logger

logger = setup_logger(__name__)

UNTAX_UNIT_VALUE_STEP = "after try to untax brute to recalculate uv"


def _step(name: str, func, *args):
    """Run one composition step, wrapping engine errors with the step name."""
    try:
        return func(*args)
    except CalculationError:
        raise
    except SaleLineError as e:
        raise CalculationError(name, e) from e


class SalesCalculator:
    """
    Handler for the sales operations over one sale line.

    Internally the calculator has a tax pipeline and a discount
    accumulator. Taxes are registered in one of three stages which decide
    what they are calculated over:

    * OVER_TAXABLE: the unit value
    * OVER_TAX: the unit value plus the per-unit OVER_TAXABLE tax
    * OVER_TAX_IGNORABLE: the unit value, without entering the OVER_TAX base

    Configure everything before calculating. Changing the configuration
    afterwards is allowed and changes the following results.

    Not safe for concurrent use: keep one calculator per line item or
    serialize access.

    Usage:
        calc = SalesCalculator()
        calc.add_tax("16", TaxMode.PERCENTUAL, TaxPipelineStage.OVER_TAXABLE)
        calc.add_discount("10", DiscountMode.PERCENTUAL)
        result = calc.calculate("100", "10", "100")
        result.with_discount.brute   # 1044
    """

    def __init__(self, precision: Optional[int] = None):
        self.precision = precision if precision is not None else get_settings().division_precision
        self.taxes = TaxPipeline(self.precision)
        self.discounts = DiscountAccumulator(self.precision)

    @property
    def over_taxable(self) -> TaxStage:
        return self.taxes.over_taxable

    @property
    def over_tax(self) -> TaxStage:
        return self.taxes.over_tax

    @property
    def over_tax_ignorable(self) -> TaxStage:
        return self.taxes.over_tax_ignorable

    # Configuration

    def add_tax(self, value: NumberLike, mode: TaxMode, stage: TaxPipelineStage) -> None:
        """Register a tax component in a pipeline stage."""
        self.taxes.add_tax(value, mode, stage)

    def add_discount(self, value: NumberLike, mode: DiscountMode) -> None:
        """Register a discount component."""
        self.discounts.add_discount(value, mode)

    def reset(self) -> None:
        """Clear every registered tax and discount. Returned results stay valid."""
        self.discounts.reset()
        self.taxes.reset()

    # Single sub-computations

    def tax(self, unit_taxable: NumberLike, qty: NumberLike) -> Decimal:
        return self.taxes.tax(unit_taxable, qty)

    def untax(self, brute: NumberLike, qty: NumberLike) -> Decimal:
        return self.taxes.untax(brute, qty)

    def discount(self, unit_value: NumberLike, qty: NumberLike, max_discount: NumberLike) -> ComputedDiscount:
        return self.discounts.compute(unit_value, qty, max_discount)

    def undiscount(self, discounted: NumberLike, qty: NumberLike) -> Decimal:
        return self.discounts.undiscount(discounted, qty)

    # Composite calculations

    def calculate(self, unit_value: NumberLike, qty: NumberLike, max_discount: NumberLike) -> SaleResult:
        """
        Calculate a sale line forward from its unit value.

        Args:
            unit_value: Value of one unit before discounts and taxes
            qty: Quantity sold
            max_discount: Discount ceiling as a percent of the line value

        Returns:
            SaleResult with the discounted and the undiscounted figures

        Raises:
            InvalidDecimalError: An argument is not a decimal
            CalculationError: A step failed; the original error is chained
        """
        unit_value = to_decimal(unit_value)
        qty = to_decimal(qty)
        max_discount = to_decimal(max_discount)

        with get_perf_logger(logger, "calculate"):
            return self._calculate(unit_value, qty, max_discount)

    def calculate_from_brute(self, brute: NumberLike, qty: NumberLike, max_discount: NumberLike) -> SaleResult:
        """
        Calculate a sale line backward from its brute (taxed) total.

        Taxes are peeled off to get the unit value, the discounts are
        undone on it and the line is then calculated forward.

        Raises:
            InvalidDecimalError: An argument is not a decimal
            CalculationError: A step failed; the original error is chained
        """
        brute = to_decimal(brute)
        qty = to_decimal(qty)
        max_discount = to_decimal(max_discount)

        with get_perf_logger(logger, "calculate_from_brute"):
            return self._calculate_from_brute(brute, qty, max_discount)

    def calculate_from_brute_wd(self, brute_wd: NumberLike, qty: NumberLike, max_discount: NumberLike) -> SaleResult:
        """
        Calculate a sale line backward from a brute total that already
        reflects the discounts.

        The discount is estimated with brute_wd / qty as a proxy unit
        value and subtracted; the remainder goes through
        calculate_from_brute() with a full (100%) discount ceiling, since
        the discount was granted upstream.

        Raises:
            InvalidDecimalError: An argument is not a decimal
            CalculationError: A step failed; the original error is chained
        """
        brute_wd = to_decimal(brute_wd)
        qty = to_decimal(qty)
        max_discount = to_decimal(max_discount)

        with get_perf_logger(logger, "calculate_from_brute_wd"):
            if qty <= 0:
                error = NegativeQuantityError(qty, "quantity must be greater than zero to estimate a unit value")
                raise CalculationError("estimate discount from brute with discount", error) from error

            proxy_unit_value = div(brute_wd, qty, self.precision)
            estimated = _step(
                "estimate discount from brute with discount",
                self.discounts.compute, proxy_unit_value, qty, max_discount,
            )

            with exact_arithmetic():
                brute = brute_wd - estimated.value

            logger.debug(f"Brute with discount {brute_wd} -> brute {brute} (estimated discount {estimated.value})")

            return self._calculate_from_brute(brute, qty, HUNDRED)

    def _calculate_from_brute(self, brute: Decimal, qty: Decimal, max_discount: Decimal) -> SaleResult:
        unit_value_wd = _step("untax brute", self.taxes.untax, brute, qty)
        unit_value = _step("undiscount unit value", self.discounts.undiscount, unit_value_wd, qty)

        logger.debug(f"Brute {brute} x {qty} -> unit value {unit_value}")

        return self._calculate(unit_value, qty, max_discount)

    def _calculate(self, unit_value: Decimal, qty: Decimal, max_discount: Decimal) -> SaleResult:
        discounted, discount_percent = _step(
            "compute discount", self.discounts.compute, unit_value, qty, max_discount
        )

        with exact_arithmetic():
            discounted_unit_value = unit_value * div(HUNDRED - discount_percent, HUNDRED, self.precision)

        tax_wd = _step("tax with discount", self.taxes.tax, discounted_unit_value, qty)
        tax_wo = _step("tax without discount", self.taxes.tax, unit_value, qty)

        with exact_arithmetic():
            net_wo = unit_value * qty
            net_wd = net_wo - discounted
            brute_wd = net_wd + tax_wd
            brute_wo = net_wo + tax_wo
            discounted_value_brute = brute_wo - brute_wd

        unit_value_wo = _step(UNTAX_UNIT_VALUE_STEP, self.taxes.untax, brute_wo, qty)

        result = SaleResult(
            with_discount=WithDiscountValues(
                net=net_wd,
                brute=brute_wd,
                tax=tax_wd,
                discount=discount_percent,
                discounted_value=discounted,
                discounted_value_brute=discounted_value_brute,
                unit_value=div(net_wd, qty, self.precision),
            ),
            without_discount=WithoutDiscountValues(
                net=net_wo,
                brute=brute_wo,
                tax=tax_wo,
                unit_value=unit_value_wo,
            ),
        )

        logger.debug(
            "Calculated sale line",
            extra={"user_context": {"unit_value": unit_value, "qty": qty, "brute": brute_wd}},
        )

        return result


__all__ = ["SalesCalculator", "UNTAX_UNIT_VALUE_STEP"]
