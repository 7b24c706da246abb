"""
Saleline - Sale Line Calculation Engine

Exact decimal computation of taxes and discounts for a single sale line,
forward from a unit value or backward from a taxed total.

Packages:
- core: Decimal arithmetic, errors, enumerations and settings
- tax: Tax stages and the three-stage tax pipeline
- discount: Discount accumulator
- sales: Composition layer and result models
- utils: Logging

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from saleline.core.errors import (
    CalculationError,
    InvalidDecimalError,
    InvalidModeError,
    InvalidStageError,
    NegativeValueError,
    OverMaxDiscountError,
    SaleLineError,
)
from saleline.discount.accumulator import ComputedDiscount, DiscountAccumulator, DiscountMode
from saleline.sales.calculator import SalesCalculator
from saleline.sales.results import SaleResult, WithDiscountValues, WithoutDiscountValues
from saleline.tax.modes import TaxMode, TaxPipelineStage
from saleline.tax.pipeline import TaxBreakdown, TaxPipeline
from saleline.tax.stage import TaxStage

__version__ = "0.1.0"

__all__ = [
    "SalesCalculator",
    "SaleResult",
    "WithDiscountValues",
    "WithoutDiscountValues",
    "TaxMode",
    "TaxPipelineStage",
    "TaxStage",
    "TaxPipeline",
    "TaxBreakdown",
    "DiscountMode",
    "DiscountAccumulator",
    "ComputedDiscount",
    "SaleLineError",
    "NegativeValueError",
    "InvalidModeError",
    "InvalidStageError",
    "InvalidDecimalError",
    "OverMaxDiscountError",
    "CalculationError",
]
