"""
Engine Exceptions

Every failure of the engine is a local validation failure: the input (or
the accumulated configuration) cannot produce a result. Nothing here is
fatal and a failed call leaves no partial output behind.

Hierarchy:
- SaleLineError (ValueError)
  - NegativeValueError and one subclass per component
  - InvalidModeError / InvalidStageError
  - InvalidDecimalError
  - OverMaxDiscountError
  - CalculationError (wraps the failure of one composition step)

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from typing import Any, Optional


class SaleLineError(ValueError):
    """Base class for all engine errors."""

    code = "SaleLineError"
    default_message = "sale line calculation failed"

    def __init__(self, value: Any = None, detail: Optional[str] = None):
        self.value = value
        self.detail = detail

        message = f"[{self.code}] {self.default_message}"
        if value is not None:
            message += f": {value}"
        if detail:
            message += f" ({detail})"

        super().__init__(message)


# Negative values

class NegativeValueError(SaleLineError):
    """Raised when a value that must be non-negative is negative."""

    code = "NegativeValue"
    default_message = "value cannot be negative"


class NegativeTaxableError(NegativeValueError):
    code = "NegativeTaxable"
    default_message = "a taxable value cannot be negative"


class NegativeTaxError(NegativeValueError):
    code = "NegativeTax"
    default_message = "a tax cannot be negative"


class NegativeQuantityError(NegativeValueError):
    """Raised for negative quantities, and for zero where a per-unit share is needed."""

    code = "NegativeQuantity"
    default_message = "quantity cannot be negative"


class NegativePercentError(NegativeValueError):
    code = "NegativePercent"
    default_message = "a percentual component cannot be negative"


class NegativeAmountPerUnitError(NegativeValueError):
    code = "NegativeAmountPerUnit"
    default_message = "an amount per unit component cannot be negative"


class NegativeAmountPerLineError(NegativeValueError):
    code = "NegativeAmountPerLine"
    default_message = "an amount per line component cannot be negative"


class NegativeDiscountableError(NegativeValueError):
    code = "NegativeDiscountable"
    default_message = "the value being un-discounted became negative"


class NegativeUnitValueError(NegativeValueError):
    code = "NegativeUnitValue"
    default_message = "the unit value cannot be negative"


# Invalid arguments

class InvalidModeError(SaleLineError):
    """Raised when a tax or discount mode is outside its enumeration."""

    code = "InvalidMode"
    default_message = "unknown mode"


class InvalidStageError(SaleLineError):
    """Raised when a tax pipeline stage is outside its enumeration."""

    code = "InvalidStage"
    default_message = "unknown tax stage"


class InvalidDecimalError(SaleLineError):
    """Raised when a numeric argument cannot be read as a finite decimal."""

    code = "InvalidDecimal"
    default_message = "not a valid decimal value"


class OverMaxDiscountError(SaleLineError):
    """Raised when the computed discount exceeds the caller's ceiling."""

    code = "OverMaxDiscount"
    default_message = "the discount is over the max discount"


class CalculationError(SaleLineError):
    """
    Raised by the composition layer when one of its steps fails.

    The failing step is named in the message and kept in `step`; the
    original exception is kept in `original` and chained as __cause__.
    """

    code = "CalculationError"
    default_message = "sale line calculation failed"

    def __init__(self, step: str, original: Exception):
        self.step = step
        self.original = original
        super().__init__(detail=f"{step}: {original}")


__all__ = [
    "SaleLineError",
    "NegativeValueError",
    "NegativeTaxableError",
    "NegativeTaxError",
    "NegativeQuantityError",
    "NegativePercentError",
    "NegativeAmountPerUnitError",
    "NegativeAmountPerLineError",
    "NegativeDiscountableError",
    "NegativeUnitValueError",
    "InvalidModeError",
    "InvalidStageError",
    "InvalidDecimalError",
    "OverMaxDiscountError",
    "CalculationError",
]
