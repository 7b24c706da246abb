"""
Sales Module

Composition of taxes and discounts into sale line results.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from .results import SaleResult, WithDiscountValues, WithoutDiscountValues
from .calculator import SalesCalculator

__all__ = [
    "SalesCalculator",
    "SaleResult",
    "WithDiscountValues",
    "WithoutDiscountValues",
]
