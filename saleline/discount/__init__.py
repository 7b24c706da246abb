"""
Discount Module

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from .accumulator import ComputedDiscount, DiscountAccumulator, DiscountMode

__all__ = [
    "DiscountMode",
    "DiscountAccumulator",
    "ComputedDiscount",
]
