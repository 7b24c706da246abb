"""
Tax Modes and Pipeline Stages

A tax component contributes to a stage in one of three ways (TaxMode) and
belongs to one of three stages of the pipeline (TaxPipelineStage):

1. OVER_TAXABLE: taxes calculated directly on the unit value
2. OVER_TAX: taxes calculated on the unit value plus the per-unit share
   of the OVER_TAXABLE taxes (tax on tax)
3. OVER_TAX_IGNORABLE: calculated like OVER_TAXABLE taxes but left out of
   the OVER_TAX base

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from saleline.core.enums import CodedEnum
from saleline.core.errors import InvalidModeError, InvalidStageError


class TaxMode(CodedEnum):
    """How a tax component accumulates into its stage."""

    # A rate over the taxable value, as in "16% VAT"
    PERCENTUAL = 0
    # A fixed amount for the whole line regardless of quantity
    AMOUNT_PER_LINE = 1
    # A fixed amount for each unit sold
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


class TaxPipelineStage(CodedEnum):
    """Which stage of the tax pipeline a tax component belongs to."""

    OVER_TAXABLE = 0
    OVER_TAX = 1
    OVER_TAX_IGNORABLE = 2

    @classmethod
    def _invalid(cls, value, detail):
        return InvalidStageError(value, detail)
