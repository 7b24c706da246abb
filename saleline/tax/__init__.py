"""
Tax Module

Tax stages and the fixed three-stage pipeline (over taxable, over tax,
over tax ignorable).

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from .modes import TaxMode, TaxPipelineStage
from .stage import TaxStage
from .pipeline import TaxBreakdown, TaxPipeline

__all__ = [
    "TaxMode",
    "TaxPipelineStage",
    "TaxStage",
    "TaxPipeline",
    "TaxBreakdown",
]
