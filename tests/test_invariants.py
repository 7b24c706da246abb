"""
Property-Based Tests - The Hypothesis

Uses hypothesis library for property-based testing of the engine invariants.

Invariants:
1. Reset is idempotent and restores a fresh calculator
1b. Reset then the same configuration reproduces the previous result
2. Adding discount never lowers the discounted value
3. The max discount boundary is inclusive
4. Stage composition: an empty stage is transparent
5. Untax recovers the unit value up to the division precision

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal

from hypothesis import given, settings, strategies as st

from saleline.core.numbers import exact_arithmetic
from saleline.discount.accumulator import DiscountAccumulator, DiscountMode
from saleline.sales.calculator import SalesCalculator
from saleline.tax.modes import TaxMode, TaxPipelineStage
from saleline.tax.pipeline import TaxPipeline


# Strategy for unit values
unit_value_strategy = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("10000"),
    places=2,
    allow_nan=False,
    allow_infinity=False
)

# Strategy for quantities
qty_strategy = st.integers(min_value=1, max_value=1000).map(Decimal)

# Strategy for percentual components
percent_strategy = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("50"),
    places=2,
    allow_nan=False,
    allow_infinity=False
)

# Strategy for fixed amounts
amount_strategy = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("100"),
    places=2,
    allow_nan=False,
    allow_infinity=False
)

# One stage worth of components: (percent, per unit, per line)
stage_strategy = st.tuples(percent_strategy, amount_strategy, amount_strategy)

RESIDUE = Decimal("1e-10")


def add_taxes(target, stages):
    """Register (percent, per unit, per line) for each stage on a pipeline or calculator."""
    for stage, (percent, per_unit, per_line) in zip(TaxPipelineStage, stages):
        target.add_tax(percent, TaxMode.PERCENTUAL, stage)
        target.add_tax(per_unit, TaxMode.AMOUNT_PER_UNIT, stage)
        target.add_tax(per_line, TaxMode.AMOUNT_PER_LINE, stage)
    return target


def build_pipeline(stages):
    return add_taxes(TaxPipeline(), stages)


@given(
    stages=st.tuples(stage_strategy, stage_strategy, stage_strategy),
    discount=percent_strategy,
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=50, deadline=None)
def test_invariant_reset_is_idempotent(stages, discount, unit_value, qty):
    """
    Invariant 1: reset() twice equals reset() once equals a fresh calculator.
    """
    calc = add_taxes(SalesCalculator(), stages)
    calc.add_discount(discount, DiscountMode.PERCENTUAL)

    calc.reset()
    once = calc.calculate(unit_value, qty, "100").to_json()
    calc.reset()
    twice = calc.calculate(unit_value, qty, "100").to_json()

    assert once == twice == SalesCalculator().calculate(unit_value, qty, "100").to_json()


@given(
    stages=st.tuples(stage_strategy, stage_strategy, stage_strategy),
    discount=percent_strategy,
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=50, deadline=None)
def test_invariant_reset_then_same_configuration_reproduces_result(stages, discount, unit_value, qty):
    """
    Invariant 1b: reset() followed by the same add_* calls reproduces the previous result.
    """
    calc = add_taxes(SalesCalculator(), stages)
    calc.add_discount(discount, DiscountMode.PERCENTUAL)
    before = calc.calculate(unit_value, qty, "100").to_json()

    calc.reset()
    add_taxes(calc, stages)
    calc.add_discount(discount, DiscountMode.PERCENTUAL)

    assert calc.calculate(unit_value, qty, "100").to_json() == before


@given(
    first=percent_strategy,
    extra=percent_strategy,
    per_unit=amount_strategy,
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=100, deadline=None)
def test_invariant_discount_is_monotonic(first, extra, per_unit, unit_value, qty):
    """
    Invariant 2: registering more discount never lowers the discounted value.
    """
    discounts = DiscountAccumulator()
    discounts.add_discount(first, DiscountMode.PERCENTUAL)
    before = discounts.compute(unit_value, qty, "100").value

    discounts.add_discount(extra, DiscountMode.PERCENTUAL)
    after_percent = discounts.compute(unit_value, qty, "100").value

    assert after_percent >= before

    with exact_arithmetic():
        fits_ceiling = after_percent + per_unit * qty <= unit_value * qty

    if fits_ceiling:
        discounts.add_discount(per_unit, DiscountMode.AMOUNT_PER_UNIT)
        assert discounts.compute(unit_value, qty, "100").value >= after_percent


@given(
    percent=st.decimals(min_value=Decimal("0"), max_value=Decimal("100"), places=2),
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=100, deadline=None)
def test_invariant_max_discount_boundary_inclusive(percent, unit_value, qty):
    """
    Invariant 3: a discount exactly at the ceiling is accepted.
    """
    discounts = DiscountAccumulator()
    discounts.add_discount(percent, DiscountMode.PERCENTUAL)

    value, _ = discounts.compute(unit_value, qty, percent)

    assert value >= 0


@given(
    components=stage_strategy,
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=100, deadline=None)
def test_invariant_empty_stage_is_transparent(components, unit_value, qty):
    """
    Invariant 4: with the other stages empty, every stage taxes the unit value alone.

    OVER_TAX sees the unit value plus a zero OVER_TAXABLE share, and
    OVER_TAX_IGNORABLE taxes the original base, so the same components
    give the same tax in any stage.
    """
    empty = (Decimal(0), Decimal(0), Decimal(0))

    totals = set()
    for position in range(3):
        stages = [empty, empty, empty]
        stages[position] = components
        totals.add(build_pipeline(stages).tax(unit_value, qty))

    assert len(totals) == 1


@given(
    stages=st.tuples(stage_strategy, stage_strategy, stage_strategy),
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=100, deadline=None)
def test_invariant_untax_round_trip(stages, unit_value, qty):
    """
    Invariant 5: untax(net + tax(u, q), q) recovers u within the division residue.
    """
    pipeline = build_pipeline(stages)

    with exact_arithmetic():
        brute = unit_value * qty + pipeline.tax(unit_value, qty)
        residue = abs(pipeline.untax(brute, qty) - unit_value)

    assert residue <= RESIDUE


@given(
    stages=st.tuples(stage_strategy, stage_strategy, stage_strategy),
    unit_value=unit_value_strategy,
    qty=qty_strategy
)
@settings(max_examples=50, deadline=None)
def test_invariant_calculate_recovers_unit_value(stages, unit_value, qty):
    """
    The undiscounted unit value of a result is the unit value it was calculated from.
    """
    calc = add_taxes(SalesCalculator(), stages)

    result = calc.calculate(unit_value, qty, "100")

    with exact_arithmetic():
        residue = abs(result.without_discount.unit_value - unit_value)

    assert residue <= RESIDUE
