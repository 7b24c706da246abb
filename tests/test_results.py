"""
Unit Tests for the Sale Line Result Models

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from saleline.sales.results import SaleResult, WithDiscountValues, WithoutDiscountValues


@pytest.fixture
def result():
    return SaleResult(
        with_discount=WithDiscountValues(
            net=Decimal("879"),
            brute=Decimal("1247.492"),
            tax=Decimal("368.492"),
            discount=Decimal("12.1000000000000000"),
            discounted_value=Decimal("121"),
            discounted_value_brute=Decimal("157.058"),
            unit_value=Decimal("87.9000000000000000"),
        ),
        without_discount=WithoutDiscountValues(
            net=Decimal("1000.00"),
            brute=Decimal("1404.55"),
            tax=Decimal("404.55"),
            unit_value=Decimal("100"),
        ),
    )


class TestSerialization:

    def test_defaults_are_zero(self):
        assert SaleResult().to_json() == (
            '{"withDiscount":{"net":"0","brute":"0","tax":"0","discount":"0",'
            '"discountedValue":"0","discountedValueBrute":"0","unitValue":"0"},'
            '"withoutDiscount":{"net":"0","brute":"0","tax":"0","unitValue":"0"}}'
        )

    def test_to_dict_uses_aliases_and_strings(self, result):
        data = result.to_dict()

        assert list(data) == ["withDiscount", "withoutDiscount"]
        assert data["withDiscount"]["unitValue"] == "87.9"
        assert data["withDiscount"]["discount"] == "12.1"
        assert data["withoutDiscount"]["net"] == "1000"

    def test_json_matches_dict(self, result):
        assert json.loads(result.to_json()) == result.to_dict()

    def test_str_is_json(self, result):
        assert str(result) == result.to_json()

    def test_python_dump_keeps_decimals(self, result):
        data = result.model_dump()

        assert data["with_discount"]["brute"] == Decimal("1247.492")
        assert isinstance(data["without_discount"]["tax"], Decimal)

    def test_no_exponent(self):
        values = WithoutDiscountValues(net=Decimal("1E+3"), tax=Decimal("1E-18"))

        assert values.model_dump(mode="json", by_alias=True) == {
            "net": "1000",
            "brute": "0",
            "tax": "0.000000000000000001",
            "unitValue": "0",
        }


class TestConstruction:

    def test_alias_and_field_name(self):
        by_alias = WithDiscountValues(unitValue=Decimal("5"), discountedValue=Decimal("1"))
        by_name = WithDiscountValues(unit_value=Decimal("5"), discounted_value=Decimal("1"))

        assert by_alias == by_name

    def test_frozen(self, result):
        with pytest.raises(ValidationError):
            result.with_discount.net = Decimal("1")


class TestRound:

    def test_round(self, result):
        rounded = result.round(2).to_dict()

        assert rounded["withDiscount"]["brute"] == "1247.49"
        assert rounded["withDiscount"]["discountedValueBrute"] == "157.06"
        assert rounded["withoutDiscount"]["brute"] == "1404.55"

    def test_round_half_away_from_zero(self, result):
        rounded = result.round(0)

        assert rounded.with_discount.discount == Decimal("12")
        assert rounded.with_discount.unit_value == Decimal("88")
        assert rounded.with_discount.brute == Decimal("1247")

    def test_negative_scale(self, result):
        rounded = result.round(-2).to_dict()

        assert rounded["withDiscount"]["net"] == "900"
        assert rounded["withoutDiscount"]["brute"] == "1400"

    def test_round_leaves_original(self, result):
        result.round(0)

        assert result.with_discount.brute == Decimal("1247.492")
