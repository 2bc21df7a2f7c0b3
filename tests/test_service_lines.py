"""
Service line builder and display formatting tests.

Tests:
1-6.   Foam leveling lines (flat / per-area, price points, custom price, description, details)
7-8.   Unpriceable results are rejected
9-10.  Concrete-rate and masonry lines
11-15. Currency / quantity / result formatting
"""

import pytest

from levelquote.calculators.concrete_rate import ConcreteRateCalculator
from levelquote.calculators.foam_leveling import CalculationInput, calculate
from levelquote.calculators.masonry import MasonryCalculator
from levelquote.errors import UnpriceableCalculationError
from levelquote.models import ServiceType
from levelquote.presentation import format_currency, format_quantity, format_rate, format_result
from levelquote.service_lines import (
    build_concrete_rate_service_line,
    build_foam_service_line,
    build_masonry_service_line,
    describe_foam_job,
)


def _verification_result():
    return calculate(CalculationInput(
        length=10, width=20, inches_settled=1, sides_settled=1,
        foam_type="RR401", application_type="lift",
    ))


# ============================================================
# 1-6. Foam leveling lines
# ============================================================

def test_flat_line_is_one_job_at_mid_price():
    line = build_foam_service_line(_verification_result())
    assert line["service_type"] == ServiceType.FOAM_LEVELING
    assert line["quantity"] == 1.0
    assert line["unit"] == "job"
    assert line["rate"] == pytest.approx(462.96, abs=0.01)
    assert line["amount"] == line["rate"]


@pytest.mark.parametrize("point, expected", [("low", 370.37), ("high", 555.56)])
def test_flat_line_price_points(point, expected):
    line = build_foam_service_line(_verification_result(), price_point=point)
    assert line["rate"] == pytest.approx(expected, abs=0.01)
    assert line["details"]["price_point"] == point


def test_unknown_price_point_uses_mid():
    line = build_foam_service_line(_verification_result(), price_point="premium")
    assert line["details"]["price_point"] == "mid"
    assert line["rate"] == pytest.approx(462.96, abs=0.01)


def test_custom_price_replaces_calculated_price():
    line = build_foam_service_line(_verification_result(), price_point="custom", custom_price="525")
    assert line["quantity"] == 1.0
    assert line["unit"] == "job"
    assert line["rate"] == 525.0
    assert line["amount"] == 525.0
    # The calculation stays attached
    assert line["details"]["price_point"] == "custom"
    assert line["details"]["custom_price"] == 525.0
    assert line["details"]["estimated_price_low"] == pytest.approx(370.37, abs=0.01)


def test_custom_price_per_area_is_a_rate():
    line = build_foam_service_line(_verification_result(), price_point="custom", custom_price=2.25, per_area=True)
    assert line["quantity"] == 200
    assert line["rate"] == 2.25
    assert line["amount"] == 450.0


@pytest.mark.parametrize("price", [None, 0, -10, "abc"])
def test_custom_price_must_be_positive(price):
    with pytest.raises(UnpriceableCalculationError, match="custom price"):
        build_foam_service_line(_verification_result(), price_point="custom", custom_price=price)


def test_per_area_line_prices_by_square_foot():
    line = build_foam_service_line(_verification_result(), price_point="low", per_area=True)
    assert line["quantity"] == 200
    assert line["unit"] == "sq ft"
    assert line["rate"] == 1.85
    assert line["amount"] == 370.0
    assert line["details"]["per_area"] is True


def test_foam_description():
    assert describe_foam_job(_verification_result()) == (
        "Polyurethane Foam Leveling - 10' x 20' slab (RR401 lift, 1\" settled, 1 side)"
    )
    custom = build_foam_service_line(_verification_result(), description="Garage slab lift")
    assert custom["description"] == "Garage slab lift"


def test_foam_line_keeps_calculation_snapshot():
    details = build_foam_service_line(_verification_result())["details"]
    assert details["square_footage"] == 200
    assert details["foam_factor"] == 120
    assert details["is_priceable"] is True


# ============================================================
# 7-8. Unpriceable results
# ============================================================

def test_zero_dimension_result_cannot_become_a_line():
    result = calculate(CalculationInput(length=0, width=20))
    with pytest.raises(UnpriceableCalculationError, match="valid length and width"):
        build_foam_service_line(result)


def test_unpriceable_secondary_results_rejected():
    with pytest.raises(UnpriceableCalculationError):
        build_concrete_rate_service_line(ConcreteRateCalculator().calculate({"project_type": "custom"}))
    with pytest.raises(UnpriceableCalculationError):
        build_masonry_service_line(MasonryCalculator().calculate({"service_type": "brick-repair"}))


# ============================================================
# 9-10. Concrete-rate and masonry lines
# ============================================================

def test_concrete_rate_line():
    result = ConcreteRateCalculator().calculate({"project_type": "sidewalk", "square_footage": 60})
    line = build_concrete_rate_service_line(result)
    assert line["service_type"] == ServiceType.CONCRETE_RATE
    assert line["quantity"] == 60
    assert line["unit"] == "sq ft"
    assert line["rate"] == 12
    assert line["amount"] == 720


def test_masonry_line():
    result = MasonryCalculator().calculate({"service_type": "chimney-repair", "quantity": 1, "rate": 1850})
    line = build_masonry_service_line(result)
    assert line["service_type"] == ServiceType.MASONRY
    assert line["description"] == "Chimney Repair"
    assert line["unit"] == "job"
    assert line["amount"] == 1850


# ============================================================
# 11-15. Formatting
# ============================================================

@pytest.mark.parametrize("amount, expected", [
    (0, "$0.00"), (1234.5, "$1,234.50"), (462.963, "$462.96"), (-20, "-$20.00"), (None, "$0.00"), ("abc", "$0.00"),
    (float("inf"), "$0.00"), (float("nan"), "$0.00"),
])
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_rate():
    assert format_rate(1.85) == "$1.85/sq ft"
    assert format_rate(40, "ea") == "$40.00/ea"


@pytest.mark.parametrize("quantity, expected", [(200, "200"), (12.5, "12.5"), (12.345, "12.35"), ("x", "0")])
def test_format_quantity(quantity, expected):
    assert format_quantity(quantity) == expected


def test_format_result_display_strings():
    display = format_result(_verification_result())
    assert display["square_footage"] == "200.0 sq ft"
    assert display["void_volume_cubic_yards"] == "0.3086 cu yd"
    assert display["material_weight_lbs"] == "37.0 lbs"
    assert display["price_range"] == "$370.37 - $555.56"
    assert display["mid_price"] == "$462.96"
    assert display["price_per_sq_ft_low"] == "$1.85/sq ft"
    assert display["size_tier"] == "large"


def test_format_result_for_zeroed_sentinel():
    display = format_result(calculate(CalculationInput(length=0, width=0)))
    assert display["price_range"] == "$0.00 - $0.00"
    assert display["square_footage"] == "0.0 sq ft"
