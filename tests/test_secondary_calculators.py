"""
Concrete-rate and masonry calculator tests, plus the registry.

Tests:
1-5.   Concrete rate: table rates, multipliers, custom rate, descriptions
6-9.   Masonry: service defaults, quantity × rate, garbage input
10-12. Calculator registry
13-15. Rounding helper
"""

import pytest

from levelquote.calculators.base import BaseCalculator
from levelquote.calculators.concrete_rate import ConcreteRateCalculator
from levelquote.calculators.masonry import MasonryCalculator
from levelquote.calculators.registry import get_calculator, has_calculator, list_calculators


# ============================================================
# 1-5. Concrete rate
# ============================================================

def test_concrete_rate_plain_driveway():
    result = ConcreteRateCalculator().calculate({"project_type": "driveway", "square_footage": 100})
    assert result.base_rate == 15
    assert result.total_multiplier == 1.0
    assert result.final_rate == 15
    assert result.total == 1500
    assert result.description == "Driveway Concrete Leveling"


def test_concrete_rate_applies_severity_and_access():
    result = ConcreteRateCalculator().calculate({
        "project_type": "patio", "square_footage": 250,
        "severity": "moderate", "accessibility": "difficult",
    })
    # 1.3 × 1.25 = 1.625 -> 1.63 (half-up)
    assert result.total_multiplier == 1.63
    assert result.final_rate == pytest.approx(22.82)
    assert result.total == pytest.approx(5705.0)
    assert "Moderate damage" in result.description
    assert "difficult access" in result.description


def test_concrete_rate_custom_uses_given_rate():
    result = ConcreteRateCalculator().calculate({
        "projectType": "custom", "squareFootage": "80", "customRate": "9.50",
    })
    assert result.base_rate == 9.5
    assert result.total == 760.0
    assert result.is_priceable is True


def test_concrete_rate_unknown_project_falls_back_to_custom():
    result = ConcreteRateCalculator().calculate({"project_type": "helipad", "square_footage": 100})
    assert result.project_type == "custom"
    assert result.total == 0
    assert result.is_priceable is False


def test_concrete_rate_negative_area_is_zero():
    result = ConcreteRateCalculator().calculate({"project_type": "steps", "square_footage": -40})
    assert result.square_footage == 0
    assert result.total == 0


# ============================================================
# 6-9. Masonry
# ============================================================

def test_masonry_uses_service_defaults():
    result = MasonryCalculator().calculate({"service_type": "brick-repair", "quantity": 40, "rate": 18.5})
    assert result.description == "Brick Repair"
    assert result.unit == "sq ft"
    assert result.total == 740.0


def test_masonry_custom_description_and_unit_win():
    result = MasonryCalculator().calculate({
        "service_type": "fire-pit", "quantity": 1, "rate": 2400,
        "description": "  Round fieldstone fire pit  ", "unit": "ea",
    })
    assert result.description == "Round fieldstone fire pit"
    assert result.unit == "ea"
    assert result.total == 2400


def test_masonry_unknown_service_is_custom_work():
    result = MasonryCalculator().calculate({"service_type": "moat", "quantity": 2, "rate": 10})
    assert result.service_type == "custom"
    assert result.description == "Custom Masonry Work"
    assert result.unit == "job"


def test_masonry_garbage_numbers_are_not_priceable():
    result = MasonryCalculator().calculate({"quantity": "lots", "rate": -4})
    assert result.quantity == 0
    assert result.rate == 0
    assert result.is_priceable is False


# ============================================================
# 10-12. Registry
# ============================================================

def test_registry_lists_all_calculators():
    assert set(list_calculators()) == {"foam_leveling", "concrete_rate", "masonry"}


def test_registry_returns_instances():
    for name in list_calculators():
        calc = get_calculator(name)
        assert isinstance(calc, BaseCalculator)
        assert calc.name == name
        assert has_calculator(name)


def test_registry_unknown_name_raises():
    assert not has_calculator("sandblasting")
    with pytest.raises(ValueError, match="No calculator named sandblasting"):
        get_calculator("sandblasting")


# ============================================================
# 13-14. Rounding
# ============================================================

@pytest.mark.parametrize("value, expected", [(1.625, 1.63), (2.675, 2.68), (0.005, 0.01), (10.0, 10.0)])
def test_round_half_up(value, expected):
    assert BaseCalculator.round_half_up(value) == expected


@pytest.mark.parametrize("value, expected", [
    (float("inf"), 0.0), (float("-inf"), 0.0), (float("nan"), 0.0), (1e300, 1e300),
])
def test_round_half_up_never_raises_on_extreme_values(value, expected):
    assert BaseCalculator.round_half_up(value) == expected


def test_safe_divide_by_zero_is_zero():
    assert BaseCalculator.safe_divide(10, 0) == 0.0
