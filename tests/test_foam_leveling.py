"""
Foam leveling calculator tests — wedge / expansion-rate pricing.

Tests:
1-4.   Verification job (10' x 20', 1" settled, 1 side, RR401 lift)
5-9.   Wedge multipliers, settled-sides parsing and foam factors
10-13. Zero, negative and overflowing dimensions return the zeroed result
14-18. Invariants (area, price ordering, purity, per-sq-ft consistency)
19-23. Input parsing and enum normalization
24-26. Size tiers and the mid price

No database — the calculator is pure math.
"""

import pytest

from levelquote.calculators.foam_leveling import (
    CalculationInput,
    FoamLevelingCalculator,
    calculate,
    foam_factor,
    parse_sides,
    size_tier,
    wedge_multiplier,
)


def _job(**overrides):
    fields = {
        "length": 10,
        "width": 20,
        "inches_settled": 1,
        "sides_settled": 1,
        "foam_type": "RR401",
        "application_type": "lift",
    }
    fields.update(overrides)
    return calculate(CalculationInput(**fields))


# ============================================================
# 1-4. Verification job
# ============================================================

def test_verification_job_volume():
    result = _job()
    assert result.square_footage == 200
    assert result.wedge_multiplier == 0.5
    assert result.void_volume_cubic_feet == pytest.approx(8.3333, abs=1e-3)
    assert result.void_volume_cubic_yards == pytest.approx(0.3086, abs=1e-4)


def test_verification_job_weight():
    result = _job()
    assert result.foam_factor == 120
    assert result.material_weight_lbs == pytest.approx(37.04, abs=0.01)


def test_verification_job_price_range():
    result = _job()
    assert result.estimated_price_low == pytest.approx(370.37, abs=0.01)
    assert result.estimated_price_high == pytest.approx(555.56, abs=0.01)
    # $/lb already carries labor and profit
    assert result.estimated_price_low == result.material_cost_low
    assert result.estimated_price_high == result.material_cost_high


def test_verification_job_mid_price():
    result = _job()
    assert result.mid_price == pytest.approx(463, abs=0.5)
    assert result.is_priceable is True


# ============================================================
# 5-9. Wedge multipliers and foam factors
# ============================================================

@pytest.mark.parametrize("sides, expected", [(1, 0.5), (2, 0.25), (3, 1.0)])
def test_wedge_multiplier_known_sides(sides, expected):
    assert wedge_multiplier(sides) == expected


@pytest.mark.parametrize("sides", [0, 4, -1, 99])
def test_sides_outside_range_price_like_full_slab(sides):
    """Anything other than 1/2/3 settled sides is priced as the whole slab."""
    odd = _job(sides_settled=sides)
    full = _job(sides_settled=3)
    assert odd.wedge_multiplier == 1.0
    assert odd.estimated_price_low == full.estimated_price_low
    assert odd.estimated_price_high == full.estimated_price_high
    # Input is echoed, not rewritten
    assert odd.sides_settled == sides


@pytest.mark.parametrize("sides", [1.5, 2.5, "0.5", "2.5"])
def test_fractional_sides_price_like_full_slab(sides):
    odd = FoamLevelingCalculator().calculate({
        "length": 10, "width": 20, "inches_settled": 1, "sides_settled": sides, "foam_type": "RR401",
    })
    assert odd.wedge_multiplier == 1.0
    assert odd.estimated_price_low == pytest.approx(740.74, abs=0.01)
    assert odd.sides_settled == float(sides)


@pytest.mark.parametrize("sides, expected", [("1", 0.5), ("2", 0.25), ("3.0", 1.0), (2.0, 0.25)])
def test_whole_number_sides_from_form_use_wedge_table(sides, expected):
    inp = CalculationInput.from_fields({"length": 10, "width": 20, "sides_settled": sides})
    assert isinstance(inp.sides_settled, int)
    assert calculate(inp).wedge_multiplier == expected


@pytest.mark.parametrize("sides", ["", None, "lots"])
def test_missing_sides_default_to_one(sides):
    assert parse_sides(sides) == 1


def test_corner_settlement_is_quarter_of_full_slab():
    corner = _job(sides_settled=2)
    full = _job(sides_settled=3)
    assert corner.void_volume_cubic_feet == pytest.approx(full.void_volume_cubic_feet / 4)


@pytest.mark.parametrize("foam, application, expected", [
    ("RR201", "lift", 100),
    ("RR201", "void", 70),
    ("RR401", "lift", 120),
    ("RR401", "void", 110),
])
def test_foam_factor_table(foam, application, expected):
    assert foam_factor(foam, application) == expected


def test_rr201_void_uses_factor_70():
    result = _job(foam_type="RR201", application_type="void")
    assert result.foam_factor == 70
    assert result.material_weight_lbs == pytest.approx(result.void_volume_cubic_yards * 70)


# ============================================================
# 10-13. Zero / negative dimensions
# ============================================================

def test_zero_length_zeroes_every_derived_field():
    result = _job(length=0)
    assert result.square_footage == 0
    assert result.wedge_multiplier == 0
    assert result.void_volume_cubic_feet == 0
    assert result.void_volume_cubic_yards == 0
    assert result.foam_factor == 0
    assert result.material_weight_lbs == 0
    assert result.estimated_price_low == 0
    assert result.estimated_price_high == 0
    assert result.price_per_sq_ft_low == 0
    assert result.price_per_sq_ft_high == 0


@pytest.mark.parametrize("length, width", [(-5, 20), (10, -1), (0, 0), (-3, -3)])
def test_non_positive_dimensions_are_not_priceable(length, width):
    result = _job(length=length, width=width)
    assert result.square_footage <= 0
    assert result.estimated_price_low == 0
    assert result.estimated_price_high == 0
    assert result.is_priceable is False


def test_zero_result_still_echoes_inputs():
    result = _job(length=0, foam_type="RR201", application_type="void")
    assert result.foam_type == "RR201"
    assert result.application_type == "void"
    assert result.size_tier == "small"


def test_calculator_never_raises_on_garbage():
    result = FoamLevelingCalculator().calculate({
        "length": "abc",
        "width": None,
        "inches_settled": "NaN",
        "sides_settled": "lots",
        "foam_type": 42,
    })
    assert result.estimated_price_low == 0
    assert result.is_priceable is False


@pytest.mark.parametrize("length, width", [(1e200, 1e200), (1e308, 10), (1e160, 1e160)])
def test_overflowing_dimensions_return_zeroed_result(length, width):
    result = _job(length=length, width=width)
    assert result.square_footage == 0
    assert result.estimated_price_high == 0
    assert result.price_per_sq_ft_low == 0
    assert result.is_priceable is False


def test_non_finite_form_dimensions_are_unparseable():
    result = FoamLevelingCalculator().calculate({"length": "inf", "width": "nan"})
    assert result.length == 0
    assert result.width == 0
    assert result.is_priceable is False


def test_large_finite_slab_still_prices():
    result = _job(length=1e6, width=1e6)
    assert result.is_priceable is True
    assert result.estimated_price_low <= result.estimated_price_high


# ============================================================
# 14-18. Invariants
# ============================================================

@pytest.mark.parametrize("length, width", [(1, 1), (10, 20), (7.5, 3.25), (40, 60)])
def test_square_footage_is_length_times_width(length, width):
    assert _job(length=length, width=width).square_footage == pytest.approx(length * width)


@pytest.mark.parametrize("sides", [1, 2, 3, 7])
@pytest.mark.parametrize("foam", ["RR201", "RR401"])
def test_low_price_never_exceeds_high(sides, foam):
    result = _job(sides_settled=sides, foam_type=foam)
    assert result.estimated_price_low <= result.estimated_price_high


def test_same_input_same_result():
    inp = CalculationInput(length=12, width=8, inches_settled=2.5, sides_settled=2, foam_type="RR201")
    assert calculate(inp) == calculate(inp)


def test_per_sq_ft_price_times_area_is_total():
    result = _job(length=14, width=9, inches_settled=3)
    assert result.price_per_sq_ft_low * result.square_footage == pytest.approx(result.estimated_price_low)
    assert result.price_per_sq_ft_high * result.square_footage == pytest.approx(result.estimated_price_high)


def test_deeper_settlement_costs_more():
    assert _job(inches_settled=2).estimated_price_low > _job(inches_settled=1).estimated_price_low


# ============================================================
# 19-23. Input parsing and normalization
# ============================================================

def test_from_fields_accepts_camel_case_keys():
    inp = CalculationInput.from_fields({
        "length": "10", "width": "20", "inchesSettled": "1",
        "sidesSettled": "1", "foamType": "RR401", "applicationType": "lift",
    })
    assert inp.inches_settled == 1
    assert inp.sides_settled == 1
    assert inp.foam_type == "RR401"
    assert calculate(inp).estimated_price_low == pytest.approx(370.37, abs=0.01)


def test_from_fields_parses_units_and_commas():
    inp = CalculationInput.from_fields({"length": "10'", "width": "1,000", "inches_settled": '2"'})
    assert inp.length == 10
    assert inp.width == 1000
    assert inp.inches_settled == 2


@pytest.mark.parametrize("inches", [0, -2, "", None, "abc"])
def test_missing_or_non_positive_inches_default_to_one(inches):
    inp = CalculationInput.from_fields({"length": 10, "width": 10, "inches_settled": inches})
    assert inp.inches_settled == 1.0


def test_unknown_enums_fall_back_to_defaults():
    result = _job(soil_type="lava", weather_conditions="blizzard", moisture_level="soggy",
                  foam_type="RR999", application_type="hover")
    assert result.soil_type == "mixed"
    assert result.weather_conditions == "normal"
    assert result.moisture_level == "normal"
    assert result.foam_type == "RR201"
    assert result.application_type == "lift"
    assert result.foam_factor == 100


def test_enum_matching_is_case_insensitive_and_travel_clamped():
    result = _job(foam_type="rr401", application_type="VOID", travel_distance_miles=-30)
    assert result.foam_type == "RR401"
    assert result.application_type == "void"
    assert result.foam_factor == 110
    assert result.travel_distance_miles == 0


# ============================================================
# 24-26. Size tiers and display helpers
# ============================================================

@pytest.mark.parametrize("area, tier", [
    (0, "small"), (49.9, "small"), (50, "medium"), (199, "medium"),
    (200, "large"), (499, "large"), (500, "xlarge"), (5000, "xlarge"),
])
def test_size_tier_boundaries(area, tier):
    assert size_tier(area) == tier


def test_to_dict_carries_mid_price_and_priceable_flag():
    data = _job().to_dict()
    assert data["mid_price"] == pytest.approx(463, abs=0.5)
    assert data["is_priceable"] is True
    assert data["size_tier"] == "large"
    assert data["price_per_sq_ft_mid"] == pytest.approx(data["mid_price"] / 200)


def test_calculator_registered_name():
    assert FoamLevelingCalculator.name == "foam_leveling"
