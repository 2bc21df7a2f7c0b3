"""
Polyurethane foam leveling calculator — wedge (ER-style) void-volume model.

Pure math. Slab plan area × settlement depth × wedge multiplier gives the
void to fill; the void in cubic yards × foam yield (lb/yd³) gives pounds of
foam; pounds × $/lb gives the price range. The $/lb range already carries
labor and profit, so no separate markup is applied.

Verification job: 10' x 20' slab, 1" settled on one side, RR401 lift
  volume 10*20*(1/12)*0.5 = 8.333 ft³ = 0.3086 yd³
  weight 0.3086*120      = 37.04 lbs
  price  37.04*10..15    = $370.37 - $555.56, mid ~ $463
"""

import math
from dataclasses import dataclass, asdict, replace
from types import MappingProxyType

from .base import BaseCalculator


SOIL_TYPES = ("clay", "sand", "mixed", "rock", "organic")
WEATHER_CONDITIONS = ("cold", "normal", "hot")
MOISTURE_LEVELS = ("dry", "normal", "wet")
FOAM_TYPES = ("RR201", "RR401")
APPLICATION_TYPES = ("lift", "void")

DEFAULT_SOIL_TYPE = "mixed"
DEFAULT_WEATHER = "normal"
DEFAULT_MOISTURE = "normal"
DEFAULT_FOAM_TYPE = "RR201"
DEFAULT_APPLICATION = "lift"

# Settlement is rarely uniform: one settled side is a wedge (half the box),
# a settled corner is a quarter, a fully dropped slab is the whole box.
WEDGE_MULTIPLIERS = MappingProxyType({
    1: 0.50,
    2: 0.25,
    3: 1.00,
})
WEDGE_FALLBACK = 1.00  # anything else is priced as the worst case

# Foam yield (lbs per cubic yard). RR201 standard, RR401 for heavy loads
FOAM_FACTORS = MappingProxyType({
    ("RR201", "lift"): 100,
    ("RR201", "void"): 70,
    ("RR401", "lift"): 120,
    ("RR401", "void"): 110,
})

PRICE_PER_LB_LOW = 10.00
PRICE_PER_LB_HIGH = 15.00

CUBIC_FEET_PER_YARD = 27.0

# (name, min sq ft inclusive, max sq ft exclusive)
SIZE_TIERS = (
    ("small", 0, 50),
    ("medium", 50, 200),
    ("large", 200, 500),
    ("xlarge", 500, float("inf")),
)


@dataclass(frozen=True)
class CalculationInput:
    length: float
    width: float
    inches_settled: float = 1.0
    sides_settled: float = 1
    soil_type: str = DEFAULT_SOIL_TYPE
    weather_conditions: str = DEFAULT_WEATHER
    moisture_level: str = DEFAULT_MOISTURE
    travel_distance_miles: float = 0.0
    foam_type: str = DEFAULT_FOAM_TYPE
    application_type: str = DEFAULT_APPLICATION

    @classmethod
    def from_fields(cls, fields: dict) -> "CalculationInput":
        """
        Build an input from raw form fields. Never raises.

        Accepts both snake_case and the camelCase keys the old form posted
        (inchesSettled, sidesSettled, foamType, ...).
        """
        def pick(*keys):
            for key in keys:
                if fields.get(key) not in (None, ""):
                    return fields[key]
            return None

        parse = BaseCalculator
        inches = parse.parse_inches(pick("inches_settled", "inchesSettled"), 1.0)
        return cls(
            length=parse.parse_feet(pick("length", "length_ft"), 0.0),
            width=parse.parse_feet(pick("width", "width_ft"), 0.0),
            inches_settled=inches if inches > 0 else 1.0,
            sides_settled=parse_sides(pick("sides_settled", "sidesSettled")),
            soil_type=pick("soil_type", "soilType") or DEFAULT_SOIL_TYPE,
            weather_conditions=pick("weather_conditions", "weatherConditions", "weather") or DEFAULT_WEATHER,
            moisture_level=pick("moisture_level", "moistureLevel", "moisture") or DEFAULT_MOISTURE,
            travel_distance_miles=parse.parse_number(
                pick("travel_distance_miles", "travelDistance", "travel_distance"), 0.0
            ),
            foam_type=pick("foam_type", "foamType") or DEFAULT_FOAM_TYPE,
            application_type=pick("application_type", "applicationType") or DEFAULT_APPLICATION,
        )

    def normalized(self) -> "CalculationInput":
        """Same input with every enum mapped onto a known value and travel clamped at 0."""
        choice = BaseCalculator.parse_choice
        travel = BaseCalculator.parse_number(self.travel_distance_miles, 0.0)
        return replace(
            self,
            soil_type=choice(self.soil_type, SOIL_TYPES, DEFAULT_SOIL_TYPE),
            weather_conditions=choice(self.weather_conditions, WEATHER_CONDITIONS, DEFAULT_WEATHER),
            moisture_level=choice(self.moisture_level, MOISTURE_LEVELS, DEFAULT_MOISTURE),
            foam_type=choice(self.foam_type, FOAM_TYPES, DEFAULT_FOAM_TYPE),
            application_type=choice(self.application_type, APPLICATION_TYPES, DEFAULT_APPLICATION),
            travel_distance_miles=max(travel, 0.0),
        )


@dataclass(frozen=True)
class CalculationResult:
    # Echoed (normalized) inputs
    length: float
    width: float
    inches_settled: float
    sides_settled: float
    soil_type: str
    weather_conditions: str
    moisture_level: str
    travel_distance_miles: float
    foam_type: str
    application_type: str
    # Derived
    square_footage: float
    wedge_multiplier: float
    void_volume_cubic_feet: float
    void_volume_cubic_yards: float
    foam_factor: float
    material_weight_lbs: float
    material_cost_low: float
    material_cost_high: float
    estimated_price_low: float
    estimated_price_high: float
    price_per_sq_ft_low: float
    price_per_sq_ft_high: float
    size_tier: str

    @property
    def mid_price(self) -> float:
        """Default "use this price" value."""
        return (self.estimated_price_low + self.estimated_price_high) / 2

    @property
    def price_per_sq_ft_mid(self) -> float:
        return (self.price_per_sq_ft_low + self.price_per_sq_ft_high) / 2

    @property
    def is_priceable(self) -> bool:
        """False for the zeroed sentinel — callers must block add-to-document."""
        return self.estimated_price_low > 0 and self.square_footage > 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["mid_price"] = self.mid_price
        data["price_per_sq_ft_mid"] = self.price_per_sq_ft_mid
        data["is_priceable"] = self.is_priceable
        return data


def parse_sides(value, default: int = 1):
    """
    Settled-sides count from user input.

    Whole numbers come back as int. Fractions such as 1.5 stay float so they
    miss the wedge table and get the worst-case multiplier.
    """
    number = BaseCalculator.parse_number(value, None)
    if number is None:
        return default
    return int(number) if number.is_integer() else number


def wedge_multiplier(sides_settled) -> float:
    """Wedge factor for 1/2/3 settled sides; anything else is the 1.00 worst case."""
    return WEDGE_MULTIPLIERS.get(sides_settled, WEDGE_FALLBACK)


def foam_factor(foam_type: str, application_type: str) -> float:
    """Foam yield in lbs per cubic yard. Unknown combinations use RR201 lift."""
    return FOAM_FACTORS.get(
        (foam_type, application_type),
        FOAM_FACTORS[(DEFAULT_FOAM_TYPE, DEFAULT_APPLICATION)],
    )


def size_tier(square_footage: float) -> str:
    for name, low, high in SIZE_TIERS:
        if low <= square_footage < high:
            return name
    return "small"


def _zero_result(inp: CalculationInput) -> CalculationResult:
    return CalculationResult(
        length=inp.length,
        width=inp.width,
        inches_settled=inp.inches_settled,
        sides_settled=inp.sides_settled,
        soil_type=inp.soil_type,
        weather_conditions=inp.weather_conditions,
        moisture_level=inp.moisture_level,
        travel_distance_miles=inp.travel_distance_miles,
        foam_type=inp.foam_type,
        application_type=inp.application_type,
        square_footage=0.0,
        wedge_multiplier=0.0,
        void_volume_cubic_feet=0.0,
        void_volume_cubic_yards=0.0,
        foam_factor=0.0,
        material_weight_lbs=0.0,
        material_cost_low=0.0,
        material_cost_high=0.0,
        estimated_price_low=0.0,
        estimated_price_high=0.0,
        price_per_sq_ft_low=0.0,
        price_per_sq_ft_high=0.0,
        size_tier=size_tier(0.0),
    )


def calculate(inp: CalculationInput) -> CalculationResult:
    """
    Price a foam leveling job. Total function — never raises on user input.

    Non-positive length or width returns the all-zero sentinel, and so do
    dimensions large enough to overflow the volume or price.
    """
    inp = inp.normalized()

    length = BaseCalculator.parse_number(inp.length, 0.0)
    width = BaseCalculator.parse_number(inp.width, 0.0)
    if length <= 0 or width <= 0:
        return _zero_result(inp)

    inches = BaseCalculator.parse_number(inp.inches_settled, 1.0)
    if inches <= 0:
        inches = 1.0

    square_footage = length * width
    wedge_k = wedge_multiplier(inp.sides_settled)

    void_cu_ft = square_footage * (inches / 12) * wedge_k
    void_cu_yd = void_cu_ft / CUBIC_FEET_PER_YARD

    factor = foam_factor(inp.foam_type, inp.application_type)
    weight_lbs = void_cu_yd * factor

    cost_low = weight_lbs * PRICE_PER_LB_LOW
    cost_high = weight_lbs * PRICE_PER_LB_HIGH

    # $/lb already includes labor and profit
    price_low = cost_low
    price_high = cost_high

    # Dimensions near the top of the float range overflow to inf
    if not all(math.isfinite(v) for v in (square_footage, void_cu_ft, weight_lbs, price_high)):
        return _zero_result(inp)

    return CalculationResult(
        length=length,
        width=width,
        inches_settled=inches,
        sides_settled=inp.sides_settled,
        soil_type=inp.soil_type,
        weather_conditions=inp.weather_conditions,
        moisture_level=inp.moisture_level,
        travel_distance_miles=inp.travel_distance_miles,
        foam_type=inp.foam_type,
        application_type=inp.application_type,
        square_footage=square_footage,
        wedge_multiplier=wedge_k,
        void_volume_cubic_feet=void_cu_ft,
        void_volume_cubic_yards=void_cu_yd,
        foam_factor=float(factor),
        material_weight_lbs=weight_lbs,
        material_cost_low=cost_low,
        material_cost_high=cost_high,
        estimated_price_low=price_low,
        estimated_price_high=price_high,
        price_per_sq_ft_low=BaseCalculator.safe_divide(price_low, square_footage),
        price_per_sq_ft_high=BaseCalculator.safe_divide(price_high, square_footage),
        size_tier=size_tier(square_footage),
    )


class FoamLevelingCalculator(BaseCalculator):
    """Form-facing wrapper around calculate()."""

    name = "foam_leveling"

    def calculate(self, fields: dict) -> CalculationResult:
        return calculate(CalculationInput.from_fields(fields or {}))
