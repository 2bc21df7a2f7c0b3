"""
Service line builders — turn a calculator result into a document line.

A service line is {service_type, description, quantity, unit, rate, amount,
details}. The calculation snapshot goes into details so the document keeps
the numbers it was priced from after the calculator inputs change.

Unpriceable results (zeroed sentinel) raise UnpriceableCalculationError:
the add-to-document action must be blocked until valid dimensions are entered.
"""

from .calculators.base import BaseCalculator
from .calculators.concrete_rate import ConcreteRateResult
from .calculators.foam_leveling import CalculationResult
from .calculators.masonry import MasonryResult
from .errors import UnpriceableCalculationError
from .models import FLAT_UNIT, ServiceType

PRICE_POINTS = ("low", "mid", "high")
CUSTOM_PRICE_POINT = "custom"
DEFAULT_PRICE_POINT = "mid"

SIDES_LABELS = {1: "1 side", 2: "corner", 3: "full slab"}


def _money(value: float) -> float:
    return BaseCalculator.round_half_up(value)


def _fmt_dim(value: float) -> str:
    """10.0 -> 10, 10.5 -> 10.5"""
    return f"{value:g}"


def describe_foam_job(result: CalculationResult) -> str:
    """Polyurethane Foam Leveling - 10' x 20' slab (RR401 lift, 1" settled, 1 side)"""
    sides = SIDES_LABELS.get(result.sides_settled, f"{result.sides_settled} sides")
    return (
        f"Polyurethane Foam Leveling - {_fmt_dim(result.length)}' x {_fmt_dim(result.width)}' slab "
        f"({result.foam_type} {result.application_type}, "
        f"{_fmt_dim(result.inches_settled)}\" settled, {sides})"
    )


def select_price(result: CalculationResult, price_point: str = DEFAULT_PRICE_POINT,
                 per_area: bool = False) -> float:
    """Pick low / mid / high from the range. Unknown price points use mid."""
    point = price_point if price_point in PRICE_POINTS else DEFAULT_PRICE_POINT
    if per_area:
        return {
            "low": result.price_per_sq_ft_low,
            "mid": result.price_per_sq_ft_mid,
            "high": result.price_per_sq_ft_high,
        }[point]
    return {
        "low": result.estimated_price_low,
        "mid": result.mid_price,
        "high": result.estimated_price_high,
    }[point]


def build_foam_service_line(result: CalculationResult, price_point: str = DEFAULT_PRICE_POINT,
                            per_area: bool = False, description: str = None,
                            custom_price=None) -> dict:
    """
    Build a service line from a foam leveling result.

    Flat mode (default): 1 job at the chosen price.
    Per-area mode: square footage × chosen price per sq ft.

    price_point "custom" replaces the calculated price with custom_price (the
    job price in flat mode, the $/sq ft rate in per-area mode). The line still
    carries the calculation it was quoted against.
    """
    if not result.is_priceable:
        raise UnpriceableCalculationError()

    if price_point == CUSTOM_PRICE_POINT:
        point = CUSTOM_PRICE_POINT
        price = BaseCalculator.parse_number(custom_price, 0.0)
        if price <= 0:
            raise UnpriceableCalculationError("Please enter a custom price greater than $0.")
    else:
        point = price_point if price_point in PRICE_POINTS else DEFAULT_PRICE_POINT
        price = select_price(result, point, per_area=per_area)

    details = result.to_dict()
    details["price_point"] = point
    details["per_area"] = per_area
    if point == CUSTOM_PRICE_POINT:
        details["custom_price"] = price

    if per_area:
        quantity = round(result.square_footage, 2)
        rate = _money(price)
        unit = "sq ft"
        amount = _money(quantity * rate)
    else:
        quantity = 1.0
        rate = _money(price)
        unit = FLAT_UNIT
        amount = rate

    return {
        "service_type": ServiceType.FOAM_LEVELING,
        "description": description or describe_foam_job(result),
        "quantity": quantity,
        "unit": unit,
        "rate": rate,
        "amount": amount,
        "details": details,
    }


def build_concrete_rate_service_line(result: ConcreteRateResult) -> dict:
    if not result.is_priceable:
        raise UnpriceableCalculationError(
            "Please enter valid square footage and select a project type."
        )
    return {
        "service_type": ServiceType.CONCRETE_RATE,
        "description": result.description,
        "quantity": result.square_footage,
        "unit": "sq ft",
        "rate": result.final_rate,
        "amount": result.total,
        "details": result.to_dict(),
    }


def build_masonry_service_line(result: MasonryResult) -> dict:
    if not result.is_priceable:
        raise UnpriceableCalculationError("Please enter a quantity and rate for the masonry service.")
    return {
        "service_type": ServiceType.MASONRY,
        "description": result.description,
        "quantity": result.quantity,
        "unit": result.unit,
        "rate": result.rate,
        "amount": result.total,
        "details": result.to_dict(),
    }
