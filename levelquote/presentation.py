"""
Display formatting for calculator results and money values.

Shared by the calculator API (display block next to the raw numbers), the
CSV export and the PDF generator.
"""

from .calculators.base import BaseCalculator
from .calculators.foam_leveling import CalculationResult


def format_currency(amount) -> str:
    """Format a number as $X,XXX.XX"""
    try:
        value = BaseCalculator.round_half_up(float(amount or 0))
    except (ValueError, TypeError):
        return "$0.00"
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def format_rate(amount, unit: str = "sq ft") -> str:
    """$1.85/sq ft"""
    return f"{format_currency(amount)}/{unit}"


def format_quantity(quantity) -> str:
    """200 -> '200', 12.5 -> '12.5', 12.345 -> '12.35'"""
    try:
        return f"{BaseCalculator.round_half_up(float(quantity)):g}"
    except (ValueError, TypeError):
        return "0"


def format_result(result: CalculationResult) -> dict:
    """Currency/unit strings for every field the calculator panel shows."""
    return {
        "square_footage": f"{result.square_footage:.1f} sq ft",
        "wedge_multiplier": f"{result.wedge_multiplier:.2f}x",
        "void_volume_cubic_feet": f"{result.void_volume_cubic_feet:.2f} cu ft",
        "void_volume_cubic_yards": f"{result.void_volume_cubic_yards:.4f} cu yd",
        "foam_factor": f"{result.foam_factor:g} lbs/cu yd",
        "material_weight_lbs": f"{result.material_weight_lbs:.1f} lbs",
        "material_cost_low": format_currency(result.material_cost_low),
        "material_cost_high": format_currency(result.material_cost_high),
        "estimated_price_low": format_currency(result.estimated_price_low),
        "estimated_price_high": format_currency(result.estimated_price_high),
        "price_range": (
            f"{format_currency(result.estimated_price_low)} - "
            f"{format_currency(result.estimated_price_high)}"
        ),
        "mid_price": format_currency(result.mid_price),
        "price_per_sq_ft_low": format_rate(result.price_per_sq_ft_low),
        "price_per_sq_ft_high": format_rate(result.price_per_sq_ft_high),
        "size_tier": result.size_tier,
    }
