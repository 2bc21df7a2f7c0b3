"""
Calculator endpoints — price a job without touching any document.

POST /api/calculator/foam-leveling   — wedge/expansion-rate foam pricing
POST /api/calculator/concrete-rate   — per-sq-ft concrete leveling rate
POST /api/calculator/masonry         — quantity × rate masonry service
GET  /api/calculator/options         — choices and lookup tables for the forms

The calculators never reject input: bad numbers fall back to defaults and
unusable dimensions come back as a zeroed result with is_priceable false.
"""

from fastapi import APIRouter

from .. import schemas
from ..calculators import concrete_rate, foam_leveling, masonry
from ..calculators.registry import get_calculator, list_calculators
from ..presentation import format_currency, format_rate, format_result

router = APIRouter(prefix="/calculator", tags=["calculator"])


@router.post("/foam-leveling")
def calculate_foam_leveling(payload: schemas.FoamLevelingRequest):
    result = get_calculator("foam_leveling").calculate(payload.model_dump(exclude_none=True))
    data = result.to_dict()
    data["display"] = format_result(result)
    return data


@router.post("/concrete-rate")
def calculate_concrete_rate(payload: schemas.ConcreteRateRequest):
    result = get_calculator("concrete_rate").calculate(payload.model_dump(exclude_none=True))
    data = result.to_dict()
    data["display"] = {
        "final_rate": format_rate(result.final_rate),
        "total": format_currency(result.total),
    }
    return data


@router.post("/masonry")
def calculate_masonry(payload: schemas.MasonryRequest):
    result = get_calculator("masonry").calculate(payload.model_dump(exclude_none=True))
    data = result.to_dict()
    data["display"] = {
        "rate": format_rate(result.rate, result.unit),
        "total": format_currency(result.total),
    }
    return data


@router.get("/options")
def calculator_options():
    foam_factors = {}
    for (foam_type, application_type), factor in foam_leveling.FOAM_FACTORS.items():
        foam_factors.setdefault(foam_type, {})[application_type] = factor

    return {
        "calculators": list_calculators(),
        "foam_leveling": {
            "soil_types": list(foam_leveling.SOIL_TYPES),
            "weather_conditions": list(foam_leveling.WEATHER_CONDITIONS),
            "moisture_levels": list(foam_leveling.MOISTURE_LEVELS),
            "foam_types": list(foam_leveling.FOAM_TYPES),
            "application_types": list(foam_leveling.APPLICATION_TYPES),
            "wedge_multipliers": {str(k): v for k, v in foam_leveling.WEDGE_MULTIPLIERS.items()},
            "foam_factors": foam_factors,
            "price_per_lb": {
                "low": foam_leveling.PRICE_PER_LB_LOW,
                "high": foam_leveling.PRICE_PER_LB_HIGH,
            },
        },
        "concrete_rate": {
            "project_types": [
                {"key": key, "name": concrete_rate.PROJECT_NAMES.get(key, key), "rate": rate}
                for key, rate in concrete_rate.PROJECT_RATES.items()
            ],
            "severity_multipliers": dict(concrete_rate.SEVERITY_MULTIPLIERS),
            "accessibility_multipliers": dict(concrete_rate.ACCESSIBILITY_MULTIPLIERS),
        },
        "masonry": {
            "services": [
                {"key": key, "description": description, "unit": unit}
                for key, (description, unit) in masonry.MASONRY_SERVICES.items()
            ],
        },
    }
