"""
Calculator lookup by name.

The calculator endpoints and the options listing resolve calculators here,
so adding a pricing method means registering its class once.
"""

from .base import BaseCalculator
from .concrete_rate import ConcreteRateCalculator
from .foam_leveling import FoamLevelingCalculator
from .masonry import MasonryCalculator

CALCULATORS: dict[str, type] = {
    cls.name: cls
    for cls in (FoamLevelingCalculator, ConcreteRateCalculator, MasonryCalculator)
}


def get_calculator(name: str) -> BaseCalculator:
    """New calculator instance. Unknown names are a programming error and raise ValueError."""
    try:
        return CALCULATORS[name]()
    except KeyError:
        raise ValueError(f"No calculator named {name}. Available: {list_calculators()}") from None


def has_calculator(name: str) -> bool:
    return name in CALCULATORS


def list_calculators() -> list[str]:
    """Names in registration order: foam_leveling first, it is the default pricing method."""
    return list(CALCULATORS)
