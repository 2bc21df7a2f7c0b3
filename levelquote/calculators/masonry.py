"""
Masonry calculator — flat quantity × rate, no derivation.

Masonry jobs are custom-quoted: the contractor enters the rate, the service
type only picks the line description and a default unit.
"""

from dataclasses import dataclass, asdict
from types import MappingProxyType

from .base import BaseCalculator


# service key -> (description, default unit)
MASONRY_SERVICES = MappingProxyType({
    "brick-installation": ("Brick Installation", "sq ft"),
    "brick-repair": ("Brick Repair", "sq ft"),
    "stone-fireplace": ("Stone Fireplace", "job"),
    "chimney-repair": ("Chimney Repair", "job"),
    "chimney-restoration": ("Chimney Restoration", "job"),
    "outdoor-fireplace": ("Outdoor Fireplace", "job"),
    "patio-construction": ("Patio Construction", "sq ft"),
    "fire-pit": ("Fire Pit Installation", "job"),
    "outdoor-kitchen": ("Outdoor Kitchen", "job"),
    "veneer-stone": ("Veneer Stone Installation", "sq ft"),
    "cultured-stone": ("Cultured Stone Application", "sq ft"),
    "custom": ("Custom Masonry Work", "job"),
})

DEFAULT_SERVICE = "custom"


@dataclass(frozen=True)
class MasonryInput:
    service_type: str
    quantity: float
    rate: float
    unit: str = ""
    description: str = ""


@dataclass(frozen=True)
class MasonryResult:
    service_type: str
    description: str
    quantity: float
    unit: str
    rate: float
    total: float

    @property
    def is_priceable(self) -> bool:
        return self.total > 0 and self.quantity > 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_priceable"] = self.is_priceable
        return data


def calculate_masonry(inp: MasonryInput) -> MasonryResult:
    service_type = BaseCalculator.parse_choice(inp.service_type, MASONRY_SERVICES.keys(), DEFAULT_SERVICE)
    default_description, default_unit = MASONRY_SERVICES[service_type]
    quantity = max(BaseCalculator.parse_number(inp.quantity, 0.0), 0.0)
    rate = max(BaseCalculator.parse_number(inp.rate, 0.0), 0.0)

    return MasonryResult(
        service_type=service_type,
        description=(inp.description or "").strip() or default_description,
        quantity=quantity,
        unit=(inp.unit or "").strip() or default_unit,
        rate=rate,
        total=BaseCalculator.round_half_up(quantity * rate),
    )


class MasonryCalculator(BaseCalculator):

    name = "masonry"

    def calculate(self, fields: dict) -> MasonryResult:
        fields = fields or {}
        return calculate_masonry(MasonryInput(
            service_type=fields.get("service_type") or fields.get("serviceType") or DEFAULT_SERVICE,
            quantity=self.parse_number(fields.get("quantity"), 0.0),
            rate=self.parse_number(fields.get("rate"), 0.0),
            unit=fields.get("unit") or "",
            description=fields.get("description") or "",
        ))
