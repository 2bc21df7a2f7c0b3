"""
Traditional concrete leveling calculator — per-sq-ft rate × multipliers.

final_rate = base_rate(project type) × severity × accessibility
total      = final_rate × square footage

Kept for customers quoted on the old per-square-foot sheet. The foam
calculator is the primary pricing path.
"""

from dataclasses import dataclass, asdict
from types import MappingProxyType

from .base import BaseCalculator


# Base rate per sq ft by project type ($/sq ft). "custom" uses the caller's rate.
PROJECT_RATES = MappingProxyType({
    "driveway": 15.00,
    "sidewalk": 12.00,
    "patio": 14.00,
    "garage": 16.00,
    "basement": 18.00,
    "steps": 20.00,
    "pool-deck": 17.00,
    "custom": 0.00,
})

PROJECT_NAMES = MappingProxyType({
    "driveway": "Driveway Concrete Leveling",
    "sidewalk": "Sidewalk Concrete Leveling",
    "patio": "Patio Concrete Leveling",
    "garage": "Garage Floor Concrete Leveling",
    "basement": "Basement Floor Concrete Leveling",
    "steps": "Steps Concrete Leveling",
    "pool-deck": "Pool Deck Concrete Leveling",
    "custom": "Custom Concrete Leveling",
})

SEVERITY_MULTIPLIERS = MappingProxyType({
    "mild": 1.0,
    "moderate": 1.3,
    "severe": 1.6,
})

ACCESSIBILITY_MULTIPLIERS = MappingProxyType({
    "easy": 1.0,
    "moderate": 1.1,
    "difficult": 1.25,
})

DEFAULT_PROJECT_TYPE = "custom"
DEFAULT_SEVERITY = "mild"
DEFAULT_ACCESSIBILITY = "easy"


@dataclass(frozen=True)
class ConcreteRateInput:
    project_type: str
    square_footage: float
    severity: str = DEFAULT_SEVERITY
    accessibility: str = DEFAULT_ACCESSIBILITY
    custom_rate: float = 0.0


@dataclass(frozen=True)
class ConcreteRateResult:
    project_type: str
    square_footage: float
    severity: str
    accessibility: str
    base_rate: float
    severity_multiplier: float
    accessibility_multiplier: float
    total_multiplier: float
    final_rate: float
    total: float
    description: str

    @property
    def is_priceable(self) -> bool:
        return self.total > 0 and self.square_footage > 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_priceable"] = self.is_priceable
        return data


def describe(project_type: str, severity: str, accessibility: str) -> str:
    """'Driveway Concrete Leveling (Moderate damage, difficult access)'."""
    description = PROJECT_NAMES.get(project_type, "Concrete Leveling")
    details = []
    if severity != DEFAULT_SEVERITY:
        details.append(f"{severity.capitalize()} damage")
    if accessibility != DEFAULT_ACCESSIBILITY:
        details.append(f"{accessibility} access")
    if details:
        description += f" ({', '.join(details)})"
    return description


def calculate_concrete_rate(inp: ConcreteRateInput) -> ConcreteRateResult:
    """Total function: unknown keys fall back to defaults, negative area prices to 0."""
    choice = BaseCalculator.parse_choice
    project_type = choice(inp.project_type, PROJECT_RATES.keys(), DEFAULT_PROJECT_TYPE)
    severity = choice(inp.severity, SEVERITY_MULTIPLIERS.keys(), DEFAULT_SEVERITY)
    accessibility = choice(inp.accessibility, ACCESSIBILITY_MULTIPLIERS.keys(), DEFAULT_ACCESSIBILITY)
    square_footage = max(BaseCalculator.parse_number(inp.square_footage, 0.0), 0.0)

    if project_type == "custom":
        base_rate = max(BaseCalculator.parse_number(inp.custom_rate, 0.0), 0.0)
    else:
        base_rate = PROJECT_RATES[project_type]

    severity_mult = SEVERITY_MULTIPLIERS[severity]
    access_mult = ACCESSIBILITY_MULTIPLIERS[accessibility]
    total_mult = BaseCalculator.round_half_up(severity_mult * access_mult)

    final_rate = BaseCalculator.round_half_up(base_rate * total_mult)
    total = BaseCalculator.round_half_up(final_rate * square_footage)

    return ConcreteRateResult(
        project_type=project_type,
        square_footage=square_footage,
        severity=severity,
        accessibility=accessibility,
        base_rate=base_rate,
        severity_multiplier=severity_mult,
        accessibility_multiplier=access_mult,
        total_multiplier=total_mult,
        final_rate=final_rate,
        total=total,
        description=describe(project_type, severity, accessibility),
    )


class ConcreteRateCalculator(BaseCalculator):

    name = "concrete_rate"

    def calculate(self, fields: dict) -> ConcreteRateResult:
        fields = fields or {}
        return calculate_concrete_rate(ConcreteRateInput(
            project_type=fields.get("project_type") or fields.get("projectType") or DEFAULT_PROJECT_TYPE,
            square_footage=self.parse_number(fields.get("square_footage", fields.get("squareFootage")), 0.0),
            severity=fields.get("severity") or DEFAULT_SEVERITY,
            accessibility=fields.get("accessibility") or DEFAULT_ACCESSIBILITY,
            custom_rate=self.parse_number(fields.get("custom_rate", fields.get("customRate")), 0.0),
        ))
