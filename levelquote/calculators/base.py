"""
Abstract base class for all pricing calculators.

Input: loosely-typed form fields (strings, numbers, None)
Output: an immutable result dataclass with a to_dict() for the API

Calculators are total: bad user input never raises, it falls back to the
documented default for that field.
"""

import math
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP


class BaseCalculator(ABC):
    """All calculators inherit from this."""

    name = ""

    @abstractmethod
    def calculate(self, fields: dict):
        """
        Takes the raw form fields.
        Returns the calculator's result dataclass.
        """
        pass

    # --- Helper methods for all calculators ---

    @staticmethod
    def parse_number(value, default: float = 0.0) -> float:
        """Parse a numeric value from user input. NaN/inf count as unparseable."""
        if value is None or isinstance(value, bool):
            return default
        try:
            number = float(str(value).strip().replace(",", ""))
        except (ValueError, TypeError):
            return default
        if not math.isfinite(number):
            return default
        return number

    @classmethod
    def parse_feet(cls, value, default: float = 0.0) -> float:
        """Parse a feet value from user input. Handles strings like '10', "10'", '10.5 ft'."""
        if value is None:
            return default
        return cls.parse_number(str(value).strip().rstrip("'").rstrip("ft").strip(), default)

    @classmethod
    def parse_inches(cls, value, default: float = 0.0) -> float:
        """Parse an inches value from user input. Handles '1.5', '1.5"', '2 in'."""
        if value is None:
            return default
        return cls.parse_number(str(value).strip().rstrip('"').rstrip("in").strip(), default)

    @staticmethod
    def parse_choice(value, choices, default: str) -> str:
        """Map a free-form choice onto one of the allowed values (case-insensitive)."""
        if value is None:
            return default
        text = str(value).strip()
        lookup = {str(c).lower(): c for c in choices}
        return lookup.get(text.lower(), default)

    @staticmethod
    def round_half_up(value: float, decimals: int = 2) -> float:
        """Round the way a person does on paper: 1.625 -> 1.63, not banker's rounding.

        NaN and infinity round to 0.
        """
        if not math.isfinite(value):
            return 0.0
        # Floats this large carry no cents; Decimal quantize would overflow its precision
        if abs(value) >= 1e15:
            return float(value)
        quantum = Decimal(1).scaleb(-decimals)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))

    @staticmethod
    def safe_divide(numerator: float, denominator: float) -> float:
        """Division that returns 0 instead of raising or producing inf."""
        if not denominator:
            return 0.0
        return numerator / denominator

