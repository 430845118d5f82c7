"""
Abstract base class for the quantity calculators.

Input: product + consumption rate + user-entered area (or length)
Output: CalculationResult (required mass in kg and 20 kg package count)

Effective rate = base_rate × consumption_factor × thickness_factor
- consumption_factor = override / base_rate (an override replaces the base rate)
- thickness_factor   = thickness_mm / reference thickness
Both factors default to 1.0 and are independent.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

from ..schemas import CalculationResult, ConsumptionRate, Product

logger = logging.getLogger(__name__)

PACKAGE_SIZE_KG = 20.0
PACKAGE_LABEL = "Saco 20kg"
REFERENCE_THICKNESS_MM = 10.0  # used when the product has no thickness specification


class CalculationError(ValueError):
    """Invalid calculator input. No result is produced."""


def package_count(required_mass: float, package_size: float = PACKAGE_SIZE_KG) -> int:
    """Packages needed for a mass. Always rounds UP — you can't buy half a bag."""
    if required_mass <= 0:
        return 0
    return math.ceil(required_mass / package_size)


class BaseCalculator(ABC):
    """All calculation modes inherit from this."""

    mode: str = ""

    @abstractmethod
    def driver(self, area: float) -> float:
        """Quantity the consumption rate is multiplied by (m² of coverage)."""
        pass

    def calculate(self, product: Product, rate: ConsumptionRate, area,
                  thickness_mm: Optional[float] = None,
                  consumption_override: Optional[float] = None) -> CalculationResult:
        area_value = self.parse_area(area)
        if rate.value <= 0:
            raise CalculationError("Consumption rate for %s must be positive" % product.name)

        reference = self.reference_thickness(product)
        thickness_factor = self.thickness_factor(thickness_mm, reference)
        consumption_factor = self.consumption_factor(consumption_override, rate.value)
        effective_rate = rate.value * consumption_factor * thickness_factor

        required_mass = self.driver(area_value) * effective_rate
        logger.debug(
            "Calculated %s: mode=%s area=%s rate=%s -> %.3f kg",
            product.id, self.mode, area_value, effective_rate, required_mass,
        )

        return CalculationResult(
            product_id=product.id,
            product_name=product.name,
            area=area_value,
            mode=self.mode,
            consumption_rate_used=effective_rate,
            consumption_unit=rate.unit,
            thickness_factor=thickness_factor,
            required_mass=required_mass,
            package_label=PACKAGE_LABEL,
            package_count=package_count(required_mass),
        )

    # --- Helper methods ---

    def parse_area(self, value) -> float:
        """Parse the area (or length) typed by the user. Accepts '10', '10.5' and '10,5'."""
        if value is None or isinstance(value, bool):
            raise CalculationError("Area is required")
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            text = str(value).strip().replace(",", ".")
            if not text:
                raise CalculationError("Area is required")
            try:
                number = float(text)
            except ValueError:
                raise CalculationError("Area must be a number, got %r" % value)
        if not math.isfinite(number) or number <= 0:
            raise CalculationError("Area must be greater than zero")
        return number

    def reference_thickness(self, product: Product) -> float:
        specs = product.specifications
        if specs and specs.thickness and specs.thickness > 0:
            return specs.thickness
        return REFERENCE_THICKNESS_MM

    def thickness_factor(self, thickness_mm: Optional[float], reference_mm: float) -> float:
        if thickness_mm is None:
            return 1.0
        if not math.isfinite(thickness_mm) or thickness_mm <= 0:
            raise CalculationError("Thickness must be greater than zero")
        return thickness_mm / reference_mm

    def consumption_factor(self, override: Optional[float], base_rate: float) -> float:
        if override is None:
            return 1.0
        if not math.isfinite(override) or override <= 0:
            raise CalculationError("Consumption override must be greater than zero")
        return override / base_rate
