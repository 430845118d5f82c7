"""
Area calculator.

Coverage = area in m². Used for mortars, grouts, membranes applied over a surface.
"""

from .base import BaseCalculator


class AreaCalculator(BaseCalculator):

    mode = "area"

    def driver(self, area: float) -> float:
        return area
