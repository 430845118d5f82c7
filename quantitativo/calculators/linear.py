"""
Linear calculator.

Input is a length in meters. Coverage = length × 0.1 m, the fixed 10 cm
bead/strip width (joints, corners, sealing strips). Not user-configurable.
"""

from .base import BaseCalculator

STRIP_WIDTH_M = 0.1


class LinearCalculator(BaseCalculator):

    mode = "linear"

    def driver(self, area: float) -> float:
        return area * STRIP_WIDTH_M
