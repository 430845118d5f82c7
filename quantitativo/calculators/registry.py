"""
Calculator registry — maps calculation modes to calculator classes.
"""

from .area import AreaCalculator
from .linear import LinearCalculator
from .base import BaseCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "area": AreaCalculator,
    "linear": LinearCalculator,
}


def get_calculator(mode: str) -> BaseCalculator:
    """Returns an instance of the calculator for a mode, or raises ValueError."""
    if mode not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for mode: {mode}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[mode]()


def has_calculator(mode: str) -> bool:
    """Check if a calculator exists for a mode."""
    return mode in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    """List all registered calculation modes."""
    return list(CALCULATOR_REGISTRY.keys())
