"""
Quantity calculator tests.

Tests:
1-4.   Package rounding (ceil to 20 kg bags, zero mass)
5-8.   Area and linear modes (reference scenarios)
9-13.  Input validation (empty, non-numeric, zero, negative, infinite)
14-17. Thickness factor and consumption override (independent, multiplicative)
18-20. Registry
21-24. Calculator endpoint
"""

import math

import pytest

from quantitativo.calculators.area import AreaCalculator
from quantitativo.calculators.base import (
    CalculationError,
    PACKAGE_LABEL,
    REFERENCE_THICKNESS_MM,
    package_count,
)
from quantitativo.calculators.linear import LinearCalculator, STRIP_WIDTH_M
from quantitativo.calculators.registry import get_calculator, has_calculator, list_calculators
from quantitativo.catalog.static import StaticCatalog
from quantitativo.schemas import ConsumptionRate, Product, Specifications


def _product(thickness=None):
    specs = Specifications(thickness=thickness) if thickness else None
    return Product(id="x", name="Argamassa X", category="Argamassas", specifications=specs)


def _rate(value):
    return ConsumptionRate(product_id="x", unit="kg/m²", value=value)


# ============================================================
# Package rounding
# ============================================================

def test_package_count_rounds_up():
    """Always round up — you can't buy half a bag."""
    assert package_count(50.0) == 3
    assert package_count(20.0) == 1
    assert package_count(20.01) == 2
    assert package_count(1.75) == 1


def test_package_count_zero_mass_is_zero_packages():
    assert package_count(0.0) == 0


def test_package_count_custom_size():
    assert package_count(50.0, package_size=25.0) == 2


def test_result_uses_20kg_bag_label():
    result = AreaCalculator().calculate(_product(), _rate(5), "10")
    assert result.package_label == PACKAGE_LABEL == "Saco 20kg"


# ============================================================
# Modes
# ============================================================

def test_area_mode_scenario():
    """area=10, rate 5 kg/m² → 50 kg, 3 bags."""
    result = AreaCalculator().calculate(_product(), _rate(5), "10")
    assert result.mode == "area"
    assert result.area == 10.0
    assert result.required_mass == pytest.approx(50.0)
    assert result.package_count == 3
    assert result.consumption_unit == "kg/m²"


def test_linear_mode_scenario():
    """length=5, rate 3.5 → driver 0.5, 1.75 kg, 1 bag."""
    calc = LinearCalculator()
    assert calc.driver(5.0) == pytest.approx(0.5)
    result = calc.calculate(_product(), _rate(3.5), "5")
    assert result.mode == "linear"
    assert result.required_mass == pytest.approx(1.75)
    assert result.package_count == 1


@pytest.mark.parametrize("area,rate", [(1.0, 0.5), (12.5, 1.2), (100.0, 3.5), (0.3, 5.0)])
def test_required_mass_matches_formula(area, rate):
    area_result = AreaCalculator().calculate(_product(), _rate(rate), area)
    linear_result = LinearCalculator().calculate(_product(), _rate(rate), area)
    assert area_result.required_mass == pytest.approx(area * rate)
    assert linear_result.required_mass == pytest.approx(area * STRIP_WIDTH_M * rate)
    assert area_result.package_count == math.ceil(area * rate / 20)


def test_area_accepts_decimal_comma():
    result = AreaCalculator().calculate(_product(), _rate(2), "10,5")
    assert result.area == 10.5
    assert result.required_mass == pytest.approx(21.0)


# ============================================================
# Validation
# ============================================================

@pytest.mark.parametrize("bad_area", ["", "   ", None, "abc", "0", "-3", 0, -1.5, "inf", "nan"])
def test_invalid_area_rejected(bad_area):
    with pytest.raises(CalculationError):
        AreaCalculator().calculate(_product(), _rate(5), bad_area)


def test_zero_thickness_rejected():
    with pytest.raises(CalculationError):
        AreaCalculator().calculate(_product(), _rate(5), "10", thickness_mm=0)


def test_negative_override_rejected():
    with pytest.raises(CalculationError):
        AreaCalculator().calculate(_product(), _rate(5), "10", consumption_override=-1)


def test_non_positive_base_rate_rejected():
    with pytest.raises(CalculationError):
        AreaCalculator().calculate(_product(), _rate(0), "10")


def test_calculation_error_is_value_error():
    assert issubclass(CalculationError, ValueError)


# ============================================================
# Thickness factor and consumption override
# ============================================================

def test_thickness_scales_against_default_reference():
    """No thickness spec on the product → reference is 10 mm."""
    result = AreaCalculator().calculate(_product(), _rate(5), "10", thickness_mm=5)
    assert result.thickness_factor == pytest.approx(5 / REFERENCE_THICKNESS_MM)
    assert result.required_mass == pytest.approx(25.0)
    assert result.package_count == 2


def test_thickness_scales_against_product_specification():
    result = AreaCalculator().calculate(_product(thickness=2.0), _rate(1.2), "10", thickness_mm=4.0)
    assert result.thickness_factor == pytest.approx(2.0)
    assert result.consumption_rate_used == pytest.approx(2.4)
    assert result.required_mass == pytest.approx(24.0)


def test_consumption_override_replaces_base_rate():
    result = AreaCalculator().calculate(_product(), _rate(5), "10", consumption_override=1.5)
    assert result.consumption_rate_used == pytest.approx(1.5)
    assert result.required_mass == pytest.approx(15.0)


def test_thickness_and_override_multiply():
    """Override replaces the base, thickness then scales it."""
    result = AreaCalculator().calculate(
        _product(), _rate(5), "10", thickness_mm=20, consumption_override=1.5,
    )
    assert result.consumption_rate_used == pytest.approx(3.0)
    assert result.required_mass == pytest.approx(30.0)
    assert result.package_count == 2


# ============================================================
# Registry
# ============================================================

def test_registry_has_both_modes():
    assert list_calculators() == ["area", "linear"]
    assert has_calculator("area")
    assert has_calculator("linear")
    assert not has_calculator("volume")


def test_get_calculator_returns_instances():
    assert isinstance(get_calculator("area"), AreaCalculator)
    assert isinstance(get_calculator("linear"), LinearCalculator)


def test_get_calculator_unknown_mode_raises():
    with pytest.raises(ValueError):
        get_calculator("volume")


def test_every_static_product_calculates():
    catalog = StaticCatalog()
    for product in catalog.get_all():
        rate = catalog.get_consumption_rate(product.id)
        result = get_calculator("area").calculate(product, rate, "10")
        assert result.required_mass == pytest.approx(10 * rate.value)
        assert result.package_count >= 1


# ============================================================
# Endpoint
# ============================================================

def test_calculate_endpoint_area_mode(client, auth_headers):
    resp = client.post("/api/calculator/2", json={"area": "10", "mode": "area"}, headers=auth_headers)
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["product_name"] == "254 Platinum"
    assert result["required_mass"] == pytest.approx(50.0)
    assert result["package_count"] == 3
    assert resp.json()["source"] == "static"


def test_calculate_endpoint_linear_mode(client, auth_headers):
    resp = client.post("/api/calculator/6", json={"area": 5, "mode": "linear"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["result"]["required_mass"] == pytest.approx(1.75)
    assert resp.json()["result"]["package_count"] == 1


def test_calculate_endpoint_rejects_empty_area(client, auth_headers):
    resp = client.post("/api/calculator/2", json={"area": ""}, headers=auth_headers)
    assert resp.status_code == 422
    assert "result" not in resp.json()


def test_calculate_endpoint_unknown_product_and_mode(client, auth_headers):
    assert client.post("/api/calculator/999", json={"area": "10"}, headers=auth_headers).status_code == 404
    resp = client.post("/api/calculator/2", json={"area": "10", "mode": "volume"}, headers=auth_headers)
    assert resp.status_code == 422


def test_calculate_endpoint_requires_login(client):
    resp = client.post("/api/calculator/2", json={"area": "10"})
    assert resp.status_code == 401


def test_list_modes(client):
    assert client.get("/api/calculator/modes").json() == {"modes": ["area", "linear"]}
