"""
Calculator endpoint — required mass and 20 kg package count for one product.

POST /api/calculator/{product_id}
    {"area": "10", "mode": "area", "thickness_mm": null, "consumption_override": null}

Invalid input answers 422 and produces no result. Each valid calculation is
mirrored to the remote `calculos` table on a best-effort basis.
"""

from fastapi import APIRouter, Depends, HTTPException

from ..audit import AuditMirror, get_audit_mirror
from ..calculators.base import CalculationError
from ..calculators.registry import get_calculator, list_calculators
from ..catalog import Catalog, CatalogStore, get_catalog_store
from ..schemas import CalculationRequest, CalculationResult
from ..session import SessionContext, require_session

router = APIRouter(prefix="/calculator", tags=["calculator"])


def calculate_for_product(catalog: Catalog, product_id: str,
                          request: CalculationRequest) -> CalculationResult:
    """Look up product + rate and run the calculator. Raises HTTPException on bad input."""
    product = catalog.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    rate = catalog.get_consumption_rate(product_id)
    if not rate:
        raise HTTPException(status_code=404, detail=f"No consumption rate for product {product_id}")

    try:
        calculator = get_calculator(request.mode)
        return calculator.calculate(
            product, rate, request.area,
            thickness_mm=request.thickness_mm,
            consumption_override=request.consumption_override,
        )
    except (CalculationError, ValueError) as e:  # ValueError: unknown mode
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/modes")
def list_modes():
    return {"modes": list_calculators()}


@router.post("/{product_id}")
def calculate(
    product_id: str,
    request: CalculationRequest,
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
    mirror: AuditMirror = Depends(get_audit_mirror),
):
    snapshot = store.snapshot()
    result = calculate_for_product(snapshot.catalog, product_id, request)
    mirror.record_calculation(result, ctx.current_user.id if ctx.current_user else None)
    return {
        "result": result.model_dump(),
        "source": snapshot.source,
        "warning": snapshot.warning,
    }
