"""
Catalog endpoints — product list/detail, categories, consumption list, technical sheets.

Every response says which catalog served it (`source`) and carries the
fallback `warning` when the remote fetch failed.
"""

from fastapi import APIRouter, Depends, HTTPException

from ..catalog import CatalogStore, filter_products, get_catalog_store
from ..schemas import Product
from ..session import SessionContext, require_session

router = APIRouter(tags=["products"])


def _product_to_dict(product: Product) -> dict:
    return product.model_dump(by_alias=True)


@router.get("/products")
def list_products(
    search: str = "",
    category: str = "",
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    products = filter_products(snapshot.catalog.get_all(), search, category)
    return {
        "products": [_product_to_dict(p) for p in products],
        "source": snapshot.source,
        "warning": snapshot.warning,
    }


@router.get("/products/categories")
def list_categories(
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    return {
        "categories": snapshot.catalog.get_categories(),
        "source": snapshot.source,
        "warning": snapshot.warning,
    }


@router.get("/products/{product_id}")
def get_product(
    product_id: str,
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    product = snapshot.catalog.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    rate = snapshot.catalog.get_consumption_rate(product_id)
    return {
        "product": _product_to_dict(product),
        "consumption_rate": rate.model_dump() if rate else None,
        "source": snapshot.source,
        "warning": snapshot.warning,
    }


@router.get("/consumption-rates")
def list_consumption_rates(
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    catalog = snapshot.catalog
    results = []
    for rate in catalog.get_consumption_rates():
        product = catalog.get_by_id(rate.product_id)
        if not product:
            continue
        results.append({
            "product_id": product.id,
            "product_name": product.name,
            "category": product.category,
            "unit": rate.unit,
            "value": rate.value,
            "conditions": rate.conditions,
        })
    return {"consumption_rates": results, "source": snapshot.source, "warning": snapshot.warning}


@router.get("/technical-sheets")
def list_technical_sheets(
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    return {
        "sheets": [
            {
                "product_id": p.id,
                "product_name": p.name,
                "category": p.category,
                "technical_sheet": p.technical_sheet,
            }
            for p in snapshot.catalog.get_all()
        ],
        "source": snapshot.source,
        "warning": snapshot.warning,
    }


@router.get("/technical-sheets/{product_id}")
def get_technical_sheet(
    product_id: str,
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
):
    snapshot = store.snapshot()
    product = snapshot.catalog.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    rate = snapshot.catalog.get_consumption_rate(product_id)
    return {
        "product_id": product.id,
        "product_name": product.name,
        "category": product.category,
        "description": product.description,
        "image_url": product.image_url,
        "technical_sheet": product.technical_sheet,
        "components": [c.model_dump() for c in product.components],
        "specifications": product.specifications.model_dump(by_alias=True) if product.specifications else None,
        "consumption_rate": rate.model_dump() if rate else None,
    }
