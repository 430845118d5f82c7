"""
Cart endpoints.

The cart is keyed per owner: signed-in users get their own slot, anonymous
callers (only possible with AUTH_BACKEND=none) use the X-Cart-Key header
or the shared 'cart' slot.

Adding always recalculates server-side from the catalog — the client never
sends masses or package counts.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ..audit import AuditMirror, get_audit_mirror
from ..cart import CartError, CartLedger, CartStore, cart_key_for
from ..catalog import CatalogStore, get_catalog_store
from ..database import get_db
from ..schemas import CartAddRequest, CartItem
from ..session import SessionContext, require_session
from .calculator import calculate_for_product

router = APIRouter(prefix="/cart", tags=["cart"])


def get_ledger(
    x_cart_key: Optional[str] = Header(default=None),
    ctx: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
) -> CartLedger:
    """FastAPI dependency — the caller's cart, loaded from its slot."""
    user_id = ctx.current_user.id if ctx.current_user else None
    return CartLedger(CartStore(db), cart_key_for(user_id, x_cart_key))


def _cart_to_dict(ledger: CartLedger) -> dict:
    return {
        "items": [item.model_dump() for item in ledger.list()],
        "groups": [
            {"area_name": area_name, "items": [item.model_dump() for item in items]}
            for area_name, items in ledger.group_by_area().items()
        ],
        "total": ledger.total(),
        "count": len(ledger),
    }


@router.get("")
def get_cart(ledger: CartLedger = Depends(get_ledger)):
    return _cart_to_dict(ledger)


@router.post("/items")
def add_item(
    request: CartAddRequest,
    ledger: CartLedger = Depends(get_ledger),
    store: CatalogStore = Depends(get_catalog_store),
    ctx: SessionContext = Depends(require_session),
    mirror: AuditMirror = Depends(get_audit_mirror),
):
    area_name = request.area_name.strip()
    if not area_name:
        raise HTTPException(status_code=422, detail="Area name is required")

    product_id = request.product_id
    result = calculate_for_product(store.snapshot().catalog, product_id, request)
    item = ledger.add(CartItem(
        product_id=result.product_id,
        product_name=result.product_name,
        quantity=result.package_count,
        area=result.area,
        area_name=area_name,
        mode=result.mode,
        total_amount=result.required_mass,
        unit_price=0.0,
    ))
    mirror.record_cart_addition(item, ctx.current_user.id if ctx.current_user else None)
    return {"item": item.model_dump(), "calculation": result.model_dump(), "cart": _cart_to_dict(ledger)}


@router.delete("/items/{item_id}")
def remove_item(item_id: str, ledger: CartLedger = Depends(get_ledger)):
    try:
        ledger.remove(item_id)
    except CartError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_to_dict(ledger)


@router.delete("/items")
def remove_matching_item(
    product_id: str,
    area_name: str,
    area: float,
    ledger: CartLedger = Depends(get_ledger),
):
    """Remove by content (product + area name + area) for clients without item ids."""
    try:
        ledger.remove_matching(product_id, area_name, area)
    except CartError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_to_dict(ledger)


@router.delete("")
def clear_cart(ledger: CartLedger = Depends(get_ledger)):
    ledger.clear()
    return _cart_to_dict(ledger)
