from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..cart import CartLedger
from ..database import get_db
from ..orders import CONFIRMATION_MESSAGE, OrderError, list_orders, order_to_dict, submit_order
from ..schemas import OrderCreate
from .cart import get_ledger

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("")
def create_order(
    request: OrderCreate,
    ledger: CartLedger = Depends(get_ledger),
    db: Session = Depends(get_db),
):
    try:
        order = submit_order(db, ledger, ledger.key, request)
    except OrderError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"order": order_to_dict(order), "message": CONFIRMATION_MESSAGE}


@router.get("")
def get_orders(
    skip: int = 0,
    limit: int = 50,
    ledger: CartLedger = Depends(get_ledger),
    db: Session = Depends(get_db),
):
    """Orders submitted from the caller's cart, newest first."""
    return [order_to_dict(o) for o in list_orders(db, ledger.key, skip, limit)]
