"""
Order requests — contact details + a snapshot of the cart.

Submitting stores the order and clears the cart. A seller follows up by
phone/email; there is no fulfillment workflow behind it.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .cart import CartLedger
from .schemas import OrderCreate

logger = logging.getLogger(__name__)

CONFIRMATION_MESSAGE = "Pedido enviado com sucesso! Um vendedor entrará em contato em breve."
ORDER_NUMBER_ATTEMPTS = 2


class OrderError(ValueError):
    """Order request rejected — missing contact fields or empty cart."""


def generate_order_number(db: Session) -> str:
    count = db.query(models.Order).count()
    year = datetime.utcnow().year
    return f"PED-{year}-{str(count + 1).zfill(4)}"


def submit_order(db: Session, ledger: CartLedger, owner_key: str, request: OrderCreate) -> models.Order:
    missing = [
        field for field in ("customer_name", "email", "phone")
        if not (getattr(request, field) or "").strip()
    ]
    if missing:
        raise OrderError("Missing required fields: %s" % ", ".join(missing))

    items = ledger.list()
    if not items:
        raise OrderError("Cart is empty — add products before submitting an order")

    for _ in range(ORDER_NUMBER_ATTEMPTS):
        order = models.Order(
            order_number=generate_order_number(db),
            owner_key=owner_key,
            customer_name=request.customer_name.strip(),
            email=request.email.strip(),
            phone=request.phone.strip(),
            notes=request.notes,
            items_json=[item.model_dump() for item in items],
            total=ledger.total(),
        )
        db.add(order)
        try:
            db.commit()
            break
        except IntegrityError:
            # Another order took the same number between count and insert
            db.rollback()
            logger.warning("Order number %s already taken, retrying", order.order_number)
    else:
        raise OrderError("Could not allocate an order number, please try again")
    db.refresh(order)
    logger.info("Order %s submitted with %d items", order.order_number, len(items))

    ledger.clear()
    return order


def list_orders(db: Session, owner_key: str, skip: int = 0, limit: int = 50) -> list:
    return db.query(models.Order).filter(
        models.Order.owner_key == owner_key,
    ).order_by(models.Order.created_at.desc(), models.Order.id.desc()).offset(skip).limit(limit).all()


def order_to_dict(order: models.Order) -> dict:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "email": order.email,
        "phone": order.phone,
        "notes": order.notes,
        "items": order.items_json or [],
        "total": order.total,
        "status": order.status.value if order.status else "submitted",
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }
