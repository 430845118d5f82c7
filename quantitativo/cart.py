"""
Cart ledger — ordered line items for one cart key, written through to the
cart_slots table on every mutation.

Items are addressed by a stable item_id generated at add time. Positional
removal is kept for callers that hold an index into the full flat list.
No transaction ties memory and storage together: a failed write is logged
and the in-memory state stands.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from . import models
from .schemas import CartItem

logger = logging.getLogger(__name__)

DEFAULT_CART_KEY = "cart"


class CartError(Exception):
    """Invalid cart operation (unknown item, bad index, negative quantity)."""


def cart_key_for(user_id: Optional[str] = None, client_key: Optional[str] = None) -> str:
    """'user:<id>:cart' for signed-in users, the client-supplied key or 'cart' otherwise."""
    if user_id:
        return "user:%s:%s" % (user_id, DEFAULT_CART_KEY)
    return (client_key or "").strip() or DEFAULT_CART_KEY


class CartStore:
    """Durable key → serialized item list slot."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str) -> List[dict]:
        slot = self.db.query(models.CartSlot).filter(models.CartSlot.key == key).first()
        if not slot or not slot.items_json:
            return []
        return list(slot.items_json)

    def save(self, key: str, items: List[dict]) -> None:
        slot = self.db.query(models.CartSlot).filter(models.CartSlot.key == key).first()
        if slot is None:
            slot = models.CartSlot(key=key)
            self.db.add(slot)
        slot.items_json = items
        self.db.commit()


class CartLedger:

    def __init__(self, store: CartStore, key: str = DEFAULT_CART_KEY):
        self.store = store
        self.key = key
        self._items: List[CartItem] = []
        self._load()

    def _load(self):
        for raw in self.store.load(self.key):
            try:
                self._items.append(CartItem(**raw))
            except (TypeError, ValueError) as e:
                logger.error("Skipping unreadable cart item in %s: %s", self.key, e)

    def _persist(self):
        try:
            self.store.save(self.key, [item.model_dump() for item in self._items])
        except Exception as e:
            logger.warning("Cart %s not persisted: %s", self.key, e)
            self.store.db.rollback()

    # --- Contract ---

    def add(self, item: CartItem) -> CartItem:
        if item.quantity < 0:
            raise CartError("Quantity cannot be negative")
        if not item.item_id:
            item = item.model_copy(update={"item_id": uuid.uuid4().hex})
        self._items.append(item)
        self._persist()
        return item

    def remove(self, item_id: str) -> CartItem:
        for index, item in enumerate(self._items):
            if item.item_id == item_id:
                return self.remove_at(index)
        raise CartError("Cart item not found: %s" % item_id)

    def remove_at(self, index: int) -> CartItem:
        if index < 0 or index >= len(self._items):
            raise CartError("Cart index out of range: %d" % index)
        removed = self._items.pop(index)
        self._persist()
        return removed

    def remove_matching(self, product_id: str, area_name: str, area: float) -> CartItem:
        """Remove the first item equal on product, area name and area — position in the full list."""
        index = self.index_of(product_id, area_name, area)
        if index is None:
            raise CartError("No cart item for product %s in area %s" % (product_id, area_name))
        return self.remove_at(index)

    def index_of(self, product_id: str, area_name: str, area: float) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.product_id == product_id and item.area_name == area_name and item.area == area:
                return index
        return None

    def clear(self) -> None:
        self._items = []
        self._persist()

    def list(self) -> List[CartItem]:
        return list(self._items)

    def total(self) -> float:
        """Σ quantity × unit_price. Unit prices are always 0 for now."""
        return sum(item.quantity * item.unit_price for item in self._items)

    def group_by_area(self) -> Dict[str, List[CartItem]]:
        groups: Dict[str, List[CartItem]] = OrderedDict()
        for item in self._items:
            groups.setdefault(item.area_name, []).append(item)
        return groups

    def __len__(self):
        return len(self._items)
