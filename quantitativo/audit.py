"""
Audit mirror — best-effort copy of calculations and cart additions into the
remote `calculos` and `carrinho` tables.

enqueue() never blocks and never raises. A single worker thread drains the
queue and inserts rows through the Supabase client; failures are logged and
the row is dropped. Without a remote client every enqueue is a no-op.
"""

import logging
import queue
import threading
from datetime import datetime
from typing import Optional

from .config import settings
from .remote import RemoteError, SupabaseClient, get_remote_client
from .schemas import CalculationResult, CartItem

logger = logging.getLogger(__name__)

CALCULATIONS_TABLE = "calculos"
CART_TABLE = "carrinho"

_STOP = object()


class AuditMirror:

    def __init__(self, client: Optional[SupabaseClient], maxsize: int = 500):
        self.client = client
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._worker: Optional[threading.Thread] = None
        self.dropped = 0
        self._dropped_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def start(self) -> None:
        if not self.enabled or (self._worker and self._worker.is_alive()):
            return
        self._worker = threading.Thread(target=self._run, name="audit-mirror", daemon=True)
        self._worker.start()
        logger.info("Audit mirror started")

    def stop(self, timeout: float = 5.0) -> None:
        """Drain what is queued, then stop the worker."""
        if not self._worker:
            return
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            logger.warning("Audit queue still full at shutdown — %d rows abandoned", self._queue.qsize())
            return
        self._worker.join(timeout)
        self._worker = None
        logger.info("Audit mirror stopped")

    def flush(self) -> None:
        """Block until every queued row has been handled."""
        if self._worker:
            self._queue.join()

    def enqueue(self, table: str, row: dict) -> bool:
        if not self.enabled:
            return False
        if not self._worker or not self._worker.is_alive():
            self.start()
        try:
            self._queue.put_nowait((table, row))
            return True
        except queue.Full:
            self._count_drop()
            logger.warning("Audit queue full — dropping %s row", table)
            return False

    def _run(self):
        while True:
            entry = self._queue.get()
            try:
                if entry is _STOP:
                    return
                table, row = entry
                self._send(table, row)
            finally:
                self._queue.task_done()

    def _send(self, table: str, row: dict) -> None:
        try:
            self.client.insert(table, row)
        except RemoteError as e:
            self._count_drop()
            logger.warning("Audit insert into %s failed: %s", table, e)
        except Exception as e:
            self._count_drop()
            logger.error("Audit insert into %s crashed: %s", table, e)

    def _count_drop(self) -> None:
        # Called from request threads (queue full) and the worker (insert failed)
        with self._dropped_lock:
            self.dropped += 1

    # --- Row builders ---

    def record_calculation(self, result: CalculationResult, user_id: Optional[str] = None) -> bool:
        return self.enqueue(CALCULATIONS_TABLE, {
            "usuario_id": user_id,
            "produto_id": result.product_id,
            "area": result.area,
            "modo": result.mode,
            "consumo": result.consumption_rate_used,
            "quantidade_kg": round(result.required_mass, 3),
            "embalagens": result.package_count,
            "criado_em": datetime.utcnow().isoformat(),
        })

    def record_cart_addition(self, item: CartItem, user_id: Optional[str] = None) -> bool:
        return self.enqueue(CART_TABLE, {
            "usuario_id": user_id,
            "produto_id": item.product_id,
            "nome_area": item.area_name,
            "area": item.area,
            "quantidade": item.quantity,
            "quantidade_kg": round(item.total_amount, 3),
            "criado_em": datetime.utcnow().isoformat(),
        })


_mirror: Optional[AuditMirror] = None


def get_audit_mirror() -> AuditMirror:
    """Process-wide mirror, built from settings on first use."""
    global _mirror
    if _mirror is None:
        _mirror = AuditMirror(get_remote_client(), maxsize=settings.AUDIT_QUEUE_SIZE)
    return _mirror
