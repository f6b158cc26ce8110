"""JSON-file-backed unit of work.

Entering the block takes the data directory's lock and loads every
collection twice: a *base* snapshot and a *working* copy the
repositories read and modify.  ``commit()`` writes the collections whose
working copy differs from the base, after checking that the file on disk
still matches the base.  If another process wrote in between, nothing is
written and ``ConcurrencyConflictError`` is raised.  The files themselves
are replaced together through ``JsonStore.write_many``, so a storage
error part way through leaves every collection as it was.

A unit of work instance is not meant to be shared between threads; give
each thread its own (they still serialize on the shared store lock).
"""

from __future__ import annotations

import copy
import logging

from backoffice.domain.exceptions import ConcurrencyConflictError
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.infrastructure.persistence.json_booking_repository import (
    JsonBookingRepository,
    JsonServiceRepository,
)
from backoffice.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from backoffice.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from backoffice.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from backoffice.infrastructure.persistence.json_parts_request_repository import (
    JsonPartsRequestRepository,
)
from backoffice.infrastructure.persistence.json_sku_repository import (
    JsonSkuRepository,
)
from backoffice.infrastructure.persistence.json_store import COLLECTIONS, JsonStore

logger = logging.getLogger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._base: dict[str, list[dict]] = {}
        self._working: dict[str, list[dict]] = {}

    # --- UnitOfWork interface -------------------------------------------------

    def commit(self) -> None:
        dirty = [
            name for name in COLLECTIONS if self._working[name] != self._base[name]
        ]
        # Check everything before writing anything.
        for name in dirty:
            if self._store.read(name) != self._base[name]:
                logger.warning("Commit aborted: %s changed on disk", name)
                raise ConcurrencyConflictError(
                    f"{name} was modified by another process; retry the operation"
                )
        if dirty:
            self._store.write_many({name: self._working[name] for name in dirty})
            for name in dirty:
                self._base[name] = copy.deepcopy(self._working[name])
            logger.debug("Committed %s", ", ".join(dirty))

    def rollback(self) -> None:
        for name, records in self._working.items():
            # Repositories hold references to these lists; refill in place.
            records[:] = copy.deepcopy(self._base[name])

    def _begin(self) -> None:
        self._store.lock.acquire()
        try:
            self._base = {name: self._store.read(name) for name in COLLECTIONS}
        except BaseException:
            self._store.lock.release()
            raise
        self._working = copy.deepcopy(self._base)

        self.skus = JsonSkuRepository(self._working["skus"])
        self.carts = JsonCartRepository(self._working["carts"])
        self.orders = JsonOrderRepository(self._working["orders"])
        self.parts_requests = JsonPartsRequestRepository(self._working["parts_requests"])
        self.invoices = JsonInvoiceRepository(self._working["invoices"])
        self.bookings = JsonBookingRepository(self._working["bookings"])
        self.services = JsonServiceRepository(self._working["services"])

    def _end(self) -> None:
        self._base = {}
        self._working = {}
        self._store.lock.release()
