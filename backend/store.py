# backend/store.py
import copy
import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, List, Optional

from fastapi import Depends
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from database import get_db
from models.store import StoreEntry
from schemas.customer import Customer
from schemas.invoice import Invoice
from schemas.product import Product
from schemas.shop import ShopSettings
from schemas.user import User
from utils.seed import DEFAULT_SETTINGS, SEED_CUSTOMERS, SEED_PRODUCTS

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "PRODUCTS": "shopflow_products",
    "CUSTOMERS": "shopflow_customers",
    "INVOICES": "shopflow_invoices",
    "SETTINGS": "shopflow_settings",
    "SESSION": "shopflow_session",
    "INVOICE_SEQ": "shopflow_invoice_seq",
}

_products = TypeAdapter(List[Product])
_customers = TypeAdapter(List[Customer])
_invoices = TypeAdapter(List[Invoice])


def _dump(models) -> list:
    return [m.to_store() for m in models]


class Store:
    """
    Key-value store of JSON documents, one per POS collection.

    Subclasses implement ``_read``, ``_write``, ``_delete`` and ``atomic``.
    Every write performed inside ``with store.atomic():`` lands together or
    not at all.
    """

    def _read(self, key: str) -> Any:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    def atomic(self):
        raise NotImplementedError

    # --- Products ---
    def get_products(self) -> List[Product]:
        data = self._read(STORAGE_KEYS["PRODUCTS"])
        return _products.validate_python(SEED_PRODUCTS if data is None else data)

    def save_products(self, products: List[Product]) -> None:
        self._write(STORAGE_KEYS["PRODUCTS"], _dump(products))

    # --- Customers ---
    def get_customers(self) -> List[Customer]:
        data = self._read(STORAGE_KEYS["CUSTOMERS"])
        return _customers.validate_python(SEED_CUSTOMERS if data is None else data)

    def save_customers(self, customers: List[Customer]) -> None:
        self._write(STORAGE_KEYS["CUSTOMERS"], _dump(customers))

    def add_customer(self, customer: Customer) -> None:
        customers = self.get_customers()
        customers.append(customer)
        self.save_customers(customers)

    # --- Invoices ---
    def get_invoices(self) -> List[Invoice]:
        data = self._read(STORAGE_KEYS["INVOICES"])
        return _invoices.validate_python(data or [])

    def save_invoices(self, invoices: List[Invoice]) -> None:
        self._write(STORAGE_KEYS["INVOICES"], _dump(invoices))

    def prepend_invoice(self, invoice: Invoice) -> None:
        # History is kept most-recent-first
        invoices = self.get_invoices()
        invoices.insert(0, invoice)
        self.save_invoices(invoices)

    def next_invoice_number(self) -> int:
        n = int(self._read(STORAGE_KEYS["INVOICE_SEQ"]) or 0) + 1
        self._write(STORAGE_KEYS["INVOICE_SEQ"], n)
        return n

    # --- Settings ---
    def get_settings(self) -> ShopSettings:
        data = self._read(STORAGE_KEYS["SETTINGS"])
        return ShopSettings.model_validate(DEFAULT_SETTINGS if data is None else data)

    def save_settings(self, settings: ShopSettings) -> None:
        self._write(STORAGE_KEYS["SETTINGS"], settings.to_store())

    # --- Session ---
    def get_session(self) -> Optional[User]:
        data = self._read(STORAGE_KEYS["SESSION"])
        return User.model_validate(data) if data else None

    def save_session(self, user: User) -> None:
        self._write(STORAGE_KEYS["SESSION"], user.model_dump(mode="json"))

    def clear_session(self) -> None:
        self._delete(STORAGE_KEYS["SESSION"])

    # --- Backup / Restore ---
    def create_backup(self) -> str:
        backup = {
            "products": _dump(self.get_products()),
            "customers": _dump(self.get_customers()),
            "invoices": _dump(self.get_invoices()),
            "settings": self.get_settings().to_store(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(backup)

    def restore_backup(self, raw: str) -> bool:
        """
        Overwrite the collections present in a backup document.

        A document that does not parse (or is not a JSON object) is rejected
        before anything is written. Keys that are missing, null or fail
        validation are left alone; partial backups are valid.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error("Restore failed: %s", e)
            return False
        if not isinstance(data, dict):
            logger.error("Restore failed: backup is not a JSON object")
            return False

        collections = {
            "products": (_products.validate_python, self.save_products),
            "customers": (_customers.validate_python, self.save_customers),
            "invoices": (_invoices.validate_python, self.save_invoices),
            "settings": (ShopSettings.model_validate, self.save_settings),
        }
        with self.atomic():
            for name, (validate, save) in collections.items():
                if data.get(name) is None:
                    continue
                try:
                    value = validate(data[name])
                except ValidationError as e:
                    logger.warning("Restore skipped malformed '%s': %s", name, e.error_count())
                    continue
                save(value)
        return True


class SqlStore(Store):
    """Store backed by the ``store_entries`` table."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    def _read(self, key):
        entry = self.db.get(StoreEntry, key)
        return copy.deepcopy(entry.value) if entry else None

    def _write(self, key, value):
        entry = self.db.get(StoreEntry, key)
        if entry:
            entry.value = value
        else:
            self.db.add(StoreEntry(key=key, value=value))
        self._flush_or_commit()

    def _delete(self, key):
        entry = self.db.get(StoreEntry, key)
        if entry:
            self.db.delete(entry)
            self._flush_or_commit()

    def _flush_or_commit(self):
        # Inside atomic() writes are only flushed; the outermost block commits
        if self._depth:
            self.db.flush()
        else:
            self.db.commit()

    @contextmanager
    def atomic(self) -> Iterator["SqlStore"]:
        self._depth += 1
        try:
            yield self
            if self._depth == 1:
                self.db.commit()
        except Exception:
            if self._depth == 1:
                self.db.rollback()
            raise
        finally:
            self._depth -= 1


class MemoryStore(Store):
    """Dict-backed store, used in tests and for scratch sessions."""

    def __init__(self, data: Optional[dict] = None):
        self.data = copy.deepcopy(data) if data else {}

    def _read(self, key):
        return copy.deepcopy(self.data.get(key))

    def _write(self, key, value):
        self.data[key] = copy.deepcopy(value)

    def _delete(self, key):
        self.data.pop(key, None)

    @contextmanager
    def atomic(self) -> Iterator["MemoryStore"]:
        snapshot = copy.deepcopy(self.data)
        try:
            yield self
        except Exception:
            self.data = snapshot
            raise


def get_store(db: Session = Depends(get_db)) -> Store:
    return SqlStore(db)
