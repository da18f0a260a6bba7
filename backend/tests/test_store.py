import json

import pytest

from schemas.common import PaymentMode
from schemas.customer import Customer
from services.cart import CartEngine
from services.catalog import find_product
from services.checkout import checkout
from services.customers import default_customer
from store import MemoryStore, STORAGE_KEYS
from utils.tokenJWT import find_user


def test_unwritten_collections_fall_back_to_seed(store):
    assert [p.id for p in store.get_products()] == ["1", "2", "3", "4", "5"]
    assert [c.name for c in store.get_customers()] == ["Walk-in Customer", "Rahul Sharma"]
    assert store.get_invoices() == []
    assert store.get_settings().shop_name == "TechMobile Electronics"
    assert store.get_session() is None


def test_documents_are_stored_camel_case(store):
    store.save_products(store.get_products())

    first = store.data[STORAGE_KEYS["PRODUCTS"]][0]
    assert first["gstPercent"] == 18
    assert first["availableImeis"] == ["354666060011223", "354666060011224"]


def test_add_customer_appends(store):
    store.add_customer(Customer(id="c9", name="Meera", mobile="9000000000"))
    assert store.get_customers()[-1].id == "c9"


def test_session_round_trip(store):
    store.save_session(find_user("staff"))
    assert store.get_session().role == "STAFF"

    store.clear_session()
    assert store.get_session() is None


def _sell_something(store):
    cart = CartEngine()
    cart.add_item(find_product(store.get_products(), "1"), "354666060011224")
    cart.add_item(find_product(store.get_products(), "3"))
    checkout(store, cart, default_customer(store.get_customers()), PaymentMode.CARD)


def test_backup_document_layout(store):
    data = json.loads(store.create_backup())
    assert set(data) == {"products", "customers", "invoices", "settings", "timestamp"}
    assert data["settings"]["shopName"] == "TechMobile Electronics"


def test_restore_reproduces_backup(store):
    _sell_something(store)
    store.add_customer(Customer(id="c9", name="Meera", mobile="9000000000"))
    backup = store.create_backup()

    fresh = MemoryStore()
    assert fresh.restore_backup(backup) is True

    assert fresh.get_products() == store.get_products()
    assert fresh.get_customers() == store.get_customers()
    assert fresh.get_invoices() == store.get_invoices()
    assert fresh.get_settings() == store.get_settings()


@pytest.mark.parametrize("raw", ["not json", "{broken", "[1, 2, 3]", ""])
def test_restore_rejects_unparsable_documents(store, raw):
    assert store.restore_backup(raw) is False
    assert store.data == {}


def test_restore_accepts_partial_backup(store):
    customers = [{"id": "x1", "name": "Only Customer", "mobile": "1", "email": "", "address": ""}]

    assert store.restore_backup(json.dumps({"customers": customers})) is True

    assert [c.name for c in store.get_customers()] == ["Only Customer"]
    assert STORAGE_KEYS["PRODUCTS"] not in store.data


def test_restore_skips_malformed_collections(store):
    doc = {
        "products": [{"id": "no-name-or-price"}],
        "settings": {"shopName": "Restored Shop"},
        "invoices": None,
    }

    assert store.restore_backup(json.dumps(doc)) is True

    assert len(store.get_products()) == 5
    assert store.get_settings().shop_name == "Restored Shop"
    assert STORAGE_KEYS["INVOICES"] not in store.data


def test_memory_store_atomic_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.atomic():
            store.save_products([])
            raise RuntimeError("boom")

    assert len(store.get_products()) == 5


def test_sql_store_persists_json(sql_store):
    _sell_something(sql_store)

    phone = find_product(sql_store.get_products(), "1")
    assert phone.stock == 1
    assert phone.available_imeis == ["354666060011223"]
    assert sql_store.get_invoices()[0].id == "INV-000001"


def test_sql_store_atomic_rolls_back(sql_store):
    sql_store.save_settings(sql_store.get_settings().model_copy(update={"shop_name": "Before"}))

    with pytest.raises(RuntimeError):
        with sql_store.atomic():
            sql_store.save_products([])
            sql_store.save_settings(sql_store.get_settings().model_copy(update={"shop_name": "After"}))
            raise RuntimeError("boom")

    assert len(sql_store.get_products()) == 5
    assert sql_store.get_settings().shop_name == "Before"


def test_sql_store_restore_round_trip(sql_store):
    _sell_something(sql_store)
    backup = sql_store.create_backup()

    fresh = MemoryStore()
    fresh.restore_backup(backup)
    assert fresh.get_invoices() == sql_store.get_invoices()
    assert fresh.get_products() == sql_store.get_products()
