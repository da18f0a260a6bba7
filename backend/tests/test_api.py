import json
from datetime import datetime, timezone

import pytest

import main


# ---- auth ----

def test_login_unknown_username(client):
    r = client.post("/login", json={"username": "bob", "password": "secret"})
    assert r.status_code == 401
    assert r.json()["detail"] == 'Invalid username. Try "admin" or "staff"'


def test_me_reports_capabilities(client, login):
    r = client.get("/me", headers=login("admin"))
    assert r.status_code == 200
    assert r.json()["role"] == "ADMIN"
    assert "settings:write" in r.json()["capabilities"]

    r = client.get("/me", headers=login("staff"))
    assert r.json()["role"] == "STAFF"
    assert "settings:write" not in r.json()["capabilities"]
    assert "billing" in r.json()["capabilities"]


def test_logout_invalidates_token(client, login):
    headers = login("admin")
    assert client.post("/logout", headers=headers).status_code == 204
    assert client.get("/me", headers=headers).status_code == 401


def test_new_login_replaces_session(client, login):
    admin = login("admin")
    login("staff")
    assert client.get("/me", headers=admin).status_code == 401


def test_requests_without_token_are_rejected(client):
    assert client.get("/cart").status_code in (401, 403)


def test_staff_cannot_reach_admin_areas(client, login):
    staff = login("staff")
    settings = client.get("/settings", headers=staff).json()

    assert client.put("/settings", json=settings, headers=staff).status_code == 403
    assert client.get("/backup", headers=staff).status_code == 403
    assert client.get("/reports/sales-summary", headers=staff).status_code == 403
    assert client.get("/logs", headers=staff).status_code == 403


# ---- catalog and customers ----

def test_product_listing_and_search(client, login):
    headers = login("staff")

    assert client.get("/products", headers=headers).json()["total"] == 5
    assert [p["id"] for p in client.get("/products?q=audio", headers=headers).json()["items"]] == ["4"]
    assert [p["id"] for p in client.get("/products/search?q=galaxy", headers=headers).json()] == ["2"]
    assert client.get("/products/1", headers=headers).json()["availableImeis"] == ["354666060011223", "354666060011224"]
    assert client.get("/products/nope", headers=headers).status_code == 404


def test_customer_directory(client, login):
    headers = login("staff")

    r = client.post("/customers", json={"name": "Asha", "mobile": "9000000001"}, headers=headers)
    assert r.status_code == 201
    assert r.json()["name"] == "Asha"

    r = client.post("/customers", json={"name": "No Mobile"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Name and Mobile are required"

    names = [c["name"] for c in client.get("/customers?q=9000", headers=headers).json()["items"]]
    assert names == ["Asha"]


# ---- billing ----

def test_cart_defaults_to_walk_in(client, login):
    cart = client.get("/cart", headers=login()).json()
    assert cart["items"] == []
    assert cart["customer"]["name"] == "Walk-in Customer"
    assert cart["paymentMode"] == "Cash"


def test_billing_flow_and_checkout(client, login):
    headers = login("staff")

    client.post("/cart/add", json={"productId": "3"}, headers=headers)
    cart = client.post("/cart/add", json={"productId": "3"}, headers=headers).json()
    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 2

    cart = client.post("/cart/scan", json={"code": "354666060011223"}, headers=headers).json()
    phone_line = cart["items"][1]
    assert phone_line["selectedImei"] == "354666060011223"
    assert cart["productSearch"] == ""

    r = client.post("/cart/scan", json={"code": "354666060011223"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "This specific IMEI is already in the cart."

    cart = client.patch(f"/cart/items/{phone_line['cartId']}/quantity", json={"delta": 1}, headers=headers).json()
    assert cart["items"][1]["quantity"] == 1

    cable_id = cart["items"][0]["cartId"]
    cart = client.patch(f"/cart/items/{cable_id}/discount", json={"discount": 150}, headers=headers).json()
    assert cart["items"][0]["discount"] == 100

    cart = client.put("/cart/payment-mode", json={"paymentMode": "UPI"}, headers=headers).json()
    assert cart["paymentMode"] == "UPI"

    r = client.post("/cart/checkout", headers=headers)
    assert r.status_code == 201
    invoice = r.json()
    assert invoice["id"] == "INV-000001"
    assert invoice["status"] == "Paid"
    assert invoice["paymentMode"] == "UPI"
    assert invoice["customerName"] == "Walk-in Customer"
    assert invoice["totalAmount"] == 94282

    phone = client.get("/products/1", headers=headers).json()
    assert phone["stock"] == 1
    assert phone["availableImeis"] == ["354666060011224"]
    assert client.get("/products/3", headers=headers).json()["stock"] == 48
    assert client.get("/cart", headers=headers).json()["items"] == []


def test_checkout_empty_cart_rejected(client, login):
    r = client.post("/cart/checkout", headers=login())
    assert r.status_code == 400
    assert r.json()["detail"] == "Cart is empty"
    assert client.get("/invoices", headers=login()).json()["total"] == 0


def test_add_rejections(client, login):
    headers = login()

    assert client.post("/cart/add", json={"productId": "missing"}, headers=headers).status_code == 404
    r = client.post("/cart/add", json={"productId": "1", "serial": "000"}, headers=headers)
    assert r.status_code == 400

    # Sell the only Galaxy, then try again
    client.post("/cart/scan", json={"code": "358889090011222"}, headers=headers)
    client.post("/cart/checkout", headers=headers)
    r = client.post("/cart/add", json={"productId": "2"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Product is out of stock!"

    r = client.post("/cart/add", json={"productId": "2", "serial": "358889090011222"}, headers=headers)
    assert r.status_code == 400


def test_quantity_over_stock_and_unknown_line(client, login):
    headers = login()
    cart = client.post("/cart/add", json={"productId": "4"}, headers=headers).json()
    line = cart["items"][0]["cartId"]

    r = client.patch(f"/cart/items/{line}/quantity", json={"delta": 10}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Insufficient stock! Available: 5"

    assert client.patch("/cart/items/nope/quantity", json={"delta": 1}, headers=headers).status_code == 404
    assert client.delete("/cart/items/nope", headers=headers).status_code == 404

    cart = client.delete(f"/cart/items/{line}", headers=headers).json()
    assert cart["items"] == []


def test_clear_requires_confirmation(client, login):
    headers = login()
    client.post("/cart/add", json={"productId": "5"}, headers=headers)

    assert client.delete("/cart", headers=headers).status_code == 400
    assert len(client.get("/cart", headers=headers).json()["items"]) == 1
    assert client.delete("/cart?confirm=true", headers=headers).json()["items"] == []


def test_ad_hoc_customer_is_selected_and_snapshotted(client, login):
    headers = login()
    r = client.post("/cart/customer", json={"name": "Asha", "mobile": "9000000001"}, headers=headers)
    assert r.status_code == 201
    assert r.json()["customer"]["name"] == "Asha"

    client.post("/cart/add", json={"productId": "5"}, headers=headers)
    invoice = client.post("/cart/checkout", headers=headers).json()
    assert invoice["customerName"] == "Asha"
    assert invoice["customerMobile"] == "9000000001"


def test_select_existing_customer(client, login):
    headers = login()
    assert client.put("/cart/customer", json={"customerId": "2"}, headers=headers).json()["customer"]["name"] == "Rahul Sharma"
    assert client.put("/cart/customer", json={"customerId": "zzz"}, headers=headers).status_code == 404


def test_invalid_payment_mode(client, login):
    r = client.put("/cart/payment-mode", json={"paymentMode": "Bitcoin"}, headers=login())
    assert r.status_code == 422


# ---- invoices ----

def _sell(client, headers, product_id="5"):
    client.post("/cart/add", json={"productId": product_id}, headers=headers)
    return client.post("/cart/checkout", headers=headers).json()


def test_invoice_history_is_most_recent_first(client, login):
    headers = login()
    first = _sell(client, headers)
    second = _sell(client, headers, "3")

    page = client.get("/invoices", headers=headers).json()
    assert page["total"] == 2
    assert [i["id"] for i in page["items"]] == [second["id"], first["id"]]
    assert client.get(f"/invoices/{first['id']}", headers=headers).json()["id"] == first["id"]
    assert client.get("/invoices/INV-999999", headers=headers).status_code == 404


def test_invoice_pdf(client, login):
    headers = login()
    invoice = _sell(client, headers)

    r = client.get(f"/invoices/{invoice['id']}/pdf", headers=headers)
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")


def test_invoice_share_links(client, login):
    headers = login()
    client.put("/cart/customer", json={"customerId": "2"}, headers=headers)
    invoice = _sell(client, headers)

    links = client.get(f"/invoices/{invoice['id']}/share", headers=headers).json()
    assert links["whatsapp"].startswith("https://wa.me/9898989898?text=")
    assert links["email"].startswith("mailto:rahul@example.com")
    assert invoice["id"] in links["emailSubject"]


# ---- settings, backup, restore ----

def test_update_settings(client, login):
    headers = login("admin")
    settings = client.get("/settings", headers=headers).json()
    settings["shopName"] = "Mobile World"

    assert client.put("/settings", json=settings, headers=headers).json()["shopName"] == "Mobile World"
    assert client.get("/settings", headers=headers).json()["shopName"] == "Mobile World"


def test_backup_and_restore(client, login):
    headers = login("admin")
    r = client.get("/backup", headers=headers)
    assert r.status_code == 200
    assert "shopflow_backup_" in r.headers["content-disposition"]
    backup = r.text
    assert set(json.loads(backup)) == {"products", "customers", "invoices", "settings", "timestamp"}

    _sell(client, headers, "3")
    assert client.get("/products/3", headers=headers).json()["stock"] == 49

    r = client.post("/backup/restore", content=backup, headers=headers)
    assert r.status_code == 200
    assert client.get("/products/3", headers=headers).json()["stock"] == 50
    assert client.get("/invoices", headers=headers).json()["total"] == 0


def test_restore_rejects_garbage(client, login):
    headers = login("admin")
    r = client.post("/backup/restore", content=b"definitely not json", headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Failed to restore backup. Invalid file format."


# ---- dashboard, reports, logs ----

def test_dashboard_stats(client, login):
    headers = login("staff")
    invoice = _sell(client, headers)

    summary = client.get("/stats/summary", headers=headers).json()
    assert summary["total_invoices"] == 1
    assert summary["total_sales"] == invoice["totalAmount"]
    assert summary["today_sales"] == invoice["totalAmount"]
    assert summary["low_stock_products"] == 3

    days = client.get("/stats/daily-sales", headers=headers).json()["data"]
    assert len(days) == 7
    assert days[-1]["sales"] == invoice["totalAmount"]

    low = client.get("/stats/low-stock", headers=headers).json()
    assert [p["id"] for p in low][:3] == ["2", "1", "4"]


def test_sales_summary_report(client, login):
    headers = login("admin")
    _sell(client, headers)
    client.put("/cart/payment-mode", json={"paymentMode": "Card"}, headers=headers)
    _sell(client, headers, "3")

    report = client.get("/reports/sales-summary", headers=headers).json()
    assert report["total_invoices"] == 2
    assert {m["payment_mode"] for m in report["by_payment_mode"]} == {"Cash", "Card"}
    assert len(report["items"]) == 1

    r = client.get("/reports/sales-summary?date_from=not-a-date", headers=headers)
    assert r.status_code == 400


def test_audit_log(client, login):
    headers = login("admin")
    _sell(client, headers)
    client.post("/cart/checkout", headers=headers)

    logs = client.get("/logs?action=CHECKOUT", headers=headers).json()
    assert logs["total"] == 2
    assert [entry["status"] for entry in logs["items"]] == ["FAIL", "SUCCESS"]
    assert all(entry["username"] == "admin" for entry in logs["items"])


def test_restore_rejects_invalid_utf8(client, login):
    headers = login("admin")
    body = b'{"customers": [{"id": "9", "name": "Ra\xffhul", "mobile": "1"}]}'

    r = client.post("/backup/restore", content=body, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Failed to restore backup. Invalid file format."

    names = [c["name"] for c in client.get("/customers", headers=headers).json()["items"]]
    assert names == ["Walk-in Customer", "Rahul Sharma"]


def test_sales_summary_same_day_range(client, login):
    headers = login("admin")
    _sell(client, headers)
    today = datetime.now(timezone.utc).date().isoformat()

    report = client.get(f"/reports/sales-summary?date_from={today}&date_to={today}", headers=headers).json()
    assert report["total_invoices"] == 1
    assert report["items"][0]["date"] == today


@pytest.mark.parametrize("username", [" admin ", "admin ", "Admin", "STAFF"])
def test_login_requires_exact_username(client, username):
    r = client.post("/login", json={"username": username})
    assert r.status_code == 401


def test_run_serves_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main.run()

    assert calls == [(main.app, {"host": main.settings.HOST, "port": main.settings.PORT})]
