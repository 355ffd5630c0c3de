from decimal import Decimal


# --- Autenticación ---

def test_login_wrong_pin(client):
    r = client.post("/api/auth/login", json={"pin": "9999"})
    assert r.status_code == 401
    assert r.json()["detail"] == "PIN noto'g'ri."


def test_login_pin_format(client):
    r = client.post("/api/auth/login", json={"pin": "12"})
    assert r.status_code == 400


def test_login_backend_down(client, backend):
    backend.down = True
    r = client.post("/api/auth/login", json={"pin": "1111"})
    assert r.status_code == 502


def test_login_malformed_profile_is_bad_gateway(client, backend, client_factory):
    backend.broken_me = True
    r = client.post("/api/auth/login", json={"pin": "1111"})
    assert r.status_code == 502
    assert client_factory.created[-1].client.is_closed


def test_reload_fetches_everything_again(client, backend, admin):
    before = len(backend.requests)
    assert client.post("/api/auth/reload", headers=admin).status_code == 200
    paths = [path for _, path, _ in backend.requests[before:]]
    assert paths == ["/data/initial/", "/warehouses/", "/warehouse-products/", "/auth/me/"]


# --- Catálogo y carrito ---

def test_product_search(client, cashier):
    r = client.get("/api/products/", params={"search": "un"}, headers=cashier)
    assert [p["id"] for p in r.json()] == ["p1"]
    r = client.get("/api/products/", params={"search": "4780002"}, headers=cashier)
    assert [p["id"] for p in r.json()] == ["p2"]
    # Archivados no aparecen en la terminal
    r = client.get("/api/products/", headers=cashier)
    assert "p3" not in [p["id"] for p in r.json()]


def test_select_product_without_stock(client, cashier):
    r = client.post("/api/cart/items/p4/select", headers=cashier)
    assert r.status_code == 400
    assert r.json()["detail"] == "Bu mahsulotdan qoldiq yo'q!"
    assert client.post("/api/cart/items/p1/select", headers=cashier).status_code == 200


def test_cart_lines(client, cashier):
    r = client.post("/api/cart/items", json={"productId": "p2", "quantity": 3}, headers=cashier)
    line = r.json()["items"][0]
    assert line["stockLow"] is True
    assert Decimal(line["lineTotal"]) == 150000

    r = client.post(
        "/api/cart/items", json={"productId": "p2", "quantity": 1, "wholesalePrice": "45000"}, headers=cashier
    )
    line = r.json()["items"][0]
    assert Decimal(line["quantity"]) == 4
    assert Decimal(line["price"]) == 45000

    r = client.put("/api/cart/items/p2", json={"price": "-1"}, headers=cashier)
    assert r.status_code == 400
    r = client.put("/api/cart/items/p2", json={"quantity": 0}, headers=cashier)
    assert r.json()["items"] == []

    assert client.post("/api/cart/items", json={"productId": "zzz"}, headers=cashier).status_code == 404
    assert client.delete("/api/cart/items/p1", headers=cashier).status_code == 404


def test_discount_out_of_range(client, cashier):
    client.post("/api/cart/items", json={"productId": "p1"}, headers=cashier)
    r = client.put("/api/cart/discount", json={"discount": "150001"}, headers=cashier)
    assert r.status_code == 400


def test_select_unknown_customer(client, cashier):
    r = client.put("/api/cart/customer", json={"customerId": "c404"}, headers=cashier)
    assert r.status_code == 404


def test_quick_add_customer_selects_it(client, backend, cashier):
    r = client.post("/api/cart/customer", json={"name": "Yangi mijoz", "phone": "+998900000000"}, headers=cashier)
    assert r.status_code == 200
    created = backend.customers[-1]
    assert created["name"] == "Yangi mijoz"
    assert r.json()["customerId"] == created["id"]

    r = client.post("/api/cart/customer", json={"name": " ", "phone": "+998"}, headers=cashier)
    assert r.status_code == 422


# --- Clientes y nasiya ---

def test_customer_list_for_terminal(client, cashier):
    r = client.get("/api/customers/", params={"search": "alisher"}, headers=cashier)
    assert [c["id"] for c in r.json()] == ["c1"]
    # Crear clientes desde el catálogo requiere manage_customers
    r = client.post("/api/customers/", json={"name": "X", "phone": "1"}, headers=cashier)
    assert r.status_code == 403


def test_pay_debt(client, backend, admin):
    r = client.post("/api/customers/c1/pay", json={"amount": "100000", "paymentType": "plastik"}, headers=admin)
    assert r.status_code == 200
    assert Decimal(r.json()["debt"]) == 200000
    assert backend.debt_payments[-1]["paymentType"] == "plastik"

    r = client.get("/api/customers/c1/payments", headers=admin)
    assert len(r.json()) == 1


def test_pay_debt_limits(client, admin):
    r = client.post("/api/customers/c1/pay", json={"amount": "300000.01"}, headers=admin)
    assert r.status_code == 400
    assert r.json()["detail"] == "To'lov summasi qarzdan oshmasligi kerak: 300 000 so'm"

    r = client.post("/api/customers/c1/pay", json={"amount": "0"}, headers=admin)
    assert r.status_code == 400

    r = client.post("/api/customers/c1/pay", json={"amount": "10", "paymentType": "nasiya"}, headers=admin)
    assert r.status_code == 422

    r = client.post("/api/customers/c404/pay", json={"amount": "10"}, headers=admin)
    assert r.status_code == 404


def test_customer_crud(client, backend, admin):
    r = client.post("/api/customers/", json={"name": "Sardor", "phone": "+998911"}, headers=admin)
    assert r.status_code == 200
    customer_id = r.json()["id"]

    r = client.put(f"/api/customers/{customer_id}", json={"address": "Samarqand"}, headers=admin)
    assert r.status_code == 200
    assert backend._customer(customer_id)["address"] == "Samarqand"

    assert client.delete(f"/api/customers/{customer_id}", headers=admin).status_code == 200
    assert backend._customer(customer_id) is None


# --- Entidades genéricas ---

def test_employee_pin_rules(client, admin):
    base = {"name": "Kamola", "phone": "+998", "roleId": "r2"}
    assert client.post("/api/employees/", json=base, headers=admin).status_code == 422
    assert client.post("/api/employees/", json=dict(base, pin="123"), headers=admin).status_code == 422
    assert client.post("/api/employees/", json=dict(base, pin="12a4"), headers=admin).status_code == 422

    r = client.post("/api/employees/", json=dict(base, pin="4321"), headers=admin)
    assert r.status_code == 200
    employees = client.get("/api/employees/", headers=admin).json()
    assert "Kamola" in [e["name"] for e in employees]


def test_roles_accept_only_known_permissions(client, admin):
    r = client.post("/api/roles/", json={"name": "Sotuvchi", "permissions": ["use_sales_terminal"]}, headers=admin)
    assert r.status_code == 200
    r = client.post("/api/roles/", json={"name": "X", "permissions": ["fly"]}, headers=admin)
    assert r.status_code == 422


def test_entity_permissions(client, login_as):
    cashier = login_as("2222")
    keeper = login_as("3333")
    assert client.post("/api/expenses/", json={"amount": "5000", "typeId": 1}, headers=cashier).status_code == 403
    assert client.get("/api/suppliers/", headers=keeper).status_code == 403
    assert client.get("/api/warehouses/", headers=keeper).status_code == 200
    r = client.post("/api/warehouses/", json={"name": "Filial ombor"}, headers=keeper)
    assert r.status_code == 200


def test_unit_update_and_delete(client, backend, admin):
    r = client.put("/api/units/u2", json={"name": "kilogramm"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["name"] == "kilogramm"
    assert client.delete("/api/units/u2", headers=admin).status_code == 200
    assert [u["id"] for u in backend.units] == ["u1"]


def test_upstream_not_found_is_passed_through(client, admin):
    r = client.delete("/api/units/u999", headers=admin)
    assert r.status_code == 404
    assert r.json()["detail"] == "detail: Not found."


# --- Entradas de mercancía ---

def test_goods_receipt_total_computed_locally(client, backend, admin):
    body = {
        "supplierId": "sp1",
        "docNumber": "K-17",
        "items": [
            {"productId": "p1", "quantity": "10", "purchasePrice": "120000"},
            {"productId": "p2", "quantity": "2.5", "purchasePrice": "40000"},
        ],
    }
    r = client.post("/api/inventory/goods-receipts", json=body, headers=admin)
    assert r.status_code == 200, r.text
    assert Decimal(r.json()["totalAmount"]) == Decimal("1300000")

    sent = [b for m, p, b in backend.requests if p == "/goods-receipts/"][-1]
    assert sent["totalAmount"] == "1300000.00"


def test_goods_receipt_validation(client, admin):
    r = client.post("/api/inventory/goods-receipts", json={"supplierId": "sp1", "items": []}, headers=admin)
    assert r.status_code == 400
    item = {"productId": "p1", "quantity": "0", "purchasePrice": "1"}
    r = client.post("/api/inventory/goods-receipts", json={"supplierId": "sp1", "items": [item]}, headers=admin)
    assert r.status_code == 422
    item["quantity"] = "1"
    for supplier in ("", "   "):
        r = client.post(
            "/api/inventory/goods-receipts", json={"supplierId": supplier, "items": [item]}, headers=admin
        )
        assert r.status_code == 422


def test_stock_movements_by_product(client, admin, cashier, login_as):
    r = client.get("/api/inventory/movements", params={"product_id": "p1"}, headers=admin)
    assert r.status_code == 200
    assert [m["id"] for m in r.json()] == ["m3", "m1"]

    r = client.get("/api/inventory/movements", headers=admin)
    assert [m["id"] for m in r.json()] == ["m3", "m2", "m1"]

    keeper = login_as("3333")
    assert client.get("/api/inventory/movements", headers=keeper).status_code == 200
    assert client.get("/api/inventory/movements", headers=cashier).status_code == 403


# --- Ventas, configuración y reportes ---

def test_sales_history_filters(client, admin, cashier):
    r = client.get("/api/sales/", params={"search": "alisher"}, headers=admin)
    assert [s["id"] for s in r.json()] == ["s-1001"]
    r = client.get("/api/sales/", params={"search": "1002"}, headers=admin)
    assert [s["id"] for s in r.json()] == ["s-1002"]
    r = client.get("/api/sales/", headers=admin)
    assert [s["id"] for s in r.json()] == ["s-1001", "s-1002"]

    assert client.get("/api/sales/", headers=cashier).status_code == 403
    assert client.get("/api/sales/last", headers=cashier).status_code == 404


def test_update_settings(client, backend, admin):
    r = client.put("/api/settings/", json={"receiptHeader": "Rahmat!", "receiptShowQR": False}, headers=admin)
    assert r.status_code == 200
    assert r.json()["receiptHeader"] == "Rahmat!"
    assert r.json()["receiptShowQR"] is False
    assert backend.settings["receiptShowQR"] is False


def test_reports(client, admin):
    r = client.get("/api/reports/summary", headers=admin)
    assert r.status_code == 200
    assert "totalSales" in r.json()

    r = client.get("/api/reports/summary", params={"start": "2024-02-01", "end": "2024-01-01"}, headers=admin)
    assert r.status_code == 400

    r = client.get("/api/reports/dashboard", headers=admin)
    js = r.json()
    assert len(js["salesLast7Days"]) == 7
    assert js["lowStockCount"] == 2


def test_unknown_api_route(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"detail": "Resurs topilmadi"}
