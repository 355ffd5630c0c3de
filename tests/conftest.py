"""
Backend falso de la tienda servido con httpx.MockTransport.
La app real corre en proceso con TestClient; solo se sustituye el transporte HTTP.
"""

import copy
import json
from datetime import datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from optom_pos.api_client import ShopApiClient
from optom_pos.main import app
from optom_pos.models import Permission
from optom_pos.terminals import TerminalRegistry, get_client_factory, get_registry

ALL_PERMISSIONS = [p.value for p in Permission]

ROLES = [
    {"id": "r1", "name": "Admin", "permissions": ALL_PERMISSIONS},
    {"id": "r2", "name": "Kassir", "permissions": ["use_sales_terminal"]},
    {"id": "r3", "name": "Omborchi", "permissions": ["manage_warehouse", "legacy_permission"]},
]

EMPLOYEES = [
    {"id": "e1", "name": "Admin", "phone": "+998901112233", "roleId": "r1", "pin": "1111"},
    {"id": "e2", "name": "Dilnoza", "phone": "+998901234567", "roleId": "r2", "pin": "2222"},
    {"id": "e3", "name": "Bobur", "phone": "+998907654321", "roleId": "r3", "pin": "3333"},
]

PRODUCTS = [
    {
        "id": "p1", "name": "Un 1-nav 50kg", "barcode": "4780001", "unit": "qop",
        "purchasePrice": "120000", "salePrice": "150000", "stock": "10", "minStock": "2",
        "status": "active",
    },
    {
        "id": "p2", "name": "Shakar 50kg", "barcode": "4780002", "unit": "qop",
        "purchasePrice": "40000", "salePrice": "50000", "stock": "1", "minStock": "5",
        "status": "active",
    },
    {
        "id": "p3", "name": "Eski guruch", "barcode": "4780003", "unit": "kg",
        "purchasePrice": "10000", "salePrice": "12000", "stock": "0", "minStock": "0",
        "status": "archived",
    },
    {
        "id": "p4", "name": "Yog' 5L", "barcode": "4780004", "unit": "dona",
        "purchasePrice": "80000", "salePrice": "95000", "stock": "0", "minStock": "3",
        "status": "active",
    },
]

CUSTOMERS = [
    {"id": "c1", "name": "Alisher Karimov", "phone": "+998935550011", "debt": "300000"},
    {"id": "c2", "name": "Madina do'koni", "phone": "+998935550022", "debt": "0"},
]

SETTINGS = {
    "id": 1, "name": "Optom Savdo", "address": "Toshkent, Chorsu", "phone": "+998711234567",
    "currency": "so'm", "receiptShowQR": True,
}


def _sale(sale_id, when, items, payments, seller="e2", customer=None):
    subtotal = sum(float(i["quantity"]) * float(i["price"]) for i in items)
    return {
        "id": sale_id,
        "date": when.isoformat(),
        "items": items,
        "subtotal": str(subtotal),
        "discount": "0",
        "total": str(subtotal),
        "payments": payments,
        "customerId": customer,
        "sellerId": seller,
    }


class FakeShopBackend:
    """Implementa el subconjunto de la API REST que usa la terminal."""

    def __init__(self):
        now = datetime.now().replace(microsecond=0)
        self.roles = copy.deepcopy(ROLES)
        self.employees = copy.deepcopy(EMPLOYEES)
        self.products = copy.deepcopy(PRODUCTS)
        self.customers = copy.deepcopy(CUSTOMERS)
        self.settings = copy.deepcopy(SETTINGS)
        self.suppliers = [{"id": "sp1", "name": "Agro Trade", "phone": "+998712000000"}]
        self.units = [{"id": "u1", "name": "qop"}, {"id": "u2", "name": "kg"}]
        self.debt_payments = []
        self.goods_receipts = []
        self.stock_movements = [
            {"id": "m1", "productId": "p1", "quantity": "10", "type": "kirim",
             "date": (now - timedelta(days=5)).isoformat()},
            {"id": "m2", "productId": "p2", "quantity": "4", "type": "kirim",
             "date": (now - timedelta(days=4)).isoformat()},
            {"id": "m3", "productId": "p1", "quantity": "2", "type": "savdo",
             "date": (now - timedelta(days=1)).isoformat(), "relatedId": "s-1001"},
        ]
        self.expenses = []
        self.warehouses = [{"id": "w1", "name": "Asosiy ombor", "isActive": True}]
        self.warehouse_products = []
        self.sales = [
            _sale("s-1001", now - timedelta(days=1),
                  [{"productId": "p1", "quantity": "2", "price": "150000"}],
                  [{"type": "naqd", "amount": "300000"}], customer="c1"),
            _sale("s-1002", now - timedelta(days=3),
                  [{"productId": "p2", "quantity": "1", "price": "50000"}],
                  [{"type": "plastik", "amount": "50000"}], seller="e1"),
        ]
        self.fail_sales = False
        self.down = False
        self.broken_me = False
        self.requests = []
        self._next_id = 100

    # --- helpers ---
    def _new_id(self, prefix):
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def _employee(self, employee_id):
        employee = next(e for e in self.employees if e["id"] == employee_id)
        data = {k: v for k, v in employee.items() if k != "pin"}
        data["role"] = next((r for r in self.roles if r["id"] == employee["roleId"]), None)
        return data

    def _customer(self, customer_id):
        return next((c for c in self.customers if c["id"] == customer_id), None)

    def _expand_sale(self, sale):
        data = dict(sale)
        data["seller"] = self._employee(sale["sellerId"])
        data["customer"] = self._customer(sale["customerId"]) if sale.get("customerId") else None
        return data

    def _collection(self, entity):
        return getattr(self, entity.replace("-", "_"), None)

    def initial_data(self):
        return {
            "products": self.products,
            "customers": self.customers,
            "suppliers": self.suppliers,
            "sales": [self._expand_sale(s) for s in self.sales],
            "debtPayments": self.debt_payments,
            "units": self.units,
            "goodsReceipts": self.goods_receipts,
            "roles": self.roles,
            "employees": [self._employee(e["id"]) for e in self.employees],
            "stockMovements": self.stock_movements,
            "settings": self.settings,
        }

    # --- transporte ---
    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path[len("/api"):]
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        token = request.headers.get("Authorization", "").replace("Bearer ", "")
        current = token[len("tok-"):] if token.startswith("tok-") else None

        if path == "/auth/login/":
            employee = next((e for e in self.employees if e["pin"] == body.get("pin")), None)
            if employee is None:
                return httpx.Response(401, json={"detail": "Noto'g'ri PIN"})
            return httpx.Response(200, json={"token": f"tok-{employee['id']}"})

        if current is None:
            return httpx.Response(401, json={"detail": "Authentication credentials were not provided."})

        if path == "/auth/me/":
            if self.broken_me:
                return httpx.Response(200, json={"unexpected": True})
            return httpx.Response(200, json=self._employee(current))
        if path == "/data/initial/":
            return httpx.Response(200, json=self.initial_data())

        if path == "/sales/" and request.method == "POST":
            if self.fail_sales:
                return httpx.Response(400, json={"stock": ["Omborda yetarli mahsulot yo'q"]})
            sale = dict(body, id=self._new_id("s"), date=datetime.now().isoformat(), sellerId=current)
            self.sales.append(sale)
            return httpx.Response(201, json=self._expand_sale(sale))

        if path == "/debt-payments/":
            customer = self._customer(body["customerId"])
            customer["debt"] = str(float(customer["debt"]) - float(body["amount"]))
            payment = dict(body, id=self._new_id("dp"), date=datetime.now().isoformat())
            self.debt_payments.append(payment)
            return httpx.Response(201, json=payment)

        if path == "/settings/" and request.method == "PUT":
            self.settings.update(body)
            return httpx.Response(200, json=self.settings)

        # CRUD genérico: /{entidad}/ y /{entidad}/{id}/
        parts = [p for p in path.split("/") if p]
        items = self._collection(parts[0]) if parts else None
        if items is None:
            return httpx.Response(404, json={"detail": "Not found."})

        if len(parts) == 1 and request.method == "GET":
            return httpx.Response(200, json=items)
        if len(parts) == 1 and request.method == "POST":
            entity = dict(body, id=self._new_id(parts[0][:2]))
            items.append(entity)
            return httpx.Response(201, json=entity)

        entity = next((e for e in items if str(e["id"]) == parts[1]), None)
        if entity is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if request.method == "PUT":
            entity.update(body)
            return httpx.Response(200, json=entity)
        if request.method == "DELETE":
            items.remove(entity)
            return httpx.Response(204)

        return httpx.Response(405, json={"detail": "Method not allowed."})


@pytest.fixture
def backend():
    return FakeShopBackend()


@pytest.fixture
def client_factory(backend):
    """Fábrica de clientes contra el backend falso; guarda cada cliente creado en `created`."""
    def factory():
        api = ShopApiClient(base_url="http://shop.test/api", transport=httpx.MockTransport(backend.handler))
        factory.created.append(api)
        return api

    factory.created = []
    return factory


@pytest.fixture
def client(client_factory):
    registry = TerminalRegistry()
    app.dependency_overrides[get_client_factory] = lambda: client_factory
    app.dependency_overrides[get_registry] = lambda: registry

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def login(client, pin="1111"):
    r = client.post("/api/auth/login", json={"pin": pin})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def admin(client):
    return login(client, "1111")


@pytest.fixture
def cashier(client):
    return login(client, "2222")


@pytest.fixture
def login_as(client):
    def _login(pin):
        return login(client, pin)
    return _login
