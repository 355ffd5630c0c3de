"""Cliente HTTP del backend remoto de la tienda."""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from optom_pos.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Noma'lum server xatoligi."


class UpstreamError(Exception):
    """El backend respondió con error (o no respondió)."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def format_error_body(body: Any) -> str:
    """
    Convierte el cuerpo de error del backend en texto para el operador.
    {"stock": ["Yetarli emas"], "total": "xato"} -> "stock: Yetarli emas\\ntotal: xato"
    """
    if isinstance(body, dict) and body:
        lines = []
        for key, value in body.items():
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(v) for v in value)
            lines.append(f"{key}: {value}")
        return "\n".join(lines)
    if isinstance(body, list) and body:
        return ", ".join(str(v) for v in body)
    if isinstance(body, str) and body.strip():
        return body.strip()
    return UNKNOWN_ERROR


def as_payload(data: Any, exclude_unset: bool = False) -> Any:
    """Modelos pydantic -> JSON en camelCase (Decimal viaja como texto)."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
    return data


class ShopApiClient:
    """Acceso REST al backend: autenticación, carga inicial y mutaciones."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client = httpx.Client(
            base_url=base_url or settings.shop_api_url,
            timeout=timeout or settings.shop_api_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._token: Optional[str] = None
        self.token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        if value:
            self.client.headers["Authorization"] = f"Bearer {value}"
        else:
            self.client.headers.pop("Authorization", None)

    def close(self) -> None:
        self.client.close()

    # -----------------------------
    # Helpers
    # -----------------------------
    def _request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> Any:
        logger.debug("%s %s", method, path)
        try:
            response = self.client.request(method, path, json=as_payload(json), params=params)
        except httpx.HTTPError as exc:
            logger.warning("Backend inaccesible en %s %s: %s", method, path, exc)
            raise UpstreamError(502, UNKNOWN_ERROR) from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            logger.warning("%s %s -> %s", method, path, response.status_code)
            raise UpstreamError(response.status_code, format_error_body(body))

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self._request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self._request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    # -----------------------------
    # Autenticación y carga inicial
    # -----------------------------
    def login(self, pin: str) -> str:
        data = self.post("/auth/login/", {"pin": pin})
        token = (data or {}).get("token")
        if not token:
            raise UpstreamError(401, "PIN noto'g'ri.")
        self.token = token
        return token

    def me(self) -> dict:
        return self.get("/auth/me/")

    def initial_data(self) -> dict:
        return self.get("/data/initial/") or {}

    def warehouses(self) -> list:
        return self.get("/warehouses/") or []

    def warehouse_products(self) -> list:
        return self.get("/warehouse-products/") or []

    # -----------------------------
    # Entidades genéricas
    # -----------------------------
    def create_entity(self, entity: str, payload: Any) -> Any:
        return self.post(f"/{entity}/", as_payload(payload, exclude_unset=True))

    def update_entity(self, entity: str, entity_id: str, payload: Any) -> Any:
        return self.put(f"/{entity}/{entity_id}/", as_payload(payload, exclude_unset=True))

    def delete_entity(self, entity: str, entity_id: str) -> None:
        self.delete(f"/{entity}/{entity_id}/")

    # -----------------------------
    # Operaciones de negocio
    # -----------------------------
    def create_sale(self, payload: Any) -> dict:
        return self.post("/sales/", payload)

    def pay_debt(self, customer_id: str, amount, payment_type) -> Any:
        return self.post("/debt-payments/", {
            "customerId": customer_id,
            "amount": str(amount),
            "paymentType": getattr(payment_type, "value", payment_type),
        })

    def create_goods_receipt(self, payload: Any) -> dict:
        return self.post("/goods-receipts/", payload)

    def update_settings(self, payload: Any) -> dict:
        return self.put("/settings/", as_payload(payload, exclude_unset=True))
