import logging
from typing import List, Optional

from pydantic import ValidationError

from optom_pos.api_client import UNKNOWN_ERROR, ShopApiClient, UpstreamError
from optom_pos.config import settings as app_settings
from optom_pos.schemas.customers import CustomerRead, DebtPaymentRead, SupplierRead
from optom_pos.schemas.inventory import (
    GoodsReceiptRead, StockMovementRead, WarehouseRead, WarehouseProductRead
)
from optom_pos.schemas.products import ProductRead, UnitRead
from optom_pos.schemas.sales import SaleCreate, SaleRead
from optom_pos.schemas.settings import StoreSettingsRead
from optom_pos.schemas.users import EmployeeRead, RoleRead

logger = logging.getLogger(__name__)


def _parse_list(model, items) -> list:
    return [model.model_validate(item) for item in (items or [])]


class AppState:
    """
    Copia local de las colecciones del backend para una terminal.
    Se pasa explícitamente a quien la necesite (routers, carrito, checkout).
    Toda mutación llama al backend y después recarga todo (reload).
    """

    def __init__(self, api: ShopApiClient):
        self.api = api
        self.clear()

    def clear(self) -> None:
        """Estado vacío (equivalente a cerrar sesión)."""
        self.current_user: Optional[EmployeeRead] = None
        self.products: List[ProductRead] = []
        self.customers: List[CustomerRead] = []
        self.suppliers: List[SupplierRead] = []
        self.sales: List[SaleRead] = []
        self.debt_payments: List[DebtPaymentRead] = []
        self.settings: Optional[StoreSettingsRead] = None
        self.units: List[UnitRead] = []
        self.goods_receipts: List[GoodsReceiptRead] = []
        self.roles: List[RoleRead] = []
        self.employees: List[EmployeeRead] = []
        self.stock_movements: List[StockMovementRead] = []
        self.warehouses: List[WarehouseRead] = []
        self.warehouse_products: List[WarehouseProductRead] = []

    # --------------------------------------------------------------------------
    # 1. CARGA COMPLETA
    # --------------------------------------------------------------------------
    def reload(self) -> None:
        """Recarga todo. Una respuesta con forma inesperada cuenta como fallo del backend (502)."""
        try:
            self._load()
        except ValidationError as exc:
            logger.warning("Respuesta inválida del backend: %s", exc)
            raise UpstreamError(502, UNKNOWN_ERROR) from exc

    def _load(self) -> None:
        data = self.api.initial_data()
        if not isinstance(data, dict):
            raise UpstreamError(502, UNKNOWN_ERROR)
        self.products = _parse_list(ProductRead, data.get("products"))
        self.customers = _parse_list(CustomerRead, data.get("customers"))
        self.suppliers = _parse_list(SupplierRead, data.get("suppliers"))
        self.sales = _parse_list(SaleRead, data.get("sales"))
        self.debt_payments = _parse_list(DebtPaymentRead, data.get("debtPayments"))
        self.units = _parse_list(UnitRead, data.get("units"))
        self.goods_receipts = _parse_list(GoodsReceiptRead, data.get("goodsReceipts"))
        self.roles = _parse_list(RoleRead, data.get("roles"))
        self.employees = _parse_list(EmployeeRead, data.get("employees"))
        self.stock_movements = _parse_list(StockMovementRead, data.get("stockMovements"))
        raw_settings = data.get("settings")
        self.settings = StoreSettingsRead.model_validate(raw_settings) if raw_settings else None

        # Almacenes y existencias por almacén
        self.warehouses = _parse_list(WarehouseRead, self.api.warehouses())
        self.warehouse_products = _parse_list(WarehouseProductRead, self.api.warehouse_products())

        self.current_user = EmployeeRead.model_validate(self.api.me())
        logger.info(
            "Datos cargados: %d productos, %d clientes, %d ventas",
            len(self.products), len(self.customers), len(self.sales),
        )

    # --------------------------------------------------------------------------
    # 2. CONSULTAS
    # --------------------------------------------------------------------------
    @property
    def currency(self) -> str:
        if self.settings and self.settings.currency:
            return self.settings.currency
        return app_settings.default_currency

    def get_product(self, product_id: str) -> Optional[ProductRead]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_customer(self, customer_id: str) -> Optional[CustomerRead]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def customer_exists(self, customer_id: Optional[str]) -> bool:
        return bool(customer_id) and self.get_customer(customer_id) is not None

    def get_sale(self, sale_id: str) -> Optional[SaleRead]:
        return next((s for s in self.sales if s.id == sale_id), None)

    # --------------------------------------------------------------------------
    # 3. MUTACIONES (backend + recarga)
    # --------------------------------------------------------------------------
    def add_entity(self, entity: str, payload) -> dict:
        data = self.api.create_entity(entity, payload)
        self.reload()
        return data

    def update_entity(self, entity: str, entity_id: str, payload) -> dict:
        data = self.api.update_entity(entity, entity_id, payload)
        self.reload()
        return data

    def delete_entity(self, entity: str, entity_id: str) -> None:
        self.api.delete_entity(entity, entity_id)
        self.reload()

    def pay_debt(self, customer_id: str, amount, payment_type) -> None:
        self.api.pay_debt(customer_id, amount, payment_type)
        self.reload()

    def add_goods_receipt(self, payload: dict) -> dict:
        data = self.api.create_goods_receipt(payload)
        self.reload()
        return data

    def update_settings(self, payload) -> dict:
        data = self.api.update_settings(payload)
        self.reload()
        return data

    def add_sale(self, sale_in: SaleCreate) -> SaleRead:
        """La venta creada se agrega a la lista local, sin recargar."""
        data = self.api.create_sale(sale_in)
        sale = SaleRead.model_validate(data)
        self.sales.append(sale)
        return sale
