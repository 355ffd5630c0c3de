from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from pydantic import field_validator

from optom_pos.models import StockMovementType
from optom_pos.schemas.base import CamelModel, EntityId
from optom_pos.schemas.products import ProductRead
from optom_pos.schemas.customers import SupplierRead


# --- Movimientos de stock (Kardex) ---

class StockMovementRead(CamelModel):
    id: EntityId
    product_id: EntityId
    product: Optional[ProductRead] = None
    quantity: Decimal
    type: StockMovementType
    date: Optional[datetime] = None
    related_id: Optional[EntityId] = None
    comment: Optional[str] = None


# --- Almacenes ---

class WarehouseRead(CamelModel):
    id: EntityId
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WarehouseCreate(CamelModel):
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class WarehouseUpdate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class WarehouseProductRead(CamelModel):
    id: EntityId
    warehouse_id: EntityId
    warehouse: Optional[WarehouseRead] = None
    product_id: EntityId
    product: Optional[ProductRead] = None
    quantity: Decimal = Decimal(0)
    reserved_quantity: Decimal = Decimal(0)
    available_quantity: Optional[Decimal] = None


class WarehouseProductCreate(CamelModel):
    warehouse_id: EntityId
    product_id: EntityId
    quantity: Decimal = Decimal(0)
    reserved_quantity: Decimal = Decimal(0)


class WarehouseProductUpdate(CamelModel):
    quantity: Optional[Decimal] = None
    reserved_quantity: Optional[Decimal] = None


# --- Entradas de mercancía (Kirim) ---

class GoodsReceiptItem(CamelModel):
    product_id: EntityId
    quantity: Decimal
    purchase_price: Decimal

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, v):
        if v <= 0:
            raise ValueError("Miqdor musbat bo'lishi kerak.")
        return v


class GoodsReceiptCreate(CamelModel):
    supplier_id: EntityId
    doc_number: Optional[str] = None
    items: List[GoodsReceiptItem]
    warehouse_id: Optional[EntityId] = None

    @field_validator("supplier_id")
    @classmethod
    def supplier_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Yetkazib beruvchi tanlanishi shart.")
        return v.strip()


class GoodsReceiptRead(CamelModel):
    id: EntityId
    date: Optional[datetime] = None
    supplier_id: EntityId
    supplier: Optional[SupplierRead] = None
    doc_number: Optional[str] = None
    items: List[GoodsReceiptItem] = []
    total_amount: Decimal = Decimal(0)
    warehouse_id: Optional[EntityId] = None
