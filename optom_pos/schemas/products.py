from typing import Optional
from decimal import Decimal

from optom_pos.models import ProductStatus
from optom_pos.schemas.base import CamelModel, EntityId


# --- Producto (lectura desde el backend) ---
class ProductRead(CamelModel):
    id: EntityId
    name: str
    barcode: Optional[str] = None
    unit: str = ""
    purchase_price: Decimal = Decimal(0)
    sale_price: Decimal = Decimal(0)
    stock: Decimal = Decimal(0)
    min_stock: Decimal = Decimal(0)
    description: Optional[str] = None
    status: ProductStatus = ProductStatus.ACTIVE
    image: Optional[str] = None


# --- Producto Crear/Editar (Input) ---
class ProductCreate(CamelModel):
    name: str
    barcode: Optional[str] = None
    unit: str
    purchase_price: Decimal
    sale_price: Decimal
    stock: Decimal = Decimal(0)
    min_stock: Decimal = Decimal(0)
    description: Optional[str] = None
    status: ProductStatus = ProductStatus.ACTIVE


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    barcode: Optional[str] = None
    unit: Optional[str] = None
    purchase_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    min_stock: Optional[Decimal] = None
    description: Optional[str] = None
    status: Optional[ProductStatus] = None


# --- Unidades de medida ---
class UnitRead(CamelModel):
    id: EntityId
    name: str


class UnitCreate(CamelModel):
    name: str
