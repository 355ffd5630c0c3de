from typing import List, Optional
from decimal import Decimal

from optom_pos.schemas.base import CamelModel, EntityId


class CartItemAdd(CamelModel):
    product_id: EntityId
    quantity: Decimal = Decimal(1)
    wholesale_price: Optional[Decimal] = None  # Precio de mayoreo opcional


class CartItemUpdate(CamelModel):
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None  # Sobrescribe el precio de la línea


class DiscountUpdate(CamelModel):
    discount: Decimal


class CustomerSelect(CamelModel):
    customer_id: Optional[EntityId] = None


class CartLineRead(CamelModel):
    product_id: EntityId
    name: str
    unit: str = ""
    quantity: Decimal
    price: Decimal
    line_total: Decimal
    stock_low: bool = False


class CartRead(CamelModel):
    items: List[CartLineRead]
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    customer_id: Optional[EntityId] = None
    currency: str = ""
