from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from optom_pos.models import PaymentType
from optom_pos.schemas.base import CamelModel, EntityId
from optom_pos.schemas.products import ProductRead
from optom_pos.schemas.customers import CustomerRead
from optom_pos.schemas.users import EmployeeRead


# --- Pagos de una venta ---

class SalePayment(CamelModel):
    type: PaymentType
    amount: Decimal


# --- Models for Creation ---

class SaleItemCreate(CamelModel):
    product_id: EntityId
    quantity: Decimal
    price: Decimal


class SaleCreate(CamelModel):
    items: List[SaleItemCreate]
    subtotal: Decimal
    discount: Decimal = Decimal("0.00")
    total: Decimal
    payments: List[SalePayment]
    customer_id: Optional[EntityId] = None


# --- Models for Reading (History) ---

class SaleItemRead(CamelModel):
    product_id: EntityId
    product: Optional[ProductRead] = None
    quantity: Decimal
    price: Decimal


class SaleRead(CamelModel):
    id: EntityId
    date: Optional[datetime] = None
    items: List[SaleItemRead] = []
    subtotal: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    payments: List[SalePayment] = []
    customer_id: Optional[EntityId] = None
    customer: Optional[CustomerRead] = None
    seller: Optional[EmployeeRead] = None
