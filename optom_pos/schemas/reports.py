from typing import List, Optional
from datetime import date
from decimal import Decimal

from optom_pos.schemas.base import CamelModel, EntityId
from optom_pos.schemas.products import ProductRead
from optom_pos.schemas.sales import SaleRead


class LabeledAmount(CamelModel):
    name: str
    value: Decimal


class DaySales(CamelModel):
    date: date
    savdo: Decimal
    foyda: Decimal = Decimal(0)


class TopProduct(CamelModel):
    product_id: EntityId
    name: str
    quantity: Decimal
    revenue: Decimal


class SellerTotal(CamelModel):
    seller_id: EntityId
    name: str
    total: Decimal


class SalesSummary(CamelModel):
    start: date
    end: date
    seller_id: Optional[EntityId] = None
    total_sales: Decimal
    profit: Decimal
    sale_count: int
    total_debt: Decimal
    average_check: Decimal
    by_payment_type: List[LabeledAmount]
    by_day: List[DaySales]
    top_products: List[TopProduct]
    top_sellers: List[SellerTotal]
    low_stock: List[ProductRead]


class DashboardRead(CamelModel):
    sales_last_7_days: List[DaySales]
    low_stock: List[ProductRead]
    low_stock_count: int
    recent_sales: List[SaleRead]
