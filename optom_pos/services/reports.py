"""Reportes de ventas calculados sobre los datos ya cargados en la terminal."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

import pandas as pd

from optom_pos.models import PAYMENT_TYPE_LABELS, PaymentType, ProductStatus
from optom_pos.schemas.customers import CustomerRead
from optom_pos.schemas.products import ProductRead
from optom_pos.schemas.reports import (
    DashboardRead, DaySales, LabeledAmount, SalesSummary, SellerTotal, TopProduct
)
from optom_pos.schemas.sales import SaleRead
from optom_pos.services.sales import sale_timestamp
from optom_pos.utils.money import ZERO, to_money


def low_stock_products(products: List[ProductRead]) -> List[ProductRead]:
    return [p for p in products if p.status == ProductStatus.ACTIVE and p.stock <= p.min_stock]


def filter_sales(
    sales: List[SaleRead], start: date, end: date, seller_id: Optional[str] = None
) -> List[SaleRead]:
    result = []
    for sale in sales:
        if sale.date is None:
            continue
        day = sale.date.date()
        if day < start or day > end:
            continue
        if seller_id and (sale.seller is None or sale.seller.id != seller_id):
            continue
        result.append(sale)
    return result


def _sale_cost(sale: SaleRead, products_by_id: Dict[str, ProductRead]) -> Decimal:
    """Costo de la venta según el precio de compra actual de cada producto."""
    cost = ZERO
    for item in sale.items:
        product = products_by_id.get(item.product_id)
        if product is not None:
            cost += product.purchase_price * item.quantity
    return cost


def _sales_frame(sales: List[SaleRead], products_by_id: Dict[str, ProductRead]) -> pd.DataFrame:
    rows = [
        {
            "sale_id": sale.id,
            "day": sale.date.date() if sale.date else None,
            "total": float(sale.total),
            "cost": float(_sale_cost(sale, products_by_id)),
            "seller_id": sale.seller.id if sale.seller else None,
            "seller_name": sale.seller.name if sale.seller else None,
        }
        for sale in sales
    ]
    return pd.DataFrame(rows, columns=["sale_id", "day", "total", "cost", "seller_id", "seller_name"])


def _by_payment_type(sales: List[SaleRead]) -> List[LabeledAmount]:
    rows = [
        {"type": payment.type.value, "amount": float(payment.amount)}
        for sale in sales for payment in sale.payments
    ]
    frame = pd.DataFrame(rows, columns=["type", "amount"])
    totals = frame.groupby("type")["amount"].sum()

    result = []
    for payment_type in PaymentType:
        value = to_money(float(totals.get(payment_type.value, 0.0)))
        if value > 0:
            result.append(LabeledAmount(name=PAYMENT_TYPE_LABELS[payment_type], value=value))
    return result


def _top_products(
    sales: List[SaleRead], products_by_id: Dict[str, ProductRead], limit: int = 10
) -> List[TopProduct]:
    rows = [
        {
            "product_id": item.product_id,
            "quantity": float(item.quantity),
            "revenue": float(item.quantity * item.price),
        }
        for sale in sales for item in sale.items
        if item.product_id in products_by_id
    ]
    frame = pd.DataFrame(rows, columns=["product_id", "quantity", "revenue"])
    if frame.empty:
        return []

    grouped = (
        frame.groupby("product_id", as_index=False)[["quantity", "revenue"]].sum()
        .sort_values("revenue", ascending=False)
        .head(limit)
    )
    return [
        TopProduct(
            product_id=row.product_id,
            name=products_by_id[row.product_id].name,
            quantity=to_money(float(row.quantity)),
            revenue=to_money(float(row.revenue)),
        )
        for row in grouped.itertuples(index=False)
    ]


def _top_sellers(frame: pd.DataFrame, limit: int = 10) -> List[SellerTotal]:
    with_seller = frame.dropna(subset=["seller_id"])
    if with_seller.empty:
        return []

    grouped = (
        with_seller.groupby("seller_id", as_index=False)
        .agg(name=("seller_name", "first"), total=("total", "sum"))
        .sort_values("total", ascending=False)
        .head(limit)
    )
    return [
        SellerTotal(seller_id=row.seller_id, name=row.name, total=to_money(float(row.total)))
        for row in grouped.itertuples(index=False)
    ]


def _by_day(frame: pd.DataFrame, days: Optional[List[date]] = None) -> List[DaySales]:
    dated = frame.dropna(subset=["day"])
    grouped = dated.groupby("day")[["total", "cost"]].sum()
    if days is not None:
        grouped = grouped.reindex(days, fill_value=0.0)
    else:
        grouped = grouped.sort_index()

    return [
        DaySales(
            date=day,
            savdo=to_money(float(row["total"])),
            foyda=to_money(float(row["total"] - row["cost"])),
        )
        for day, row in grouped.iterrows()
    ]


def sales_summary(
    sales: List[SaleRead],
    products: List[ProductRead],
    customers: List[CustomerRead],
    start: date,
    end: date,
    seller_id: Optional[str] = None,
) -> SalesSummary:
    """
    Resumen del periodo: ventas, utilidad, ticket promedio, desglose por método
    de pago, ventas por día, productos y vendedores principales.
    """
    selected = filter_sales(sales, start, end, seller_id)
    products_by_id = {p.id: p for p in products}
    frame = _sales_frame(selected, products_by_id)

    # 1. Totales del periodo
    total_sales = to_money(float(frame["total"].sum())) if not frame.empty else ZERO
    total_cost = to_money(float(frame["cost"].sum())) if not frame.empty else ZERO
    sale_count = len(selected)
    average_check = to_money(total_sales / sale_count) if sale_count else ZERO

    # 2. Deuda total de clientes (exacta, sin pasar por float)
    total_debt = sum((to_money(c.debt) for c in customers), ZERO)

    return SalesSummary(
        start=start,
        end=end,
        seller_id=seller_id,
        total_sales=total_sales,
        profit=total_sales - total_cost,
        sale_count=sale_count,
        total_debt=total_debt,
        average_check=average_check,
        by_payment_type=_by_payment_type(selected),
        by_day=_by_day(frame),
        top_products=_top_products(selected, products_by_id),
        top_sellers=_top_sellers(frame),
        low_stock=low_stock_products(products),
    )


def dashboard(
    sales: List[SaleRead], products: List[ProductRead], today: Optional[date] = None
) -> DashboardRead:
    """Panel principal: últimos 7 días, existencias bajas y ventas recientes."""
    today = today or date.today()
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    products_by_id = {p.id: p for p in products}

    recent = filter_sales(sales, days[0], today)
    frame = _sales_frame(recent, products_by_id)
    low_stock = low_stock_products(products)

    return DashboardRead(
        sales_last_7_days=_by_day(frame, days),
        low_stock=low_stock[:5],
        low_stock_count=len(low_stock),
        recent_sales=sorted(sales, key=sale_timestamp, reverse=True)[:5],
    )
