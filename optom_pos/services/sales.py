from datetime import date
from typing import List, Optional

from optom_pos.schemas.sales import SaleCreate, SalePayment, SaleRead
from optom_pos.services.cart import Cart
from optom_pos.services.checkout import PaymentPart
from optom_pos.services.state import AppState


def build_sale(cart: Cart, payments: List[PaymentPart]) -> SaleCreate:
    """Arma el documento de venta a partir del carrito y los pagos conciliados."""
    return SaleCreate(
        items=cart.to_sale_items(),
        subtotal=cart.subtotal,
        discount=cart.discount,
        total=cart.total,
        payments=[SalePayment(type=p.type, amount=p.amount) for p in payments],
        customer_id=cart.customer_id,
    )


def submit_sale(state: AppState, cart: Cart, payments: List[PaymentPart]) -> SaleRead:
    return state.add_sale(build_sale(cart, payments))


def filter_history(
    sales: List[SaleRead],
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: str = "",
) -> List[SaleRead]:
    """
    Historial de ventas: rango de fechas y búsqueda por nombre de cliente
    o terminación del ID del ticket. Más recientes primero.
    """
    needle = (search or "").strip().lower()
    result = []
    for sale in sales:
        if start or end:
            if sale.date is None:
                continue
            day = sale.date.date()
            if start and day < start:
                continue
            if end and day > end:
                continue
        if needle:
            customer_name = sale.customer.name.lower() if sale.customer else ""
            if needle not in customer_name and not sale.id.lower().endswith(needle):
                continue
        result.append(sale)

    return sorted(result, key=sale_timestamp, reverse=True)


def sale_timestamp(sale: SaleRead) -> float:
    # Ventas sin fecha quedan al final
    return sale.date.timestamp() if sale.date else float("-inf")
