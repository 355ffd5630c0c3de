from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from optom_pos.api_client import as_payload
from optom_pos.models import Permission
from optom_pos.schemas.inventory import GoodsReceiptCreate, GoodsReceiptRead, StockMovementRead
from optom_pos.security import require_permission
from optom_pos.terminals import TerminalSession
from optom_pos.utils.money import ZERO, to_money

router = APIRouter()

manage_warehouse = require_permission(Permission.MANAGE_WAREHOUSE)


# --------------------------------------------------------------------------
# 1. ENTRADAS DE MERCANCÍA (KIRIM)
# --------------------------------------------------------------------------
@router.get("/goods-receipts", response_model=List[GoodsReceiptRead])
def get_goods_receipts(terminal: TerminalSession = Depends(manage_warehouse)):
    receipts = terminal.state.goods_receipts
    return sorted(receipts, key=lambda r: r.date.timestamp() if r.date else float("-inf"), reverse=True)


@router.post("/goods-receipts", response_model=GoodsReceiptRead)
def create_goods_receipt(receipt_in: GoodsReceiptCreate, terminal: TerminalSession = Depends(manage_warehouse)):
    """
    Registra la entrada. El total se calcula aquí: suma de cantidad x precio de compra.
    """
    if not receipt_in.items:
        raise HTTPException(status_code=400, detail="Yetkazib beruvchi va kamida bitta mahsulot tanlanishi shart.")

    total_amount = sum((to_money(i.quantity * i.purchase_price) for i in receipt_in.items), ZERO)
    payload = as_payload(receipt_in)
    payload["totalAmount"] = str(total_amount)
    return terminal.state.add_goods_receipt(payload)


# --------------------------------------------------------------------------
# 2. KARDEX (MOVIMIENTOS DE STOCK)
# --------------------------------------------------------------------------
@router.get("/movements", response_model=List[StockMovementRead])
def get_stock_movements(
    product_id: Optional[str] = None,
    terminal: TerminalSession = Depends(manage_warehouse),
):
    movements = terminal.state.stock_movements
    if product_id:
        movements = [m for m in movements if m.product_id == product_id]
    return sorted(movements, key=lambda m: m.date.timestamp() if m.date else float("-inf"), reverse=True)
