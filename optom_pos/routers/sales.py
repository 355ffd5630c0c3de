from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from optom_pos.models import Permission
from optom_pos.schemas.sales import SaleRead
from optom_pos.security import require_permission
from optom_pos.services.sales import filter_history
from optom_pos.terminals import TerminalSession

router = APIRouter()


# --------------------------------------------------------------------------
# 1. HISTORIAL DE VENTAS
# --------------------------------------------------------------------------
@router.get("/", response_model=List[SaleRead])
def get_sales_history(
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: str = "",
    terminal: TerminalSession = Depends(require_permission(Permission.VIEW_SALES_HISTORY)),
):
    return filter_history(terminal.state.sales, start, end, search)


# --------------------------------------------------------------------------
# 2. ÚLTIMA VENTA DE LA TERMINAL (para reimprimir el ticket)
# --------------------------------------------------------------------------
@router.get("/last", response_model=SaleRead)
def get_last_sale(
    terminal: TerminalSession = Depends(require_permission(Permission.USE_SALES_TERMINAL)),
):
    if terminal.last_sale is None:
        raise HTTPException(status_code=404, detail="Oxirgi savdo topilmadi")
    return terminal.last_sale


@router.get("/{sale_id}", response_model=SaleRead)
def get_sale(
    sale_id: str,
    terminal: TerminalSession = Depends(require_permission(Permission.VIEW_SALES_HISTORY)),
):
    sale = terminal.state.get_sale(sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Savdo topilmadi")
    return sale
