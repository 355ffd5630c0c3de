from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from optom_pos.models import Permission
from optom_pos.schemas.reports import DashboardRead, SalesSummary
from optom_pos.security import require_permission
from optom_pos.services import reports
from optom_pos.terminals import TerminalSession

router = APIRouter()


# --------------------------------------------------------------------------
# 1. RESUMEN DE VENTAS POR PERIODO
# --------------------------------------------------------------------------
@router.get("/summary", response_model=SalesSummary)
def get_sales_summary(
    start: Optional[date] = None,
    end: Optional[date] = None,
    seller_id: Optional[str] = None,
    terminal: TerminalSession = Depends(require_permission(Permission.VIEW_REPORTS)),
):
    # Por defecto: del primer día del mes a hoy
    today = date.today()
    end = end or today
    start = start or end.replace(day=1)
    if start > end:
        raise HTTPException(status_code=400, detail="Boshlanish sanasi tugash sanasidan keyin bo'lishi mumkin emas.")

    state = terminal.state
    return reports.sales_summary(state.sales, state.products, state.customers, start, end, seller_id)


# --------------------------------------------------------------------------
# 2. PANEL PRINCIPAL
# --------------------------------------------------------------------------
@router.get("/dashboard", response_model=DashboardRead)
def get_dashboard(
    terminal: TerminalSession = Depends(require_permission(Permission.VIEW_DASHBOARD)),
):
    return reports.dashboard(terminal.state.sales, terminal.state.products)
