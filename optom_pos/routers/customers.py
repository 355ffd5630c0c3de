from fastapi import APIRouter, Depends, HTTPException
from typing import List

from optom_pos.models import Permission
from optom_pos.schemas.customers import (
    CustomerCreate, CustomerRead, CustomerUpdate, DebtPaymentCreate, DebtPaymentRead
)
from optom_pos.security import get_current_terminal, require_permission
from optom_pos.terminals import TerminalSession
from optom_pos.utils.money import format_money, to_money

router = APIRouter()

manage_customers = require_permission(Permission.MANAGE_CUSTOMERS)


def _get_customer_or_404(terminal: TerminalSession, customer_id: str) -> CustomerRead:
    customer = terminal.state.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Mijoz topilmadi")
    return customer


# --------------------------------------------------------------------------
# 1. LISTAR CLIENTES
# --------------------------------------------------------------------------
@router.get("/", response_model=List[CustomerRead])
def get_customers(
    search: str = None,  # Nombre o teléfono
    terminal: TerminalSession = Depends(get_current_terminal),
):
    caps = terminal.capabilities
    # La terminal de venta también necesita la lista para elegir cliente
    if not (caps.has(Permission.MANAGE_CUSTOMERS) or caps.has(Permission.USE_SALES_TERMINAL)):
        raise HTTPException(status_code=403, detail="Ruxsat yo'q")

    customers = terminal.state.customers
    if search:
        needle = search.strip().lower()
        customers = [c for c in customers if needle in c.name.lower() or needle in c.phone]
    return sorted(customers, key=lambda c: c.name.lower())


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: str, terminal: TerminalSession = Depends(manage_customers)):
    return _get_customer_or_404(terminal, customer_id)


# --------------------------------------------------------------------------
# 2. CREAR / ACTUALIZAR / ELIMINAR
# --------------------------------------------------------------------------
@router.post("/", response_model=CustomerRead)
def create_customer(customer_in: CustomerCreate, terminal: TerminalSession = Depends(manage_customers)):
    return terminal.state.add_entity("customers", customer_in)


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: str,
    customer_in: CustomerUpdate,
    terminal: TerminalSession = Depends(manage_customers),
):
    _get_customer_or_404(terminal, customer_id)
    return terminal.state.update_entity("customers", customer_id, customer_in)


@router.delete("/{customer_id}")
def delete_customer(customer_id: str, terminal: TerminalSession = Depends(manage_customers)):
    _get_customer_or_404(terminal, customer_id)
    terminal.state.delete_entity("customers", customer_id)
    return {"status": "success"}


# --------------------------------------------------------------------------
# 3. ABONOS A LA DEUDA (NASIYA)
# --------------------------------------------------------------------------
@router.get("/{customer_id}/payments", response_model=List[DebtPaymentRead])
def get_debt_payments(customer_id: str, terminal: TerminalSession = Depends(manage_customers)):
    _get_customer_or_404(terminal, customer_id)
    payments = [p for p in terminal.state.debt_payments if p.customer_id == customer_id]
    return sorted(payments, key=lambda p: p.date.timestamp() if p.date else float("-inf"), reverse=True)


@router.post("/{customer_id}/pay", response_model=CustomerRead)
def pay_debt(
    customer_id: str,
    payment_in: DebtPaymentCreate,
    terminal: TerminalSession = Depends(manage_customers),
):
    """Registra un abono. El monto debe ser mayor a cero y no exceder la deuda actual."""
    customer = _get_customer_or_404(terminal, customer_id)
    amount = to_money(payment_in.amount)
    debt = to_money(customer.debt)

    if amount <= 0:
        raise HTTPException(status_code=400, detail="To'lov summasi noldan katta bo'lishi kerak.")
    if amount > debt:
        raise HTTPException(
            status_code=400,
            detail=f"To'lov summasi qarzdan oshmasligi kerak: {format_money(debt, terminal.state.currency)}",
        )

    terminal.state.pay_debt(customer_id, amount, payment_in.payment_type)
    return _get_customer_or_404(terminal, customer_id)
