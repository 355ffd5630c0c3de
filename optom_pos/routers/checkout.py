from fastapi import APIRouter, Depends, HTTPException

from optom_pos.models import Permission
from optom_pos.schemas.checkout import CheckoutFinalized, CheckoutRead, PendingPartUpdate
from optom_pos.schemas.sales import SalePayment
from optom_pos.security import require_permission
from optom_pos.services.checkout import CheckoutRejected, CheckoutSession
from optom_pos.services.sales import submit_sale
from optom_pos.terminals import TerminalSession

router = APIRouter()

use_terminal = require_permission(Permission.USE_SALES_TERMINAL)


def _payment(part) -> SalePayment:
    return SalePayment(type=part.type, amount=part.amount)


def checkout_read(session: CheckoutSession) -> CheckoutRead:
    return CheckoutRead(
        status=session.status,
        total_due=session.total_due,
        paid_so_far=session.paid_so_far,
        remaining=session.remaining,
        currency=session.currency,
        customer_id=session.customer_id,
        committed_parts=[_payment(p) for p in session.committed_parts],
        pending_part=_payment(session.pending_part),
        can_commit=session.can_commit,
        can_finalize=session.can_finalize,
    )


def current_checkout(terminal: TerminalSession = Depends(use_terminal)) -> TerminalSession:
    if terminal.checkout is None:
        raise HTTPException(status_code=404, detail="To'lov oynasi ochilmagan.")
    return terminal


# --------------------------------------------------------------------------
# 1. ABRIR VENTANA DE PAGO
# --------------------------------------------------------------------------
@router.post("/", response_model=CheckoutRead)
def open_checkout(terminal: TerminalSession = Depends(use_terminal)):
    if terminal.cart.is_empty:
        raise HTTPException(status_code=400, detail="Savatcha bo'sh!")
    if terminal.checkout_open:
        raise HTTPException(status_code=409, detail="To'lov oynasi allaqachon ochiq.")
    return checkout_read(terminal.open_checkout())


@router.get("/", response_model=CheckoutRead)
def get_checkout(terminal: TerminalSession = Depends(current_checkout)):
    return checkout_read(terminal.checkout)


# --------------------------------------------------------------------------
# 2. PARTES DE PAGO
# --------------------------------------------------------------------------
@router.put("/pending", response_model=CheckoutRead)
def set_pending_part(part_in: PendingPartUpdate, terminal: TerminalSession = Depends(current_checkout)):
    try:
        terminal.checkout.set_pending_part(part_in.type, part_in.amount)
    except CheckoutRejected as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return checkout_read(terminal.checkout)


@router.post("/parts", response_model=CheckoutRead)
def commit_pending_part(terminal: TerminalSession = Depends(current_checkout)):
    try:
        terminal.checkout.commit_pending_part()
    except CheckoutRejected as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return checkout_read(terminal.checkout)


@router.delete("/parts/{index}", response_model=CheckoutRead)
def remove_committed_part(index: int, terminal: TerminalSession = Depends(current_checkout)):
    try:
        terminal.checkout.remove_committed_part(index)
    except CheckoutRejected as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return checkout_read(terminal.checkout)


# --------------------------------------------------------------------------
# 3. FINALIZAR / CANCELAR
# --------------------------------------------------------------------------
@router.post("/finalize", response_model=CheckoutFinalized)
def finalize_checkout(terminal: TerminalSession = Depends(current_checkout)):
    """
    Crea la venta en el backend con los pagos conciliados.
    Si el backend la rechaza, la ventana sigue abierta con sus partes.
    """
    checkout = terminal.checkout
    try:
        payments = checkout.finalize(
            lambda parts: submit_sale(terminal.state, terminal.cart, parts)
        )
    except CheckoutRejected as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    terminal.last_sale = checkout.sale
    terminal.cart.clear()
    return CheckoutFinalized(payments=[_payment(p) for p in payments], sale=checkout.sale)


@router.delete("/", response_model=CheckoutRead)
def cancel_checkout(terminal: TerminalSession = Depends(current_checkout)):
    try:
        terminal.checkout.cancel()
    except CheckoutRejected as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return checkout_read(terminal.checkout)
