"""
Conciliación de pagos mixtos de una venta.

Una sesión de cobro acumula partes de pago (efectivo, tarjeta, transferencia,
nasiya) contra un total fijo. Solo se puede finalizar cuando las partes suman
exactamente el total. Los montos se manejan como Decimal con dos decimales.
"""

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from optom_pos.models import CheckoutStatus, PaymentType
from optom_pos.utils.money import ZERO, format_money, to_money

logger = logging.getLogger(__name__)


class CheckoutRejected(ValueError):
    """Operación rechazada; el estado de la sesión no cambió."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class PaymentPart:
    type: PaymentType
    amount: Decimal


class CheckoutSession:
    """
    Sesión de cobro (ventana de pago).

    Estados: OPEN -> SUBMITTING -> FINALIZED (finalize) u OPEN -> DISCARDED (cancel).
    FINALIZED y DISCARDED son terminales; si la creación de la venta falla,
    SUBMITTING vuelve a OPEN.

    Los endpoints corren en un threadpool, así que cada operación valida y
    modifica bajo `_lock`.

    `customer_exists` permite validar que el cliente seleccionado siga
    existiendo en el estado de la aplicación (requerido para nasiya).
    """

    def __init__(
        self,
        total_due,
        customer_id: Optional[str] = None,
        customer_exists: Optional[Callable[[str], bool]] = None,
        currency: str = "",
    ):
        total_due = to_money(total_due)
        if total_due < 0:
            raise ValueError("El total a cobrar no puede ser negativo")

        self.total_due = total_due
        self.customer_id = customer_id or None
        self._customer_exists = customer_exists
        self.currency = currency

        self.status = CheckoutStatus.OPEN
        self._lock = threading.Lock()
        self._parts: List[PaymentPart] = []
        self.pending_type = PaymentType.CASH
        self.pending_amount = total_due
        self.sale = None  # Resultado de la creación de la venta

    # --- Estado derivado ---
    @property
    def committed_parts(self) -> Tuple[PaymentPart, ...]:
        return tuple(self._parts)

    @property
    def pending_part(self) -> PaymentPart:
        return PaymentPart(self.pending_type, self.pending_amount)

    @property
    def paid_so_far(self) -> Decimal:
        return sum((p.amount for p in self._parts), ZERO)

    @property
    def remaining(self) -> Decimal:
        return self.total_due - self.paid_so_far

    @property
    def has_customer(self) -> bool:
        if not self.customer_id:
            return False
        if self._customer_exists is None:
            return True
        return self._customer_exists(self.customer_id)

    @property
    def is_active(self) -> bool:
        """Abierta o con la venta en camino (el carrito sigue bloqueado)."""
        return self.status in (CheckoutStatus.OPEN, CheckoutStatus.SUBMITTING)

    @property
    def can_commit(self) -> bool:
        try:
            self._ensure_open()
            self._validate_pending()
        except CheckoutRejected:
            return False
        return True

    @property
    def can_finalize(self) -> bool:
        return self.status == CheckoutStatus.OPEN and bool(self._parts) and self.remaining == 0

    # --- Validaciones ---
    def _ensure_open(self) -> None:
        if self.status == CheckoutStatus.SUBMITTING:
            raise CheckoutRejected("Savdo yuborilmoqda, kuting.")
        if self.status == CheckoutStatus.FINALIZED:
            raise CheckoutRejected("Savdo allaqachon yakunlangan.")
        if self.status == CheckoutStatus.DISCARDED:
            raise CheckoutRejected("To'lov bekor qilingan.")

    def _validate_pending(self) -> None:
        amount = self.pending_amount
        if amount <= 0:
            raise CheckoutRejected("To'lov summasi noldan katta bo'lishi kerak.")
        if self.pending_type == PaymentType.DEBT and not self.has_customer:
            raise CheckoutRejected("Nasiya uchun avval asosiy ekrandan mijozni tanlang!")
        if amount > self.remaining:
            raise CheckoutRejected(
                f"Summa qolgan summadan oshmasligi kerak: {format_money(self.remaining, self.currency)}"
            )

    def _reset_pending_amount(self) -> None:
        # El siguiente monto sugerido es lo que falta por cubrir
        self.pending_amount = max(self.remaining, ZERO)

    # --- Operaciones ---
    def set_pending_part(self, payment_type: Optional[PaymentType] = None, amount=None) -> PaymentPart:
        """Reemplaza la parte en edición. No valida el monto (eso ocurre al confirmar)."""
        with self._lock:
            self._ensure_open()
            if payment_type is not None:
                self.pending_type = PaymentType(payment_type)
            if amount is not None:
                self.pending_amount = to_money(amount)
            return self.pending_part

    def commit_pending_part(self) -> PaymentPart:
        with self._lock:
            self._ensure_open()
            self._validate_pending()

            part = self.pending_part
            self._parts.append(part)
            self._reset_pending_amount()
        logger.info("Parte de pago agregada: %s %s (resta %s)", part.type.value, part.amount, self.remaining)
        return part

    def remove_committed_part(self, index: int) -> PaymentPart:
        with self._lock:
            self._ensure_open()
            if index < 0 or index >= len(self._parts):
                raise CheckoutRejected("To'lov qismi topilmadi.")

            part = self._parts.pop(index)
            self._reset_pending_amount()
        logger.info("Parte de pago eliminada: %s %s (resta %s)", part.type.value, part.amount, self.remaining)
        return part

    def finalize(self, submit: Optional[Callable[[List[PaymentPart]], object]] = None) -> List[PaymentPart]:
        """
        Entrega la lista final de pagos.
        Mientras `submit` (creación de la venta) está en curso la sesión queda en
        SUBMITTING y cualquier otra operación se rechaza. Si `submit` falla, la
        excepción se propaga y la sesión vuelve a OPEN con sus partes para
        reintentar o cancelar.
        """
        with self._lock:
            self._ensure_open()
            if not self._parts:
                raise CheckoutRejected("Kamida bitta to'lov qismini qo'shing.")
            if self.remaining != 0:
                raise CheckoutRejected("To'lov to'liq qoplanmagan!")

            payments = list(self._parts)
            self.status = CheckoutStatus.SUBMITTING

        # La llamada al backend va fuera del lock; SUBMITTING ya bloquea la sesión
        try:
            sale = submit(payments) if submit is not None else None
        except Exception:
            with self._lock:
                self.status = CheckoutStatus.OPEN
            logger.warning("Falló la creación de la venta; el cobro sigue abierto")
            raise

        with self._lock:
            self.sale = sale
            self.status = CheckoutStatus.FINALIZED
        logger.info("Cobro finalizado: %d partes, total %s", len(payments), self.total_due)
        return payments

    def cancel(self) -> None:
        with self._lock:
            self._ensure_open()
            self._parts.clear()
            self.status = CheckoutStatus.DISCARDED
        logger.info("Cobro cancelado")
