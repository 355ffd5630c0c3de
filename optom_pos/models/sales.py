import enum


class PaymentType(str, enum.Enum):
    CASH = "naqd"          # Efectivo
    CARD = "plastik"       # Tarjeta
    TRANSFER = "o'tkazma"  # Transferencia
    DEBT = "nasiya"        # Crédito de tienda (cuenta del cliente)


PAYMENT_TYPE_LABELS = {
    PaymentType.CASH: "Naqd",
    PaymentType.CARD: "Plastik",
    PaymentType.TRANSFER: "O'tkazma",
    PaymentType.DEBT: "Nasiya",
}

# Métodos válidos para abonar deuda (no se paga una deuda con más deuda)
DEBT_PAYMENT_TYPES = (PaymentType.CASH, PaymentType.CARD, PaymentType.TRANSFER)


class CheckoutStatus(str, enum.Enum):
    OPEN = "OPEN"
    SUBMITTING = "SUBMITTING"  # Venta enviada al backend, esperando respuesta
    FINALIZED = "FINALIZED"
    DISCARDED = "DISCARDED"
