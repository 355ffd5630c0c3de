from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """
    Convierte cualquier valor numérico (int, float, str, Decimal) a Decimal
    con dos decimales. Los float se pasan por str() para no arrastrar ruido binario.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Monto inválido: {value!r}")


def format_money(value, currency: str = "") -> str:
    """Formato de pantalla: 150 000 so'm (separador de miles con espacio)."""
    amount = to_money(value)
    if amount == amount.to_integral_value():
        text = f"{int(amount):,}".replace(",", " ")
    else:
        text = f"{amount:,.2f}".replace(",", " ")
    return f"{text} {currency}".strip()
