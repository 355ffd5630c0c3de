import enum


class StockMovementType(str, enum.Enum):
    KIRIM = "kirim"       # Entrada
    CHIQIM = "chiqim"     # Salida
    SAVDO = "savdo"       # Venta
    VOZVRAT = "vozvrat"   # Devolución


class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
