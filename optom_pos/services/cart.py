from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from optom_pos.models import ProductStatus
from optom_pos.schemas.products import ProductRead
from optom_pos.schemas.sales import SaleItemCreate
from optom_pos.utils.money import ZERO, to_money


class CartError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class CartLine:
    product: ProductRead
    quantity: Decimal
    price: Decimal

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> Decimal:
        return to_money(self.price * self.quantity)


class Cart:
    """Carrito de la terminal de venta (savatcha)."""

    def __init__(self):
        self.lines: List[CartLine] = []
        self._discount = ZERO
        self.customer_id: Optional[str] = None

    def find(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def _require(self, product_id: str) -> CartLine:
        line = self.find(product_id)
        if line is None:
            raise CartError("Mahsulot savatchada yo'q.")
        return line

    def add_product(self, product: ProductRead, quantity=1, wholesale_price=None) -> CartLine:
        """
        Agrega el producto o suma la cantidad si ya está en el carrito.
        Un precio de mayoreo sobrescribe el precio de la línea.
        """
        quantity = Decimal(quantity)
        if quantity <= 0:
            raise CartError("Miqdor musbat bo'lishi kerak.")

        line = self.find(product.id)
        if line is not None:
            line.quantity += quantity
            if wholesale_price is not None:
                line.price = to_money(wholesale_price)
            return line

        price = wholesale_price if wholesale_price is not None else product.sale_price
        line = CartLine(product=product, quantity=quantity, price=to_money(price))
        self.lines.append(line)
        return line

    def select_product(self, product: ProductRead) -> CartLine:
        """Clic en el catálogo: +1 unidad, solo si hay existencia."""
        if product.stock <= 0:
            raise CartError("Bu mahsulotdan qoldiq yo'q!")
        return self.add_product(product, 1)

    def remove(self, product_id: str) -> None:
        self._require(product_id)
        self.lines = [line for line in self.lines if line.product_id != product_id]

    def update_quantity(self, product_id: str, quantity) -> None:
        line = self._require(product_id)
        quantity = Decimal(quantity)
        if quantity <= 0:
            self.remove(product_id)
            return
        line.quantity = quantity

    def update_price(self, product_id: str, price) -> None:
        line = self._require(product_id)
        price = to_money(price)
        if price < 0:
            raise CartError("Narx manfiy bo'lishi mumkin emas.")
        line.price = price

    def clear(self) -> None:
        self.lines = []
        self._discount = ZERO
        self.customer_id = None

    # --- Totales ---
    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), ZERO)

    @property
    def discount(self) -> Decimal:
        # Si el subtotal bajó después de fijar el descuento, se recorta
        return min(self._discount, self.subtotal)

    def set_discount(self, discount) -> None:
        discount = to_money(discount)
        if discount < 0 or discount > self.subtotal:
            raise CartError("Chegirma 0 va jami summa oralig'ida bo'lishi kerak.")
        self._discount = discount

    @property
    def total(self) -> Decimal:
        return self.subtotal - self.discount

    def is_stock_low(self, line: CartLine, current: Optional[ProductRead] = None) -> bool:
        product = current or line.product
        return line.quantity > product.stock

    def to_sale_items(self) -> List[SaleItemCreate]:
        return [
            SaleItemCreate(product_id=line.product_id, quantity=line.quantity, price=line.price)
            for line in self.lines
        ]


def search_products(products: List[ProductRead], term: str = "") -> List[ProductRead]:
    """Productos activos cuyo nombre o código de barras contiene el término."""
    term = (term or "").strip()
    needle = term.lower()
    return [
        p for p in products
        if p.status == ProductStatus.ACTIVE and (
            needle in p.name.lower() or (p.barcode is not None and term in p.barcode)
        )
    ]
