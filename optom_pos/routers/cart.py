from fastapi import APIRouter, Depends, HTTPException

from optom_pos.models import Permission
from optom_pos.schemas.cart import (
    CartItemAdd, CartItemUpdate, CartLineRead, CartRead, CustomerSelect, DiscountUpdate
)
from optom_pos.schemas.customers import CustomerCreate
from optom_pos.security import require_permission
from optom_pos.services.cart import CartError
from optom_pos.terminals import TerminalSession

router = APIRouter()

use_terminal = require_permission(Permission.USE_SALES_TERMINAL)


def cart_read(terminal: TerminalSession) -> CartRead:
    cart = terminal.cart
    items = []
    for line in cart.lines:
        current = terminal.state.get_product(line.product_id)
        items.append(CartLineRead(
            product_id=line.product_id,
            name=line.product.name,
            unit=line.product.unit,
            quantity=line.quantity,
            price=line.price,
            line_total=line.line_total,
            stock_low=cart.is_stock_low(line, current),
        ))
    return CartRead(
        items=items,
        subtotal=cart.subtotal,
        discount=cart.discount,
        total=cart.total,
        customer_id=cart.customer_id,
        currency=terminal.state.currency,
    )


def editable_terminal(terminal: TerminalSession = Depends(use_terminal)) -> TerminalSession:
    # Con la ventana de pago abierta el total queda fijo
    if terminal.checkout_open:
        raise HTTPException(status_code=409, detail="To'lov oynasi ochiq. Avval uni yoping.")
    return terminal


def _get_product_or_404(terminal: TerminalSession, product_id: str):
    product = terminal.state.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Mahsulot topilmadi")
    return product


# --------------------------------------------------------------------------
# 1. VER CARRITO
# --------------------------------------------------------------------------
@router.get("/", response_model=CartRead)
def get_cart(terminal: TerminalSession = Depends(use_terminal)):
    return cart_read(terminal)


# --------------------------------------------------------------------------
# 2. AGREGAR / SELECCIONAR PRODUCTO
# --------------------------------------------------------------------------
@router.post("/items", response_model=CartRead)
def add_item(item_in: CartItemAdd, terminal: TerminalSession = Depends(editable_terminal)):
    product = _get_product_or_404(terminal, item_in.product_id)
    try:
        terminal.cart.add_product(product, item_in.quantity, item_in.wholesale_price)
    except CartError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return cart_read(terminal)


@router.post("/items/{product_id}/select", response_model=CartRead)
def select_item(product_id: str, terminal: TerminalSession = Depends(editable_terminal)):
    """Clic en la tarjeta del producto: +1 si hay existencia."""
    product = _get_product_or_404(terminal, product_id)
    try:
        terminal.cart.select_product(product)
    except CartError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return cart_read(terminal)


# --------------------------------------------------------------------------
# 3. EDITAR / QUITAR LÍNEAS
# --------------------------------------------------------------------------
@router.put("/items/{product_id}", response_model=CartRead)
def update_item(
    product_id: str,
    item_in: CartItemUpdate,
    terminal: TerminalSession = Depends(editable_terminal),
):
    try:
        if item_in.price is not None:
            terminal.cart.update_price(product_id, item_in.price)
        if item_in.quantity is not None:
            terminal.cart.update_quantity(product_id, item_in.quantity)
    except CartError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return cart_read(terminal)


@router.delete("/items/{product_id}", response_model=CartRead)
def remove_item(product_id: str, terminal: TerminalSession = Depends(editable_terminal)):
    try:
        terminal.cart.remove(product_id)
    except CartError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    return cart_read(terminal)


@router.delete("/", response_model=CartRead)
def clear_cart(terminal: TerminalSession = Depends(editable_terminal)):
    terminal.cart.clear()
    return cart_read(terminal)


# --------------------------------------------------------------------------
# 4. DESCUENTO Y CLIENTE
# --------------------------------------------------------------------------
@router.put("/discount", response_model=CartRead)
def set_discount(discount_in: DiscountUpdate, terminal: TerminalSession = Depends(editable_terminal)):
    try:
        terminal.cart.set_discount(discount_in.discount)
    except CartError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return cart_read(terminal)


@router.put("/customer", response_model=CartRead)
def select_customer(select_in: CustomerSelect, terminal: TerminalSession = Depends(editable_terminal)):
    customer_id = select_in.customer_id or None
    if customer_id and not terminal.state.customer_exists(customer_id):
        raise HTTPException(status_code=404, detail="Mijoz topilmadi")
    terminal.cart.customer_id = customer_id
    return cart_read(terminal)


@router.post("/customer", response_model=CartRead)
def quick_add_customer(customer_in: CustomerCreate, terminal: TerminalSession = Depends(editable_terminal)):
    """Alta rápida de cliente desde la terminal; queda seleccionado en el carrito."""
    created = terminal.state.add_entity("customers", customer_in)
    customer_id = str(created["id"]) if isinstance(created, dict) and created.get("id") is not None else None
    if customer_id is None:
        # El backend no devolvió el ID: se busca por teléfono en los datos recargados
        match = next((c for c in terminal.state.customers if c.phone == customer_in.phone), None)
        customer_id = match.id if match else None
    terminal.cart.customer_id = customer_id
    return cart_read(terminal)
