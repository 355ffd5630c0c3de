from fastapi import APIRouter, Depends, HTTPException
from typing import List

from optom_pos.models import Permission
from optom_pos.schemas.products import ProductCreate, ProductRead, ProductUpdate
from optom_pos.security import get_current_terminal, require_permission
from optom_pos.services.cart import search_products
from optom_pos.terminals import TerminalSession

router = APIRouter()


# --------------------------------------------------------------------------
# 1. BUSCAR PRODUCTOS (terminal de venta y catálogo)
# --------------------------------------------------------------------------
@router.get("/", response_model=List[ProductRead])
def get_products(
    search: str = "",
    terminal: TerminalSession = Depends(get_current_terminal),
):
    caps = terminal.capabilities
    if not (caps.has(Permission.USE_SALES_TERMINAL) or caps.has(Permission.MANAGE_PRODUCTS)):
        raise HTTPException(status_code=403, detail="Ruxsat yo'q")
    return search_products(terminal.state.products, search)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, terminal: TerminalSession = Depends(get_current_terminal)):
    product = terminal.state.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Mahsulot topilmadi")
    return product


# --------------------------------------------------------------------------
# 2. CREAR / ACTUALIZAR / ELIMINAR
# --------------------------------------------------------------------------
@router.post("/", response_model=ProductRead)
def create_product(
    product_in: ProductCreate,
    terminal: TerminalSession = Depends(require_permission(Permission.MANAGE_PRODUCTS)),
):
    return terminal.state.add_entity("products", product_in)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: str,
    product_in: ProductUpdate,
    terminal: TerminalSession = Depends(require_permission(Permission.MANAGE_PRODUCTS)),
):
    return terminal.state.update_entity("products", product_id, product_in)


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    terminal: TerminalSession = Depends(require_permission(Permission.MANAGE_PRODUCTS)),
):
    terminal.state.delete_entity("products", product_id)
    return {"status": "success"}
