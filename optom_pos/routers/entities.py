"""
CRUD de catálogos que el backend expone con la misma forma REST:
/{entidad}/ y /{entidad}/{id}/. Cada alta/cambio/baja recarga los datos.
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from optom_pos.models import Permission
from optom_pos.schemas.customers import SupplierCreate, SupplierRead, SupplierUpdate
from optom_pos.schemas.expenses import ExpenseCreate, ExpenseUpdate
from optom_pos.schemas.inventory import (
    WarehouseCreate, WarehouseProductCreate, WarehouseProductRead, WarehouseProductUpdate,
    WarehouseRead, WarehouseUpdate,
)
from optom_pos.schemas.products import UnitCreate, UnitRead
from optom_pos.schemas.users import (
    EmployeeCreate, EmployeeRead, EmployeeUpdate, RoleCreate, RoleRead, RoleUpdate
)
from optom_pos.security import require_permission
from optom_pos.terminals import TerminalSession


def build_entity_router(
    entity: str,
    permission: Permission,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    read_model: Optional[Type[BaseModel]] = None,
    collection: Optional[str] = None,
) -> APIRouter:
    """
    `collection` es el atributo de AppState con la lista ya cargada;
    sin él, la entidad no se puede listar desde la terminal.
    """
    router = APIRouter()
    guard = require_permission(permission)

    if collection:
        @router.get("/", response_model=List[read_model])
        def list_entities(terminal: TerminalSession = Depends(guard)):
            return getattr(terminal.state, collection)

    @router.post("/", response_model=read_model)
    def create_entity(payload: create_model, terminal: TerminalSession = Depends(guard)):
        return terminal.state.add_entity(entity, payload)

    @router.put("/{entity_id}", response_model=read_model)
    def update_entity(entity_id: str, payload: update_model, terminal: TerminalSession = Depends(guard)):
        return terminal.state.update_entity(entity, entity_id, payload)

    @router.delete("/{entity_id}")
    def delete_entity(entity_id: str, terminal: TerminalSession = Depends(guard)):
        terminal.state.delete_entity(entity, entity_id)
        return {"status": "success"}

    return router


# (entidad, permiso, crear, actualizar, lectura, colección en AppState)
ENTITIES = [
    ("employees", Permission.MANAGE_EMPLOYEES, EmployeeCreate, EmployeeUpdate, EmployeeRead, "employees"),
    ("roles", Permission.MANAGE_EMPLOYEES, RoleCreate, RoleUpdate, RoleRead, "roles"),
    ("units", Permission.MANAGE_PRODUCTS, UnitCreate, UnitCreate, UnitRead, "units"),
    ("suppliers", Permission.MANAGE_SUPPLIERS, SupplierCreate, SupplierUpdate, SupplierRead, "suppliers"),
    ("warehouses", Permission.MANAGE_WAREHOUSE, WarehouseCreate, WarehouseUpdate, WarehouseRead, "warehouses"),
    (
        "warehouse-products", Permission.MANAGE_WAREHOUSE,
        WarehouseProductCreate, WarehouseProductUpdate, WarehouseProductRead, "warehouse_products",
    ),
    ("expenses", Permission.MANAGE_SETTINGS, ExpenseCreate, ExpenseUpdate, None, None),
]

routers = {
    entity: build_entity_router(entity, permission, create, update, read, collection)
    for entity, permission, create, update, read, collection in ENTITIES
}
