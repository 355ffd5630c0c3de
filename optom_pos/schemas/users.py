from typing import List, Optional
from pydantic import BaseModel, field_validator

from optom_pos.models import Permission
from optom_pos.schemas.base import CamelModel, EntityId


# --- ROLES ---

class RoleRead(CamelModel):
    id: EntityId
    name: str
    permissions: List[str] = []


class RoleCreate(CamelModel):
    name: str
    permissions: List[Permission] = []


class RoleUpdate(CamelModel):
    name: Optional[str] = None
    permissions: Optional[List[Permission]] = None


# --- EMPLEADOS ---

def _check_pin(pin: Optional[str]) -> Optional[str]:
    if pin is None or pin == "":
        return None
    if len(pin) != 4 or not pin.isdigit():
        raise ValueError("PIN-kod 4 ta raqamdan iborat bo'lishi kerak.")
    return pin


class EmployeeRead(CamelModel):
    id: EntityId
    name: str
    phone: str = ""
    role_id: Optional[EntityId] = None
    role: Optional[RoleRead] = None


class EmployeeCreate(CamelModel):
    name: str
    phone: str
    role_id: EntityId
    pin: str  # Obligatorio al dar de alta

    @field_validator("pin")
    @classmethod
    def pin_is_four_digits(cls, v):
        if _check_pin(v) is None:
            raise ValueError("Yangi xodim uchun 4 xonali PIN-kod kiritilishi shart.")
        return v


class EmployeeUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    role_id: Optional[EntityId] = None
    pin: Optional[str] = None  # Solo si se quiere cambiar

    @field_validator("pin")
    @classmethod
    def pin_is_four_digits(cls, v):
        return _check_pin(v)


# --- AUTENTICACIÓN DE LA TERMINAL ---

class LoginRequest(BaseModel):
    pin: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class NavLink(BaseModel):
    path: str
    label: str
    permission: str


class MeRead(BaseModel):
    employee: EmployeeRead
    role_name: str
    capabilities: List[str]
    nav_links: List[NavLink]
