from typing import Optional
from decimal import Decimal
from datetime import datetime

from pydantic import field_validator

from optom_pos.models import PaymentType, DEBT_PAYMENT_TYPES
from optom_pos.schemas.base import CamelModel, EntityId


# --- CLIENTES ---

class CustomerRead(CamelModel):
    id: EntityId
    name: str
    phone: str = ""
    address: Optional[str] = None
    debt: Decimal = Decimal("0.00")  # Saldo deudor (nasiya)


class CustomerCreate(CamelModel):
    name: str
    phone: str
    address: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Ism va telefon raqam kiritilishi shart.")
        return v.strip()


class CustomerUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# --- ABONOS A DEUDA ---

class DebtPaymentRead(CamelModel):
    id: EntityId
    customer_id: EntityId
    amount: Decimal
    date: Optional[datetime] = None
    payment_type: PaymentType


class DebtPaymentCreate(CamelModel):
    amount: Decimal
    payment_type: PaymentType = PaymentType.CASH

    @field_validator("payment_type")
    @classmethod
    def not_debt(cls, v):
        if v not in DEBT_PAYMENT_TYPES:
            raise ValueError("Qarzni nasiya bilan to'lab bo'lmaydi.")
        return v


# --- PROVEEDORES ---

class SupplierRead(CamelModel):
    id: EntityId
    name: str
    contact_person: Optional[str] = None
    phone: str = ""
    address: Optional[str] = None
    bank_details: Optional[str] = None


class SupplierCreate(CamelModel):
    name: str
    contact_person: Optional[str] = None
    phone: str
    address: Optional[str] = None
    bank_details: Optional[str] = None


class SupplierUpdate(CamelModel):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bank_details: Optional[str] = None
