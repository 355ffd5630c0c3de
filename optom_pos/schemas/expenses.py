from typing import Optional
from decimal import Decimal

from optom_pos.schemas.base import CamelModel, EntityId


class ExpenseCreate(CamelModel):
    amount: Decimal
    type_id: EntityId
    description: Optional[str] = None
    employee_id: Optional[EntityId] = None


class ExpenseUpdate(CamelModel):
    amount: Optional[Decimal] = None
    type_id: Optional[EntityId] = None
    description: Optional[str] = None
    employee_id: Optional[EntityId] = None
