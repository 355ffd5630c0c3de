from typing import List, Optional
from decimal import Decimal

from optom_pos.models import PaymentType, CheckoutStatus
from optom_pos.schemas.base import CamelModel, EntityId
from optom_pos.schemas.sales import SalePayment, SaleRead


class PendingPartUpdate(CamelModel):
    type: Optional[PaymentType] = None
    amount: Optional[Decimal] = None


class CheckoutRead(CamelModel):
    status: CheckoutStatus
    total_due: Decimal
    paid_so_far: Decimal
    remaining: Decimal
    currency: str = ""
    customer_id: Optional[EntityId] = None
    committed_parts: List[SalePayment] = []
    pending_part: SalePayment
    can_commit: bool
    can_finalize: bool


class CheckoutFinalized(CamelModel):
    payments: List[SalePayment]
    sale: SaleRead
