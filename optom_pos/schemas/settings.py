from typing import List, Optional

from pydantic import Field

from optom_pos.schemas.base import CamelModel, EntityId
from optom_pos.schemas.products import UnitRead


class StoreSettingsRead(CamelModel):
    id: Optional[EntityId] = None
    name: str = ""
    address: str = ""
    phone: str = ""
    currency: str = ""
    location: Optional[str] = None
    units: List[UnitRead] = []

    # Configuración del ticket
    receipt_header: Optional[str] = None
    receipt_footer: Optional[str] = None
    receipt_show_store_name: bool = True
    receipt_show_address: bool = True
    receipt_show_phone: bool = True
    receipt_show_chek_id: bool = True
    receipt_show_date: bool = True
    receipt_show_seller: bool = True
    receipt_show_customer: bool = True
    receipt_show_qr: bool = Field(default=False, alias="receiptShowQR")


class StoreSettingsUpdate(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    currency: Optional[str] = None
    location: Optional[str] = None
    receipt_header: Optional[str] = None
    receipt_footer: Optional[str] = None
    receipt_show_store_name: Optional[bool] = None
    receipt_show_address: Optional[bool] = None
    receipt_show_phone: Optional[bool] = None
    receipt_show_chek_id: Optional[bool] = None
    receipt_show_date: Optional[bool] = None
    receipt_show_seller: Optional[bool] = None
    receipt_show_customer: Optional[bool] = None
    receipt_show_qr: Optional[bool] = Field(default=None, alias="receiptShowQR")
