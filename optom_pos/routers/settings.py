from fastapi import APIRouter, Depends, HTTPException

from optom_pos.models import Permission
from optom_pos.schemas.settings import StoreSettingsRead, StoreSettingsUpdate
from optom_pos.security import get_current_terminal, require_permission
from optom_pos.terminals import TerminalSession

router = APIRouter()


@router.get("/", response_model=StoreSettingsRead)
def get_settings(terminal: TerminalSession = Depends(get_current_terminal)):
    """Datos de la tienda (cualquier empleado: moneda, encabezado del ticket...)."""
    if terminal.state.settings is None:
        raise HTTPException(status_code=404, detail="Sozlamalar topilmadi")
    return terminal.state.settings


@router.put("/", response_model=StoreSettingsRead)
def update_settings(
    settings_in: StoreSettingsUpdate,
    terminal: TerminalSession = Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    terminal.state.update_settings(settings_in)
    return terminal.state.settings
