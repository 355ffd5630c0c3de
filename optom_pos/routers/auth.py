from fastapi import APIRouter, Depends, HTTPException, status

from optom_pos.api_client import UpstreamError
from optom_pos.schemas.users import LoginRequest, Token, MeRead, NavLink
from optom_pos.security import create_access_token, get_current_terminal
from optom_pos.terminals import (
    TerminalRegistry, TerminalSession, ClientFactory, get_registry, get_client_factory
)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    login_in: LoginRequest,
    registry: TerminalRegistry = Depends(get_registry),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """
    Inicia sesión con el PIN del empleado.
    Carga todos los datos del backend y resuelve sus permisos una sola vez.
    """
    if not login_in.pin.isdigit() or len(login_in.pin) != 4:
        raise HTTPException(status_code=400, detail="PIN-kod 4 ta raqamdan iborat bo'lishi kerak.")

    try:
        terminal = registry.open(login_in.pin, client_factory)
    except UpstreamError as exc:
        # Backend caído -> 502; cualquier otro rechazo equivale a PIN incorrecto
        if exc.status_code >= 500:
            raise HTTPException(status_code=502, detail=exc.detail)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="PIN noto'g'ri.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": terminal.employee.id, "sid": terminal.id},
        expires_delta=registry.ttl,
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout")
def logout(
    terminal: TerminalSession = Depends(get_current_terminal),
    registry: TerminalRegistry = Depends(get_registry),
):
    registry.close(terminal.id)
    return {"status": "success"}


@router.get("/me", response_model=MeRead)
def read_me(terminal: TerminalSession = Depends(get_current_terminal)):
    employee = terminal.employee
    role_name = employee.role.name if employee.role else "Noma'lum rol"
    return MeRead(
        employee=employee,
        role_name=role_name,
        capabilities=[p.value for p in terminal.capabilities],
        nav_links=[NavLink(**link) for link in terminal.capabilities.nav_links()],
    )


@router.post("/reload")
def reload_data(terminal: TerminalSession = Depends(get_current_terminal)):
    """Recarga completa de los datos desde el backend."""
    terminal.state.reload()
    return {"status": "success"}
