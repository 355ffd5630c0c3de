from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from optom_pos.config import settings
from optom_pos.models import Permission, PERMISSION_LABELS
from optom_pos.terminals import TerminalRegistry, TerminalSession, get_registry

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])


def get_current_terminal(
    token: str = Depends(oauth2_scheme),
    registry: TerminalRegistry = Depends(get_registry),
) -> TerminalSession:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Avtorizatsiyadan o'tilmagan",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        session_id: str = payload.get("sid")
        if session_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    terminal = registry.get(session_id)
    if terminal is None:
        raise credentials_exception

    return terminal


def require_permission(permission: Permission):
    """Dependencia que exige un permiso ya resuelto en la sesión de la terminal."""

    def checker(terminal: TerminalSession = Depends(get_current_terminal)) -> TerminalSession:
        if not terminal.capabilities.has(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Ruxsat yo'q: {PERMISSION_LABELS[permission]}",
            )
        return terminal

    return checker
