import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from optom_pos.api_client import ShopApiClient
from optom_pos.config import settings
from optom_pos.models import CapabilitySet
from optom_pos.schemas.sales import SaleRead
from optom_pos.services.cart import Cart
from optom_pos.services.checkout import CheckoutSession
from optom_pos.services.state import AppState

logger = logging.getLogger(__name__)


class TerminalSession:
    """
    Todo lo que pertenece a un operador con sesión iniciada:
    cliente del backend, datos cargados, permisos, carrito y cobro en curso.
    """

    def __init__(
        self,
        session_id: str,
        api: ShopApiClient,
        state: AppState,
        capabilities: CapabilitySet,
        expires_at: Optional[datetime] = None,
    ):
        self.id = session_id
        self.api = api
        self.state = state
        self.capabilities = capabilities
        self.expires_at = expires_at
        self.cart = Cart()
        self.checkout: Optional[CheckoutSession] = None
        self.last_sale: Optional[SaleRead] = None

    @property
    def employee(self):
        return self.state.current_user

    @property
    def checkout_open(self) -> bool:
        return self.checkout is not None and self.checkout.is_active

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def open_checkout(self) -> CheckoutSession:
        """Abre la ventana de pago con el total fijo del carrito actual."""
        self.checkout = CheckoutSession(
            total_due=self.cart.total,
            customer_id=self.cart.customer_id,
            customer_exists=self.state.customer_exists,
            currency=self.state.currency,
        )
        return self.checkout

    def close(self) -> None:
        self.state.clear()
        self.api.close()


ClientFactory = Callable[[], ShopApiClient]


class TerminalRegistry:
    """
    Sesiones de terminal activas, en memoria (no sobreviven a un reinicio).
    Cada sesión vive lo mismo que su token; las vencidas se cierran al
    abrir o buscar sesiones.
    """

    def __init__(self, ttl: Optional[timedelta] = None):
        self.ttl = ttl or timedelta(minutes=settings.access_token_expire_minutes)
        self._sessions: Dict[str, TerminalSession] = {}

    def open(self, pin: str, client_factory: ClientFactory) -> TerminalSession:
        """
        Login con PIN contra el backend, carga completa de datos y resolución
        de permisos. Si algo falla, se descarta todo (logout).
        """
        self.purge_expired()

        api = client_factory()
        try:
            api.login(pin)
            state = AppState(api)
            state.reload()
        except Exception:
            api.close()
            raise

        role = state.current_user.role
        capabilities = CapabilitySet(role.permissions if role else [])

        expires_at = datetime.now(timezone.utc) + self.ttl
        session = TerminalSession(uuid.uuid4().hex, api, state, capabilities, expires_at)
        self._sessions[session.id] = session
        logger.info("Sesión abierta para %s (%d permisos)", state.current_user.name, len(capabilities))
        return session

    def get(self, session_id: str) -> Optional[TerminalSession]:
        self.purge_expired()
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
            logger.info("Sesión cerrada: %s", session_id)

    def purge_expired(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [sid for sid, session in list(self._sessions.items()) if session.is_expired(now)]
        for session_id in expired:
            session = self._sessions.pop(session_id, None)
            if session is not None:
                session.close()
        if expired:
            logger.info("Sesiones vencidas cerradas: %d", len(expired))
        return len(expired)

    def __len__(self):
        return len(self._sessions)


registry = TerminalRegistry()


# Dependencias para los endpoints
def get_registry() -> TerminalRegistry:
    return registry


def get_client_factory() -> ClientFactory:
    return ShopApiClient
