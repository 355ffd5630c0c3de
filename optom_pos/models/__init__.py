# optom_pos/models/__init__.py

# 1. Permisos y roles
from .permissions import Permission, PERMISSION_LABELS, NAV_LINKS, CapabilitySet

# 2. Ventas y pagos
from .sales import PaymentType, PAYMENT_TYPE_LABELS, DEBT_PAYMENT_TYPES, CheckoutStatus

# 3. Inventario
from .inventory import StockMovementType, ProductStatus
