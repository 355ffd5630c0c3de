import enum
from typing import Iterable, FrozenSet


class Permission(str, enum.Enum):
    VIEW_DASHBOARD = "view_dashboard"
    USE_SALES_TERMINAL = "use_sales_terminal"
    VIEW_SALES_HISTORY = "view_sales_history"
    MANAGE_PRODUCTS = "manage_products"
    MANAGE_WAREHOUSE = "manage_warehouse"
    MANAGE_CUSTOMERS = "manage_customers"
    MANAGE_SUPPLIERS = "manage_suppliers"
    VIEW_REPORTS = "view_reports"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_EMPLOYEES = "manage_employees"


PERMISSION_LABELS = {
    Permission.VIEW_DASHBOARD: "Boshqaruv panelini ko'rish",
    Permission.USE_SALES_TERMINAL: "Savdo terminalidan foydalanish",
    Permission.VIEW_SALES_HISTORY: "Savdolar tarixini ko'rish",
    Permission.MANAGE_PRODUCTS: "Mahsulotlarni boshqarish",
    Permission.MANAGE_WAREHOUSE: "Omborni boshqarish",
    Permission.MANAGE_CUSTOMERS: "Mijozlarni boshqarish",
    Permission.MANAGE_SUPPLIERS: "Yetkazib beruvchilarni boshqarish",
    Permission.VIEW_REPORTS: "Hisobotlarni ko'rish",
    Permission.MANAGE_SETTINGS: "Sozlamalarni boshqarish",
    Permission.MANAGE_EMPLOYEES: "Xodimlarni boshqarish",
}


# Menú lateral: (ruta, etiqueta, permiso requerido)
NAV_LINKS = [
    ("/", "Boshqaruv Paneli", Permission.VIEW_DASHBOARD),
    ("/savdo", "Savdo Terminali", Permission.USE_SALES_TERMINAL),
    ("/savdo-tarixi", "Savdolar Tarixi", Permission.VIEW_SALES_HISTORY),
    ("/mahsulotlar", "Mahsulotlar", Permission.MANAGE_PRODUCTS),
    ("/ombor", "Ombor", Permission.MANAGE_WAREHOUSE),
    ("/omborlar", "Omborlar", Permission.MANAGE_WAREHOUSE),
    ("/mijozlar", "Mijozlar", Permission.MANAGE_CUSTOMERS),
    ("/yetkazib-beruvchilar", "Yetkazib Beruvchilar", Permission.MANAGE_SUPPLIERS),
    ("/xarajatlar", "Xarajatlar", Permission.MANAGE_SETTINGS),
    ("/hisobotlar", "Hisobotlar", Permission.VIEW_REPORTS),
    ("/hodimlar", "Xodimlar", Permission.MANAGE_EMPLOYEES),
    ("/sozlamalar", "Sozlamalar", Permission.MANAGE_SETTINGS),
]


class CapabilitySet:
    """
    Conjunto inmutable de permisos del empleado autenticado.
    Se resuelve una sola vez al iniciar sesión; después solo se consulta.
    """

    def __init__(self, permissions: Iterable[str] = ()):
        resolved = set()
        for value in permissions:
            try:
                resolved.add(Permission(value))
            except ValueError:
                # Permisos desconocidos del backend se ignoran
                continue
        self._permissions: FrozenSet[Permission] = frozenset(resolved)

    def has(self, permission: Permission) -> bool:
        return permission in self._permissions

    def __contains__(self, permission) -> bool:
        return permission in self._permissions

    def __iter__(self):
        return iter(sorted(self._permissions, key=lambda p: p.value))

    def __len__(self):
        return len(self._permissions)

    def nav_links(self):
        """Enlaces del menú visibles para este conjunto de permisos."""
        return [
            {"path": path, "label": label, "permission": permission.value}
            for path, label, permission in NAV_LINKS
            if permission in self._permissions
        ]

    @classmethod
    def empty(cls) -> "CapabilitySet":
        return cls(())
