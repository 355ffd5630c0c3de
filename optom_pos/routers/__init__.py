# optom_pos/routers/__init__.py

# Expone los módulos para que "from optom_pos.routers import cart" funcione
from . import auth
from . import products
from . import customers
from . import cart
from . import checkout
from . import sales
from . import entities
from . import inventory
from . import settings
from . import reports
