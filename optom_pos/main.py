import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from optom_pos.api_client import UpstreamError
from optom_pos.config import settings as app_settings
from optom_pos.routers import (
    auth, products, customers, cart, checkout,
    sales, entities, inventory, settings, reports
)

# 1. LOGGING
logging.basicConfig(
    level=app_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=app_settings.app_name,
    description="Terminal de venta al mayoreo: carrito, cobro con pagos mixtos y nasiya",
    version=app_settings.app_version,
)

# 2. CONFIGURACIÓN DE CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. REGISTRO DE ROUTERS
app.include_router(auth.router, prefix="/api/auth", tags=["🔑 Autenticación"])
app.include_router(products.router, prefix="/api/products", tags=["📦 Mahsulotlar"])
app.include_router(customers.router, prefix="/api/customers", tags=["👥 Mijozlar"])
app.include_router(cart.router, prefix="/api/cart", tags=["🛒 Savatcha"])
app.include_router(checkout.router, prefix="/api/checkout", tags=["💰 To'lov"])
app.include_router(sales.router, prefix="/api/sales", tags=["🧾 Savdolar"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["🔄 Ombor & Kirim"])
app.include_router(settings.router, prefix="/api/settings", tags=["⚙️ Sozlamalar"])
app.include_router(reports.router, prefix="/api/reports", tags=["📊 Hisobotlar"])

for entity, entity_router in entities.routers.items():
    app.include_router(entity_router, prefix=f"/api/{entity}", tags=["🗂️ Ma'lumotnomalar"])


@app.get("/api/health")
def health():
    return {"status": "ok", "env": app_settings.app_env, "version": app_settings.app_version}


# --- 4. MANEJO DE ERRORES ---
@app.exception_handler(UpstreamError)
async def upstream_exception_handler(request: Request, exc: UpstreamError):
    # Errores 4xx del backend se devuelven tal cual; caídas y 5xx como 502
    status_code = exc.status_code if 400 <= exc.status_code < 500 else 502
    logger.warning("Error del backend en %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


@app.exception_handler(404)
async def not_found_exception_handler(request: Request, exc):
    detail = getattr(exc, "detail", None)
    if request.url.path.startswith("/api/") and detail and detail != "Not Found":
        return JSONResponse(status_code=404, content={"detail": detail})
    return JSONResponse(status_code=404, content={"detail": "Resurs topilmadi"})


def run():
    """Punto de entrada `optom-pos`: levanta el servidor con uvicorn."""
    import uvicorn

    uvicorn.run("optom_pos.main:app", host="127.0.0.1", port=8080)
