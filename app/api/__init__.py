from fastapi import APIRouter

from app.api.routers import access, cards, health

# Sin prefijo de versión: el plugin de WordPress consume /cards y /access directamente
api_router = APIRouter(redirect_slashes=False)

# Registro de módulos de rutas
api_router.include_router(health.router)
api_router.include_router(cards.router, prefix="/cards", tags=["Tarjetas"])
api_router.include_router(access.router, prefix="/access", tags=["Accesos"])
