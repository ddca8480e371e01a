from typing import Optional

from fastapi import FastAPI

from app.api import api_router
from app.core.config import settings
from app.core.errors import setup_exception_handlers
from app.core.lifespan import lifespan
from app.core.middleware import setup_middleware
from app.db.session import Database
from app.services.time_service import TimeService


def create_app(database: Optional[Database] = None, time_service: Optional[TimeService] = None) -> FastAPI:
    """
    Factory function que crea y configura la aplicación FastAPI.

    Args:
        database: cliente de base de datos ya construido (tests); si es
            None el lifespan crea uno con settings.database_url
        time_service: reloj inyectable; si es None se usa el reloj real
    """
    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        description="API de gestión de tarjetas NFC y registro de accesos vehiculares de Condominio360",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.time_service = time_service

    # --- Logging de requests y manejo de errores ---
    setup_middleware(app)
    setup_exception_handlers(app)

    # --- Rutas centralizadas ---
    app.include_router(api_router)

    return app


app = create_app()
