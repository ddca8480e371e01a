"""
Health check e índice de la API.
"""
import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.db.session import Database, get_database

router = APIRouter(tags=["Health Check"])


@router.get("/health", summary="Health check básico")
def health_check(request: Request, database: Database = Depends(get_database)) -> Dict:
    """
    Estado del servicio y de la conexión a la base de datos.

    Responde 200 aunque la base de datos no conteste; el campo
    ``database`` indica 'conectado' o 'desconectado'.
    """
    conectado = database.ping()
    return {
        "success": True,
        "message": "Sistema funcionando correctamente",
        "data": {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "database": "conectado" if conectado else "desconectado",
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "version": settings.api_version,
        },
    }


@router.get("/", tags=["Root"])
def read_root() -> Dict:
    return {
        "success": True,
        "message": "API NFC Access - Sistema de gestión de acceso vehicular",
        "version": settings.api_version,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "cards": {
                "register": "POST /cards/register",
                "getByUser": "GET /cards/{wp_user_id}",
                "getOwner": "GET /cards/owner/{card_uid}",
                "search": "GET /cards/search",
                "deactivate": "PUT /cards/deactivate/{card_uid}",
            },
            "access": {
                "log": "POST /access/log",
                "getLogs": "GET /access/logs/{wp_user_id}",
                "getStats": "GET /access/stats/{wp_user_id}",
                "getLastAccess": "GET /access/last/{card_uid}",
                "getTodaySummary": "GET /access/today-summary",
            },
        },
    }
