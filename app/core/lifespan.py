import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.base import Base
from app.db.session import Database
from app.services.time_service import TimeService
from app.utils.logger import logger

# Registra los modelos en Base.metadata
from app import models  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Maneja startup/shutdown de la app.

    Construye el cliente de base de datos y el TimeService una sola vez y
    los deja en ``app.state``. Si ya vienen inyectados (tests), se reutilizan
    y quien los inyectó es responsable de cerrarlos.
    """
    # --- Startup ---
    logger.info(f" Iniciando {settings.project_name} v{settings.api_version}...")

    database_propia = getattr(app.state, "database", None) is None
    if database_propia:
        app.state.database = Database()
    if getattr(app.state, "time_service", None) is None:
        app.state.time_service = TimeService()
    app.state.started_at = time.monotonic()

    if settings.environment == "development":
        # Solo crea las tablas NFC; wp_users pertenece a WordPress
        try:
            Base.metadata.create_all(
                bind=app.state.database.engine,
                tables=[
                    Base.metadata.tables["condo360_nfc_cards"],
                    Base.metadata.tables["condo360_access_logs"],
                ],
            )
        except SQLAlchemyError as e:
            logger.error(f" No se pudieron crear las tablas NFC: {e}")

    if app.state.database.ping():
        logger.info(" Conexión a la base de datos establecida")
    else:
        logger.warning("  No se pudo conectar a la base de datos; /health reportará 'desconectado'")

    logger.info(f" Zona horaria civil: {app.state.time_service.timezone}")
    logger.info(" Startup completado correctamente")

    # La app se levanta aquí
    yield

    # --- Shutdown ---
    logger.info(" Aplicación apagándose...")
    if database_propia:
        app.state.database.dispose()
    logger.info(" Aplicación cerrada correctamente")
