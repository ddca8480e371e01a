# app/db/session.py
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.utils.logger import logger


class Database:
    """
    Cliente de la base de datos: engine con pool acotado + fábrica de sesiones.

    Se construye una sola vez en el arranque (ver app.core.lifespan), se
    guarda en ``app.state.database`` y se cierra con ``dispose()`` al apagar.
    """

    def __init__(self, url: str = None):
        self.url = url or settings.database_url

        if self.url.startswith("sqlite"):
            # SQLite en memoria (tests): una sola conexión compartida entre hilos
            self.engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                future=True,
            )
        else:
            self.engine = create_engine(
                self.url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=settings.db_pool_recycle,
                pool_pre_ping=True,
                future=True,
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        """Verifica la conexión ejecutando SELECT 1."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f" Error al conectar con la base de datos: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info(" Pool de conexiones cerrado")


def get_database(request: Request) -> Database:
    return request.app.state.database


# Dependency para FastAPI
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency que provee una sesión de base de datos.
    Se cierra automáticamente después de cada request.
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
