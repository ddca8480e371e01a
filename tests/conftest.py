"""
Configuración central de pytest y fixtures compartidas para todos los tests.

Proporciona:
- Base de datos SQLite en memoria con el esquema completo (incluye wp_users)
- Reloj congelado para el TimeService
- Usuarios de WordPress de prueba
- Cliente HTTP de prueba con la app construida sobre esa base de datos
"""
import os

# La configuración se lee al importar app.core.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["TIMEZONE"] = "America/Caracas"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import Database
from app.main import create_app
from app.models import WpUser
from app.services.time_service import TimeService

# Lunes 20/10/2025 14:05:09 en Caracas (GMT-4)
INSTANTE_BASE = datetime(2025, 10, 20, 18, 5, 9, tzinfo=timezone.utc)


class RelojFijo:
    """Reloj controlado por el test: devuelve siempre el mismo instante hasta que se avanza."""

    def __init__(self, instante: datetime = INSTANTE_BASE):
        self.instante = instante

    def __call__(self) -> datetime:
        return self.instante

    def avanzar(self, **kwargs) -> None:
        self.instante = self.instante + timedelta(**kwargs)


# ==================== FIXTURES GLOBALES ====================

@pytest.fixture
def reloj():
    return RelojFijo()


@pytest.fixture
def time_service(reloj):
    """TimeService en America/Caracas con el reloj congelado."""
    return TimeService("America/Caracas", clock=reloj)


@pytest.fixture
def database():
    """Base de datos en memoria, nueva para cada test."""
    database = Database("sqlite://")
    Base.metadata.create_all(bind=database.engine)

    yield database

    Base.metadata.drop_all(bind=database.engine)
    database.dispose()


@pytest.fixture
def db(database):
    """Sesión de base de datos para pruebas."""
    session = database.session()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def usuarios(db):
    """Usuarios de WordPress de prueba indexados por login."""
    registros = [
        WpUser(user_login="jdoe", user_email="jdoe@example.com", display_name="John Doe"),
        WpUser(user_login="mperez", user_email="maria.perez@example.com", display_name="María Pérez"),
        WpUser(user_login="apartamento1134", user_email="apto1134@example.com", display_name="Apartamento 1134"),
    ]
    db.add_all(registros)
    db.commit()
    for usuario in registros:
        db.refresh(usuario)
    return {u.user_login: u for u in registros}


@pytest.fixture
def client(database, time_service, usuarios):
    """Cliente HTTP para pruebas de endpoints."""
    app = create_app(database=database, time_service=time_service)
    with TestClient(app) as test_client:
        yield test_client


# ==================== CONFIGURACIÓN DE PYTEST ====================

def pytest_configure(config):
    """Configuración inicial de pytest.

    Define marcadores personalizados para categorizar tests.
    """
    config.addinivalue_line(
        "markers",
        "unit: pruebas unitarias (servicios y utilidades)"
    )
    config.addinivalue_line(
        "markers",
        "integration: pruebas de endpoints HTTP"
    )
