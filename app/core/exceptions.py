"""
Excepciones de dominio del sistema de acceso NFC.

Taxonomía:
- InvalidArgumentError: entrada mal formada o fuera de rango (HTTP 400)
- NotFoundError: tarjeta/usuario/registro inexistente (HTTP 404 en consultas
  directas; los routers la convierten en 400 en operaciones compuestas)
- ConflictError: UID duplicado al registrar (HTTP 400)
- StoreError: fallo de la base de datos (HTTP 500)

Cada operación del núcleo se ejecuta dentro de ``contexto_operacion`` para
que el mensaje final lleve el prefijo de la operación, por ejemplo
"Error al registrar tarjeta: La tarjeta con UID 'X' ya está registrada".
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class NfcAccessError(Exception):
    """Base de todos los errores de dominio."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def con_prefijo(self, prefijo: str) -> "NfcAccessError":
        """Devuelve un error de la misma categoría con el contexto antepuesto."""
        return type(self)(f"{prefijo}: {self.message}")


class InvalidArgumentError(NfcAccessError):
    status_code = 400


class NotFoundError(NfcAccessError):
    status_code = 404


class ConflictError(NfcAccessError):
    status_code = 400


class StoreError(NfcAccessError):
    status_code = 500


@contextmanager
def contexto_operacion(prefijo: str, db: Optional[Session] = None) -> Iterator[None]:
    """
    Envuelve una operación del núcleo.

    - Errores de dominio: se relanzan con el prefijo y la misma categoría.
    - Errores de SQLAlchemy: rollback de la sesión y se relanzan como StoreError.

    Nunca reintenta ni silencia errores.
    """
    try:
        yield
    except NfcAccessError as e:
        raise e.con_prefijo(prefijo) from e
    except SQLAlchemyError as e:
        if db is not None:
            db.rollback()
        logger.error(f"{prefijo}: error de base de datos", exc_info=True)
        raise StoreError(f"{prefijo}: {e}") from e
