# app/services/base.py
from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.services.time_service import TimeService


class ServicioBase:
    """
    Base de los servicios del núcleo.

    Recibe la sesión de la request y el TimeService compartido; ningún
    servicio abre conexiones por su cuenta.
    """

    def __init__(self, db: Session, time_service: Optional[TimeService] = None):
        self.db = db
        self.time = time_service or TimeService()

    @staticmethod
    def normalizar_uid(card_uid: Optional[str]) -> str:
        """Los UID se comparan siempre en mayúsculas."""
        return (card_uid or "").strip().upper()

    def _a_dict(self, fila: Row) -> Dict[str, Any]:
        """Convierte una fila en dict con fechas en texto 'YYYY-MM-DD HH:mm:ss'."""
        datos = dict(fila._mapping)
        for clave, valor in datos.items():
            if isinstance(valor, datetime):
                datos[clave] = self.time.to_storage(valor)
            elif isinstance(valor, date):
                datos[clave] = valor.isoformat()
        return datos

    @staticmethod
    def _resultado(message: str, data: Any = None) -> Dict[str, Any]:
        return {"success": True, "message": message, "data": data}
