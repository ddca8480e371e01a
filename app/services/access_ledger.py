"""
Bitácora de accesos vehiculares (ingresos y salidas).

Log de solo anexado, indexado por tarjeta y consultado por propietario.
``log_access`` es el único camino de escritura; no deduplica lecturas
repetidas del lector NFC, cada evento recibido queda registrado.

Un ``log_access`` concurrente con una desactivación puede insertar el
evento después de que la desactivación se confirme (lectura y escritura
separadas); se acepta ese comportamiento.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Union

from app.core.config import TiposAcceso, settings
from app.core.exceptions import InvalidArgumentError, NotFoundError, contexto_operacion
from app.crud import access_log as crud_access
from app.crud import card as crud_card
from app.services.base import ServicioBase
from app.utils.date_helpers import parse_fecha

logger = logging.getLogger(__name__)

ETIQUETAS_TIPO = {
    TiposAcceso.INGRESO: "Ingreso",
    TiposAcceso.SALIDA: "Salida",
}


class MotivoHistorialVacio(Enum):
    """
    Razones por las que el historial responde vacío sin ser un error.

    El cliente recibe 200 con una página vacía y el mensaje del motivo.
    """
    USUARIO_NO_ENCONTRADO = "Usuario no encontrado"
    SIN_TARJETAS = "Usuario no tiene tarjetas registradas"
    SIN_REGISTROS = "No se encontraron registros de acceso"


def etiqueta_tipo(access_type: str) -> str:
    return ETIQUETAS_TIPO.get(access_type, "Salida")


class AccessLedger(ServicioBase):
    """Escritura y consultas de la bitácora de accesos."""

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    def log_access(self, card_uid: str, access_type: str, guard_user: Optional[str] = None) -> Dict[str, Any]:
        """
        Registra un ingreso o una salida de una tarjeta activa.

        Raises:
            InvalidArgumentError: datos faltantes o tipo distinto de 'ingreso'/'salida'
            NotFoundError: no hay tarjeta activa con ese UID
        """
        with contexto_operacion("Error al registrar acceso", self.db):
            if not self.normalizar_uid(card_uid) or not access_type:
                raise InvalidArgumentError("Los campos card_uid y access_type son obligatorios")
            if access_type not in TiposAcceso.TODOS:
                raise InvalidArgumentError('Tipo de acceso debe ser "ingreso" o "salida"')

            uid = self.normalizar_uid(card_uid)
            tarjeta = crud_card.get_card_by_uid(self.db, uid, solo_activas=True)
            if tarjeta is None:
                raise NotFoundError(f"Tarjeta con UID '{uid}' no encontrada o inactiva")

            guard_user = guard_user.strip() if guard_user and guard_user.strip() else None
            momento = self.time.now_datetime()
            log = crud_access.create_access_log(
                self.db,
                card_id=tarjeta.id,
                access_type=access_type,
                timestamp=momento,
                guard_user=guard_user,
            )

            logger.info(f"{etiqueta_tipo(access_type)} registrado: tarjeta={uid}, log_id={log.id}, vigilante={guard_user}")
            return self._resultado(
                f"{etiqueta_tipo(access_type)} registrado exitosamente",
                {
                    "id": log.id,
                    "card_uid": uid,
                    "access_type": access_type,
                    "timestamp": self.time.format_display(log.timestamp),
                    "guard_user": guard_user,
                },
            )

    # ------------------------------------------------------------------
    # Historial paginado
    # ------------------------------------------------------------------

    def _motivo_historial_vacio(self, wp_user_id: int) -> Optional[MotivoHistorialVacio]:
        """Usuario existe → tiene tarjetas (cualquier estado) → tiene registros."""
        if crud_card.get_user_by_id(self.db, wp_user_id) is None:
            return MotivoHistorialVacio.USUARIO_NO_ENCONTRADO
        if crud_card.count_cards_by_user(self.db, wp_user_id) == 0:
            return MotivoHistorialVacio.SIN_TARJETAS
        if crud_access.count_logs_by_user(self.db, wp_user_id) == 0:
            return MotivoHistorialVacio.SIN_REGISTROS
        return None

    @staticmethod
    def _pagina(logs: list, total: int, limit: int, offset: int) -> Dict[str, Any]:
        return {
            "logs": logs,
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "has_more": offset + limit < total,
            },
        }

    @staticmethod
    def _validar_fecha(valor: Optional[Union[str, date]], campo: str) -> Optional[str]:
        if valor is None or valor == "":
            return None
        try:
            return parse_fecha(valor).isoformat()
        except ValueError:
            raise InvalidArgumentError(f"{campo} debe tener formato YYYY-MM-DD")

    def get_history(
        self,
        wp_user_id: int,
        limit: Optional[int] = None,
        offset: int = 0,
        start_date: Optional[Union[str, date]] = None,
        end_date: Optional[Union[str, date]] = None,
    ) -> Dict[str, Any]:
        """
        Historial de accesos del usuario, más recientes primero.

        Args:
            wp_user_id: ID del usuario de WordPress
            limit: tamaño de página (1-200, por defecto 50)
            offset: registros a saltar (>= 0)
            start_date / end_date: filtros inclusivos 'YYYY-MM-DD'

        Returns:
            {success, message, data: {logs, pagination}}; página vacía con
            el motivo como mensaje si el usuario no existe, no tiene
            tarjetas o no tiene registros.
        """
        with contexto_operacion("Error al obtener historial", self.db):
            if limit is None:
                limit = settings.history_default_limit
            if not isinstance(wp_user_id, int) or wp_user_id <= 0:
                raise InvalidArgumentError("ID de usuario inválido")
            if limit < 1 or limit > settings.history_max_limit:
                raise InvalidArgumentError(f"Límite debe estar entre 1 y {settings.history_max_limit}")
            if offset < 0:
                raise InvalidArgumentError("Offset debe ser mayor o igual a 0")
            start_date = self._validar_fecha(start_date, "start_date")
            end_date = self._validar_fecha(end_date, "end_date")

            motivo = self._motivo_historial_vacio(wp_user_id)
            if motivo is not None:
                return self._resultado(motivo.value, self._pagina([], 0, limit, offset))

            filas = crud_access.list_logs_by_user(
                self.db, wp_user_id, limit, offset, start_date=start_date, end_date=end_date
            )
            total = crud_access.count_logs_by_user(
                self.db, wp_user_id, start_date=start_date, end_date=end_date
            )

            logs = []
            for fila in filas:
                log = self._a_dict(fila)
                log["timestamp_formatted"] = self.time.format_display(fila.timestamp)
                log["access_type_spanish"] = etiqueta_tipo(fila.access_type)
                logs.append(log)

            return self._resultado("Historial obtenido exitosamente", self._pagina(logs, total, limit, offset))

    # ------------------------------------------------------------------
    # Estadísticas
    # ------------------------------------------------------------------

    def get_stats(self, wp_user_id: int, period: Optional[str] = None) -> Dict[str, Any]:
        """
        Conteos de ingresos/salidas del usuario en una ventana de tiempo.

        period: today | week | month | year. Cualquier otro valor se
        trata como 'month'.
        """
        with contexto_operacion("Error al obtener estadísticas", self.db):
            periodo = self.time.normalize_period(period)
            filas = crud_access.stats_by_user(self.db, wp_user_id, desde=self.time.period_start(periodo))

            totals = {"ingresos": 0, "salidas": 0, "total": 0}
            daily_stats = []
            for fila in filas:
                stat = self._a_dict(fila)
                stat["date"] = str(stat["date"])[:10]
                if stat["access_type"] == TiposAcceso.INGRESO:
                    totals["ingresos"] += stat["count"]
                else:
                    totals["salidas"] += stat["count"]
                totals["total"] += stat["count"]
                daily_stats.append(stat)

            return self._resultado(
                "Estadísticas obtenidas exitosamente",
                {"period": periodo, "totals": totals, "daily_stats": daily_stats},
            )

    # ------------------------------------------------------------------
    # Último acceso
    # ------------------------------------------------------------------

    def get_last_access(self, card_uid: str) -> Dict[str, Any]:
        """Último evento de la tarjeta (activa o no); data=None si nunca se usó."""
        with contexto_operacion("Error al obtener último acceso", self.db):
            uid = self.normalizar_uid(card_uid)
            fila = crud_access.get_last_access_by_uid(self.db, uid)
            if fila is None:
                return self._resultado("No se encontraron accesos previos", None)

            ultimo = self._a_dict(fila)
            ultimo["timestamp_formatted"] = self.time.format_display(fila.timestamp)
            ultimo["access_type_spanish"] = etiqueta_tipo(fila.access_type)
            return self._resultado("Último acceso obtenido exitosamente", ultimo)

    # ------------------------------------------------------------------
    # Resumen del día
    # ------------------------------------------------------------------

    def get_today_summary(self) -> Dict[str, Any]:
        """
        Resumen global de hoy (hora civil) agrupado por tipo, tarjeta y propietario.
        """
        with contexto_operacion("Error al obtener resumen del día", self.db):
            hoy = self.time.today()
            filas = crud_access.summary_by_date(self.db, hoy)

            summary = {"ingresos": [], "salidas": [], "total_ingresos": 0, "total_salidas": 0}
            for fila in filas:
                datos = fila._mapping
                acceso = {
                    "card_uid": datos["card_uid"],
                    "user_name": datos["display_name"],
                    "user_login": datos["user_login"],
                    "count": datos["count"],
                }
                if datos["access_type"] == TiposAcceso.INGRESO:
                    summary["ingresos"].append(acceso)
                    summary["total_ingresos"] += acceso["count"]
                else:
                    summary["salidas"].append(acceso)
                    summary["total_salidas"] += acceso["count"]

            return self._resultado("Resumen del día obtenido exitosamente", {"date": hoy, "summary": summary})
