"""
Registro de tarjetas NFC.

Máquina de estados por tarjeta:
    inexistente → activa → inactiva (terminal)

No existe reactivación: un UID desactivado no se puede volver a
registrar porque la unicidad abarca también las filas inactivas.

La verificación de UID duplicado es solo una cortesía; la garantía real
bajo concurrencia es la restricción única uq_nfc_cards_card_uid. Si dos
registros simultáneos pasan la verificación, el segundo INSERT falla con
IntegrityError y se informa como conflicto.
"""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError, contexto_operacion
from app.crud import card as crud_card
from app.services.base import ServicioBase

logger = logging.getLogger(__name__)

UID_MIN = 8
UID_MAX = 32
_PATRON_UID = re.compile(r"^[A-Z0-9]+$")


def validar_formato_uid(card_uid: str) -> None:
    """
    Valida un UID ya normalizado: 8-32 caracteres alfanuméricos.

    Raises:
        InvalidArgumentError
    """
    if not (UID_MIN <= len(card_uid) <= UID_MAX):
        raise InvalidArgumentError(
            f"El UID de la tarjeta debe tener entre {UID_MIN} y {UID_MAX} caracteres"
        )
    if not _PATRON_UID.match(card_uid):
        raise InvalidArgumentError("El UID de la tarjeta solo puede contener letras y números")


class CardRegistry(ServicioBase):
    """Ciclo de vida de las tarjetas y consultas por propietario."""

    def register(self, user_login: str, card_uid: str, label: Optional[str] = None) -> Dict[str, Any]:
        """
        Registra una tarjeta activa para un usuario existente de WordPress.

        Raises:
            InvalidArgumentError: datos faltantes o UID mal formado
            NotFoundError: el login no existe
            ConflictError: el UID ya existe (activo o inactivo)
        """
        with contexto_operacion("Error al registrar tarjeta", self.db):
            uid = self.normalizar_uid(card_uid)
            if not user_login or not uid:
                raise InvalidArgumentError("Los campos wp_user_login y card_uid son obligatorios")
            validar_formato_uid(uid)

            usuario = crud_card.get_user_by_login(self.db, user_login)
            if not usuario:
                raise NotFoundError(f"Usuario '{user_login}' no encontrado en Condominio360")

            if crud_card.get_card_by_uid(self.db, uid):
                raise ConflictError(f"La tarjeta con UID '{uid}' ya está registrada")

            label = label.strip() if label and label.strip() else None
            try:
                tarjeta = crud_card.create_card(
                    self.db,
                    wp_user_id=usuario.id,
                    card_uid=uid,
                    label=label,
                    created_at=self.time.now_datetime(),
                )
            except IntegrityError as e:
                # Otro registro concurrente ganó la restricción única
                self.db.rollback()
                raise ConflictError(f"La tarjeta con UID '{uid}' ya está registrada") from e

            logger.info(f"Tarjeta {uid} registrada para '{user_login}' (wp_user_id={usuario.id})")
            return self._resultado(
                "Tarjeta registrada exitosamente",
                {
                    "id": tarjeta.id,
                    "wp_user_id": tarjeta.wp_user_id,
                    "card_uid": tarjeta.card_uid,
                    "label": tarjeta.label,
                    "active": True,
                },
            )

    def get_by_user_id(self, wp_user_id: int) -> Dict[str, Any]:
        """Tarjetas activas del usuario (lista vacía si no tiene)."""
        with contexto_operacion("Error al obtener tarjetas", self.db):
            filas = crud_card.list_active_cards_with_owner(self.db, wp_user_id)
            return self._resultado(
                "Tarjetas obtenidas exitosamente",
                [self._a_dict(f) for f in filas],
            )

    def get_owner_by_uid(self, card_uid: str) -> Dict[str, Any]:
        """
        Propietario de una tarjeta activa.

        Raises:
            NotFoundError: no hay tarjeta activa con ese UID
        """
        with contexto_operacion("Error al obtener propietario", self.db):
            uid = self.normalizar_uid(card_uid)
            fila = crud_card.get_active_card_with_owner(self.db, uid)
            if fila is None:
                raise NotFoundError(f"Tarjeta con UID '{uid}' no encontrada o inactiva")
            return self._resultado("Propietario encontrado exitosamente", self._a_dict(fila))

    def deactivate(self, card_uid: str) -> Dict[str, Any]:
        """
        Desactiva la tarjeta con ese UID.

        Desactivar una tarjeta ya inactiva vuelve a responder éxito; solo
        falla si ninguna fila tiene el UID.
        """
        with contexto_operacion("Error al desactivar tarjeta", self.db):
            uid = self.normalizar_uid(card_uid)
            tarjeta = crud_card.get_card_by_uid(self.db, uid)
            if tarjeta is None:
                raise NotFoundError(f"Tarjeta con UID '{uid}' no encontrada")

            crud_card.deactivate_card(self.db, tarjeta)
            logger.info(f"Tarjeta {uid} desactivada")
            return {"success": True, "message": "Tarjeta desactivada exitosamente"}

    def search_by_owner(self, termino: str, min_length: Optional[int] = None) -> Dict[str, Any]:
        """
        Busca tarjetas por login, nombre o email del propietario.

        Raises:
            InvalidArgumentError: término más corto que ``min_length``
        """
        if min_length is None:
            min_length = settings.search_min_length
        with contexto_operacion("Error en búsqueda", self.db):
            termino = (termino or "").strip()
            if len(termino) < min_length:
                raise InvalidArgumentError(
                    f"Término de búsqueda debe tener al menos {min_length} caracteres"
                )

            filas = crud_card.search_cards_by_owner(self.db, termino)
            mensaje = (
                "Búsqueda completada exitosamente"
                if filas
                else "No se encontraron propietarios con tarjetas registradas"
            )
            return self._resultado(mensaje, [self._a_dict(f) for f in filas])
