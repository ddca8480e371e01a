"""
CRUD de Tarjetas NFC.

Operaciones de acceso a datos sobre condo360_nfc_cards y su join con
wp_users. Todas las consultas usan expresiones SQLAlchemy (parámetros
enlazados), nunca interpolación de texto.

Las validaciones de negocio viven en app.services.card_registry.
"""

import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy import func, or_
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.models.card import NfcCard
from app.models.wp_user import WpUser

logger = logging.getLogger(__name__)


# ================================================================================
# DIRECTORIO DE USUARIOS (solo lectura)
# ================================================================================

def get_user_by_login(db: Session, user_login: str) -> Optional[WpUser]:
    return db.query(WpUser).filter(WpUser.user_login == user_login).first()


def get_user_by_id(db: Session, wp_user_id: int) -> Optional[WpUser]:
    return db.query(WpUser).filter(WpUser.id == wp_user_id).first()


# ================================================================================
# OPERACIONES DE LECTURA
# ================================================================================

def get_card_by_uid(db: Session, card_uid: str, solo_activas: bool = False) -> Optional[NfcCard]:
    """
    Obtiene una tarjeta por UID exacto.

    Args:
        db: Sesión de base de datos
        card_uid: UID ya normalizado a mayúsculas
        solo_activas: Si True, ignora tarjetas desactivadas

    Returns:
        NfcCard o None
    """
    query = db.query(NfcCard).filter(NfcCard.card_uid == card_uid)

    if solo_activas:
        query = query.filter(NfcCard.active == True)

    return query.first()


def count_cards_by_user(db: Session, wp_user_id: int) -> int:
    """Cuenta todas las tarjetas del usuario, activas o no."""
    return db.query(func.count(NfcCard.id)).filter(NfcCard.wp_user_id == wp_user_id).scalar() or 0


def list_active_cards_with_owner(db: Session, wp_user_id: int) -> List[Row]:
    """Tarjetas activas del usuario con datos del propietario, más recientes primero."""
    return (
        db.query(
            NfcCard.id,
            NfcCard.card_uid,
            NfcCard.label,
            NfcCard.active,
            NfcCard.created_at,
            NfcCard.wp_user_id,
            WpUser.user_login,
            WpUser.display_name,
            WpUser.user_email,
        )
        .join(WpUser, NfcCard.wp_user_id == WpUser.id)
        .filter(NfcCard.wp_user_id == wp_user_id, NfcCard.active == True)
        .order_by(NfcCard.created_at.desc(), NfcCard.id.desc())
        .all()
    )


def get_active_card_with_owner(db: Session, card_uid: str) -> Optional[Row]:
    """Tarjeta activa por UID con datos del propietario."""
    return (
        db.query(
            NfcCard.id.label("card_id"),
            NfcCard.card_uid,
            NfcCard.label,
            NfcCard.active,
            WpUser.id.label("wp_user_id"),
            WpUser.user_login,
            WpUser.display_name,
            WpUser.user_email,
        )
        .join(WpUser, NfcCard.wp_user_id == WpUser.id)
        .filter(NfcCard.card_uid == card_uid, NfcCard.active == True)
        .first()
    )


def search_cards_by_owner(db: Session, termino: str) -> List[Row]:
    """
    Busca tarjetas (activas e inactivas) cuyo propietario coincida por
    login, nombre visible o email. Coincidencia parcial sin distinguir
    mayúsculas; los comodines del término se escapan.
    """
    termino = termino.lower()
    return (
        db.query(
            NfcCard.id,
            NfcCard.card_uid,
            NfcCard.label,
            NfcCard.active,
            NfcCard.created_at,
            NfcCard.wp_user_id,
            WpUser.user_login,
            WpUser.display_name,
            WpUser.user_email,
        )
        .join(WpUser, NfcCard.wp_user_id == WpUser.id)
        .filter(
            or_(
                func.lower(WpUser.user_login).contains(termino, autoescape=True),
                func.lower(WpUser.display_name).contains(termino, autoescape=True),
                func.lower(WpUser.user_email).contains(termino, autoescape=True),
            )
        )
        .order_by(WpUser.display_name, NfcCard.created_at.desc())
        .all()
    )


# ================================================================================
# OPERACIONES DE ESCRITURA
# ================================================================================

def create_card(
    db: Session,
    wp_user_id: int,
    card_uid: str,
    label: Optional[str],
    created_at: datetime,
) -> NfcCard:
    """
    Inserta una tarjeta activa.

    Raises:
        IntegrityError: si otro proceso registró el mismo UID entre la
            verificación previa y el INSERT (restricción uq_nfc_cards_card_uid)
    """
    db_card = NfcCard(
        wp_user_id=wp_user_id,
        card_uid=card_uid,
        label=label,
        active=True,
        created_at=created_at,
    )
    db.add(db_card)
    db.commit()
    db.refresh(db_card)

    logger.info(f"Tarjeta creada: id={db_card.id}, uid={card_uid}, wp_user_id={wp_user_id}")
    return db_card


def deactivate_card(db: Session, card: NfcCard) -> NfcCard:
    """Marca la tarjeta como inactiva (soft state, no se borra)."""
    card.active = False
    db.commit()
    db.refresh(card)

    logger.info(f"Tarjeta desactivada: id={card.id}, uid={card.card_uid}")
    return card
