"""
CRUD de la bitácora de accesos.

Consultas sobre condo360_access_logs unidas a tarjetas y usuarios.
Los filtros de fecha comparan la parte DATE() del timestamp con textos
'YYYY-MM-DD', lo que funciona igual en MySQL y SQLite.
"""

import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy import func
from sqlalchemy.engine import Row
from sqlalchemy.orm import Query, Session

from app.models.access_log import AccessLog
from app.models.card import NfcCard
from app.models.wp_user import WpUser

logger = logging.getLogger(__name__)


def _fecha(columna):
    return func.date(columna)


def _aplicar_filtro_fechas(query: Query, start_date: Optional[str], end_date: Optional[str]) -> Query:
    """Filtro inclusivo por fecha del evento."""
    if start_date:
        query = query.filter(_fecha(AccessLog.timestamp) >= start_date)
    if end_date:
        query = query.filter(_fecha(AccessLog.timestamp) <= end_date)
    return query


# ================================================================================
# ESCRITURA (único camino de escritura)
# ================================================================================

def create_access_log(
    db: Session,
    card_id: int,
    access_type: str,
    timestamp: datetime,
    guard_user: Optional[str] = None,
) -> AccessLog:
    log = AccessLog(
        card_id=card_id,
        access_type=access_type,
        timestamp=timestamp,
        guard_user=guard_user,
        created_at=timestamp,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


# ================================================================================
# HISTORIAL POR USUARIO
# ================================================================================

def count_logs_by_user(
    db: Session,
    wp_user_id: int,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> int:
    query = (
        db.query(func.count(AccessLog.id))
        .select_from(AccessLog)
        .join(NfcCard, AccessLog.card_id == NfcCard.id)
        .filter(NfcCard.wp_user_id == wp_user_id)
    )
    query = _aplicar_filtro_fechas(query, start_date, end_date)
    return query.scalar() or 0


def list_logs_by_user(
    db: Session,
    wp_user_id: int,
    limit: int,
    offset: int,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[Row]:
    """
    Página del historial, más recientes primero.

    El desempate por id hace que páginas sucesivas no repitan ni salten
    registros con el mismo timestamp.
    """
    query = (
        db.query(
            AccessLog.id,
            AccessLog.access_type,
            AccessLog.timestamp,
            AccessLog.guard_user,
            AccessLog.created_at,
            NfcCard.card_uid,
            NfcCard.label.label("card_label"),
            WpUser.user_login,
            WpUser.display_name,
        )
        .join(NfcCard, AccessLog.card_id == NfcCard.id)
        .join(WpUser, NfcCard.wp_user_id == WpUser.id)
        .filter(NfcCard.wp_user_id == wp_user_id)
    )
    query = _aplicar_filtro_fechas(query, start_date, end_date)

    return (
        query.order_by(AccessLog.timestamp.desc(), AccessLog.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


# ================================================================================
# ESTADÍSTICAS
# ================================================================================

def stats_by_user(
    db: Session,
    wp_user_id: int,
    desde: Optional[datetime] = None,
) -> List[Row]:
    """
    Conteos agrupados por (tipo, fecha) para las tarjetas del usuario.

    Args:
        desde: límite inferior de la ventana (timestamp >= desde); para
            'today' es la medianoche civil
    """
    fecha = _fecha(AccessLog.timestamp)
    query = (
        db.query(
            AccessLog.access_type,
            func.count(AccessLog.id).label("count"),
            fecha.label("date"),
        )
        .join(NfcCard, AccessLog.card_id == NfcCard.id)
        .filter(NfcCard.wp_user_id == wp_user_id)
    )

    if desde is not None:
        query = query.filter(AccessLog.timestamp >= desde)

    return (
        query.group_by(AccessLog.access_type, fecha)
        .order_by(fecha.desc(), AccessLog.access_type)
        .all()
    )


# ================================================================================
# ÚLTIMO ACCESO Y RESUMEN DEL DÍA
# ================================================================================

def get_last_access_by_uid(db: Session, card_uid: str) -> Optional[Row]:
    """Último evento de la tarjeta, esté activa o no."""
    return (
        db.query(
            AccessLog.access_type,
            AccessLog.timestamp,
            AccessLog.guard_user,
            NfcCard.card_uid,
            NfcCard.label.label("card_label"),
        )
        .join(NfcCard, AccessLog.card_id == NfcCard.id)
        .filter(NfcCard.card_uid == card_uid)
        .order_by(AccessLog.timestamp.desc(), AccessLog.id.desc())
        .first()
    )


def summary_by_date(db: Session, fecha: str) -> List[Row]:
    """Conteos del día agrupados por tipo, tarjeta y propietario (todas las tarjetas)."""
    return (
        db.query(
            AccessLog.access_type,
            func.count(AccessLog.id).label("count"),
            NfcCard.card_uid,
            WpUser.display_name,
            WpUser.user_login,
        )
        .join(NfcCard, AccessLog.card_id == NfcCard.id)
        .join(WpUser, NfcCard.wp_user_id == WpUser.id)
        .filter(_fecha(AccessLog.timestamp) == fecha)
        .group_by(AccessLog.access_type, NfcCard.card_uid, WpUser.display_name, WpUser.user_login)
        .order_by(AccessLog.access_type, WpUser.display_name)
        .all()
    )
