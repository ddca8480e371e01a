"""
Modelo de la bitácora de accesos (ingresos y salidas vehiculares).

Es un log de solo escritura:
- Se crea únicamente desde AccessLedger.log_access
- Nunca se actualiza ni se elimina
- ``timestamp`` y ``created_at`` llevan el mismo valor en hora civil (GMT-4)
"""

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey, Index, CheckConstraint

from app.db.base import Base


class AccessLog(Base):
    """Evento de acceso (ingreso o salida) de una tarjeta."""

    __tablename__ = "condo360_access_logs"

    # ==================== PRIMARY KEY ====================
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
        comment="Identificador interno del evento"
    )

    # ==================== TARJETA ====================
    card_id = Column(
        BigInteger,
        ForeignKey("condo360_nfc_cards.id", name="fk_access_logs_card"),
        nullable=False,
        comment="FK a condo360_nfc_cards.id (activa al momento de escribir)"
    )

    # ==================== EVENTO ====================
    access_type = Column(
        String(10),
        nullable=False,
        comment="ingreso | salida"
    )

    timestamp = Column(
        DateTime,
        nullable=False,
        comment="Momento del evento en hora civil (GMT-4)"
    )

    guard_user = Column(
        String(100),
        nullable=True,
        comment="Vigilante que registró el evento"
    )

    # ==================== AUDITORÍA ====================
    created_at = Column(
        DateTime,
        nullable=False,
        comment="Igual a timestamp"
    )

    # ==================== ÍNDICES ====================
    __table_args__ = (
        CheckConstraint("access_type IN ('ingreso', 'salida')", name="ck_access_logs_access_type"),
        Index("idx_access_logs_card", "card_id"),
        Index("idx_access_logs_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<AccessLog(id={self.id}, card_id={self.card_id}, tipo={self.access_type}, ts={self.timestamp})>"
