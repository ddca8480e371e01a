"""
Modelo de Tarjeta NFC asociada a un propietario de WordPress.

Ciclo de vida:
- Se crea activa al registrarse (el usuario debe existir)
- Solo cambia por desactivación (activa → inactiva, sin retorno)
- Nunca se elimina físicamente

El UID es único en toda la tabla, incluso entre tarjetas inactivas:
un UID desactivado queda bloqueado para siempre.
"""

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Boolean, ForeignKey, Index, UniqueConstraint, text

from app.db.base import Base


class NfcCard(Base):
    """Tarjeta NFC (credencial de acceso vehicular)."""

    __tablename__ = "condo360_nfc_cards"

    # ==================== PRIMARY KEY ====================
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
        comment="Identificador interno de la tarjeta"
    )

    # ==================== PROPIETARIO ====================
    wp_user_id = Column(
        BigInteger,
        ForeignKey("wp_users.ID", name="fk_nfc_cards_wp_user"),
        nullable=False,
        comment="FK a wp_users.ID"
    )

    # ==================== IDENTIFICACIÓN ====================
    card_uid = Column(
        String(32),
        nullable=False,
        comment="UID de la tarjeta NFC en mayúsculas (8-32 caracteres)"
    )

    label = Column(
        String(255),
        nullable=True,
        comment="Etiqueta libre (ej. 'Tarjeta vehículo principal')"
    )

    # ==================== ESTADO ====================
    active = Column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("1"),
        comment="Activa/inactiva (soft state, nunca se borra)"
    )

    # ==================== AUDITORÍA ====================
    created_at = Column(
        DateTime,
        nullable=False,
        comment="Fecha de registro en hora civil (GMT-4)"
    )

    # ==================== ÍNDICES ====================
    __table_args__ = (
        UniqueConstraint("card_uid", name="uq_nfc_cards_card_uid"),
        Index("idx_nfc_cards_wp_user", "wp_user_id"),
        Index("idx_nfc_cards_uid_active", "card_uid", "active"),
    )

    def __repr__(self) -> str:
        return f"<NfcCard(id={self.id}, uid={self.card_uid}, active={self.active})>"
