"""create_nfc_tables

Revision ID: 4f2a9c1e7b30
Revises:
Create Date: 2025-10-20 09:12:31.504218

Crea las tablas del sistema de acceso NFC sobre la base de datos de
WordPress: condo360_nfc_cards y condo360_access_logs.
La tabla wp_users ya existe (es de WordPress) y no se toca.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c1e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Crea tarjetas NFC y bitácora de accesos con sus índices.
    """
    op.create_table(
        'condo360_nfc_cards',

        # ==================== PRIMARY KEY ====================
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),

        # ==================== PROPIETARIO ====================
        sa.Column('wp_user_id', sa.BigInteger(), nullable=False, comment='FK a wp_users.ID'),

        # ==================== IDENTIFICACIÓN ====================
        sa.Column('card_uid', sa.String(32), nullable=False, comment='UID en mayúsculas (8-32 caracteres)'),
        sa.Column('label', sa.String(255), nullable=True, comment='Etiqueta libre'),

        # ==================== ESTADO ====================
        sa.Column('active', sa.Boolean(), nullable=False, server_default='1', comment='Activa/inactiva'),

        # ==================== AUDITORÍA ====================
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='Hora civil (GMT-4)'),

        # ==================== CONSTRAINTS ====================
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['wp_user_id'], ['wp_users.ID'], name='fk_nfc_cards_wp_user'),
        # El UID queda bloqueado también en tarjetas inactivas
        sa.UniqueConstraint('card_uid', name='uq_nfc_cards_card_uid'),
    )

    op.create_index('idx_nfc_cards_wp_user', 'condo360_nfc_cards', ['wp_user_id'])
    op.create_index('idx_nfc_cards_uid_active', 'condo360_nfc_cards', ['card_uid', 'active'])

    op.create_table(
        'condo360_access_logs',

        # ==================== PRIMARY KEY ====================
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),

        # ==================== TARJETA ====================
        sa.Column('card_id', sa.BigInteger(), nullable=False, comment='FK a condo360_nfc_cards.id'),

        # ==================== EVENTO ====================
        sa.Column('access_type', sa.String(10), nullable=False, comment='ingreso | salida'),
        sa.Column('timestamp', sa.DateTime(), nullable=False, comment='Hora civil (GMT-4)'),
        sa.Column('guard_user', sa.String(100), nullable=True, comment='Vigilante'),

        # ==================== AUDITORÍA ====================
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='Igual a timestamp'),

        # ==================== CONSTRAINTS ====================
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['card_id'], ['condo360_nfc_cards.id'], name='fk_access_logs_card'),
        sa.CheckConstraint("access_type IN ('ingreso', 'salida')", name='ck_access_logs_access_type'),
    )

    op.create_index('idx_access_logs_card', 'condo360_access_logs', ['card_id'])
    op.create_index('idx_access_logs_timestamp', 'condo360_access_logs', ['timestamp'])


def downgrade() -> None:
    """
    Elimina la bitácora y las tarjetas (en ese orden por la FK).
    """
    op.drop_index('idx_access_logs_timestamp', table_name='condo360_access_logs')
    op.drop_index('idx_access_logs_card', table_name='condo360_access_logs')
    op.drop_table('condo360_access_logs')

    op.drop_index('idx_nfc_cards_uid_active', table_name='condo360_nfc_cards')
    op.drop_index('idx_nfc_cards_wp_user', table_name='condo360_nfc_cards')
    op.drop_table('condo360_nfc_cards')
