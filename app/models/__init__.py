from app.db.base import Base

# Importa modelos para que se registren en Base.metadata
from .wp_user import WpUser
from .card import NfcCard
from .access_log import AccessLog

__all__ = [
    "WpUser",
    "NfcCard",
    "AccessLog",
    "Base",
]
