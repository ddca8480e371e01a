# app/models/wp_user.py
from sqlalchemy import Column, BigInteger, Integer, String, DateTime

from app.db.base import Base


class WpUser(Base):
    """
    Tabla de usuarios de WordPress (Condominio360).

    Es un directorio externo: este sistema solo la LEE para resolver
    propietarios. Nunca la crea en producción (la migración no la toca)
    ni modifica sus filas.
    """

    __tablename__ = "wp_users"

    id = Column("ID", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    user_login = Column(String(60), nullable=False, index=True)
    user_email = Column(String(100), nullable=False, default="")
    display_name = Column(String(250), nullable=False, default="")
    user_registered = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<WpUser(id={self.id}, login={self.user_login})>"
