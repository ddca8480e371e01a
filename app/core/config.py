# app/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de acceso permitidos en la bitácora
class TiposAcceso:
    """
    Constantes para los tipos de evento de acceso vehicular.

    - INGRESO: entrada al condominio
    - SALIDA: salida del condominio

    Los valores se comparan en minúsculas exactas, tal como llegan
    desde la caseta de vigilancia.
    """
    INGRESO = "ingreso"
    SALIDA = "salida"

    TODOS = (INGRESO, SALIDA)


class Settings(BaseSettings):
    # --- Core ---
    environment: str = Field("development", description="development | production | test")
    project_name: str = Field("NFC Access API", description="Nombre mostrado en la documentación")
    api_version: str = Field("1.0.0")
    log_level: str = Field("INFO")

    # --- Base de datos (WordPress de Condominio360) ---
    database_url: str = Field(
        "mysql+pymysql://root:@localhost:3306/wordpress_db?charset=utf8mb4",
        description="URL SQLAlchemy de la base de datos de WordPress"
    )
    db_pool_size: int = Field(10, description="Conexiones permanentes del pool")
    db_max_overflow: int = Field(0, description="Conexiones extra sobre el pool")
    db_pool_recycle: int = Field(3600, description="Segundos antes de reciclar una conexión")

    # --- Zona horaria civil (GMT-4 Venezuela) ---
    timezone: str = Field("America/Caracas", description="Zona IANA usada para escribir y mostrar fechas")

    # --- Límites de consulta ---
    history_default_limit: int = Field(50, ge=1)
    history_max_limit: int = Field(200, ge=1)
    search_min_length: int = Field(2, ge=1)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
