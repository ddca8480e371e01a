# app/utils/logger.py
import logging

from app.core.config import settings

# Logger raíz del paquete: los módulos usan logging.getLogger(__name__) y heredan el handler
logger = logging.getLogger("app")
logger.setLevel(settings.log_level.upper())
if not logger.handlers:
    ch = logging.StreamHandler()
    fmt = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    formatter = logging.Formatter(fmt)
    ch.setFormatter(formatter)
    logger.addHandler(ch)
