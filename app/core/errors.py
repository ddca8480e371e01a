from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import NfcAccessError
from app.utils.logger import logger


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _mensaje_validacion(exc: RequestValidationError) -> str:
    partes = []
    for err in exc.errors():
        campo = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        partes.append(f"{campo}: {err.get('msg')}" if campo else str(err.get("msg")))
    return "Error de validación: " + "; ".join(partes)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Registra los manejadores de errores de forma centralizada.

    Todas las respuestas de error usan el sobre {success: false, message}.
    """

    @app.exception_handler(NfcAccessError)
    async def nfc_access_error_handler(request: Request, exc: NfcAccessError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} - {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            return _error(exc.status_code, f"Ruta {request.method} {request.url.path} no encontrada")
        logger.warning(f"{request.method} {request.url.path} - {exc.detail}")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        mensaje = _mensaje_validacion(exc)
        logger.warning(f"{request.method} {request.url.path} - {mensaje}")
        return _error(status.HTTP_400_BAD_REQUEST, mensaje)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f" Error no controlado en {request.method} {request.url.path}: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")
