"""Router de la bitácora de accesos - registro de eventos y consultas."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from app.api.deps import get_access_ledger
from app.core.exceptions import NotFoundError
from app.schemas.access import (
    AccessLogRequest,
    AccessLogCreatedResponse,
    AccessHistoryResponse,
    AccessStatsResponse,
    LastAccessResponse,
    TodaySummaryResponse,
)
from app.schemas.common import ErrorResponse
from app.services.access_ledger import AccessLedger

router = APIRouter(tags=["Accesos"])

ERRORES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post(
    "/log",
    response_model=AccessLogCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORES,
    summary="Registrar ingreso/salida",
    description="Registra un evento de acceso para una tarjeta activa con la hora civil del condominio."
)
def log_access(
    payload: AccessLogRequest,
    ledger: AccessLedger = Depends(get_access_ledger),
):
    try:
        return ledger.log_access(payload.card_uid, payload.access_type, payload.guard_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get(
    "/logs/{wp_user_id}",
    response_model=AccessHistoryResponse,
    responses=ERRORES,
    summary="Historial de accesos de un usuario",
    description="Historial paginado, más recientes primero. Fechas inclusivas en formato YYYY-MM-DD."
)
def get_history(
    wp_user_id: int,
    limit: Optional[int] = Query(None, description="Tamaño de página (1-200, por defecto 50)"),
    offset: int = Query(0, description="Registros a saltar"),
    start_date: Optional[str] = Query(None, description="Fecha inicial YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="Fecha final YYYY-MM-DD"),
    ledger: AccessLedger = Depends(get_access_ledger),
):
    return ledger.get_history(
        wp_user_id,
        limit=limit,
        offset=offset,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/stats/{wp_user_id}",
    response_model=AccessStatsResponse,
    responses=ERRORES,
    summary="Estadísticas de accesos",
    description="Conteos por tipo y por día. period: today | week | month | year (otros valores = month)."
)
def get_stats(
    wp_user_id: int,
    period: Optional[str] = Query("month", description="Período de la ventana"),
    ledger: AccessLedger = Depends(get_access_ledger),
):
    return ledger.get_stats(wp_user_id, period)


@router.get(
    "/last/{card_uid}",
    response_model=LastAccessResponse,
    responses=ERRORES,
    summary="Último acceso de una tarjeta"
)
def get_last_access(card_uid: str, ledger: AccessLedger = Depends(get_access_ledger)):
    return ledger.get_last_access(card_uid)


@router.get(
    "/today-summary",
    response_model=TodaySummaryResponse,
    responses=ERRORES,
    summary="Resumen de accesos del día"
)
def get_today_summary(ledger: AccessLedger = Depends(get_access_ledger)):
    return ledger.get_today_summary()
