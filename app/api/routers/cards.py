"""Router de Tarjetas NFC - registro, consulta y desactivación."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from app.api.deps import get_card_registry
from app.core.exceptions import NotFoundError
from app.schemas.card import (
    CardRegisterRequest,
    CardRegisteredResponse,
    CardListResponse,
    CardOwnerResponse,
)
from app.schemas.common import ErrorResponse, ResponseBase
from app.services.card_registry import CardRegistry

router = APIRouter(tags=["Tarjetas"])

ERRORES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


# ==================== REGISTRO ====================

@router.post(
    "/register",
    response_model=CardRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORES,
    summary="Registrar tarjeta NFC",
    description="Asocia una tarjeta NFC nueva a un usuario existente de WordPress."
)
def register(
    payload: CardRegisterRequest,
    registry: CardRegistry = Depends(get_card_registry),
):
    try:
        return registry.register(payload.wp_user_login, payload.card_uid, payload.label)
    except NotFoundError as e:
        # Usuario inexistente: la operación compuesta responde 400
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


# ==================== CONSULTAS ====================
# Las rutas literales van antes de /{wp_user_id}

@router.get(
    "/search",
    response_model=CardListResponse,
    responses=ERRORES,
    summary="Buscar tarjetas por propietario",
    description="Coincidencia parcial por login, nombre visible o email (mínimo 2 caracteres)."
)
def search_cards(
    search: Optional[str] = Query(None, description="Término de búsqueda"),
    registry: CardRegistry = Depends(get_card_registry),
):
    return registry.search_by_owner(search)


@router.get(
    "/owner/{card_uid}",
    response_model=CardOwnerResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Propietario de una tarjeta activa"
)
def get_owner(card_uid: str, registry: CardRegistry = Depends(get_card_registry)):
    return registry.get_owner_by_uid(card_uid)


# ==================== DESACTIVACIÓN ====================

@router.put(
    "/deactivate/{card_uid}",
    response_model=ResponseBase,
    response_model_exclude_none=True,
    responses=ERRORES,
    summary="Desactivar tarjeta",
    description="Desactivación permanente: el UID no se puede volver a registrar."
)
def deactivate(card_uid: str, registry: CardRegistry = Depends(get_card_registry)):
    try:
        return registry.deactivate(card_uid)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get(
    "/{wp_user_id}",
    response_model=CardListResponse,
    responses=ERRORES,
    summary="Tarjetas activas de un usuario"
)
def list_by_user(wp_user_id: int, registry: CardRegistry = Depends(get_card_registry)):
    return registry.get_by_user_id(wp_user_id)
