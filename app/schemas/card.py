"""
Esquemas Pydantic para Tarjetas NFC.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from app.schemas.common import ResponseBase


# =====================================================
# REQUEST SCHEMAS
# =====================================================

class CardRegisterRequest(BaseModel):
    """Schema para registrar una tarjeta."""
    wp_user_login: Optional[str] = Field(None, description="Login del usuario de WordPress")
    card_uid: Optional[str] = Field(None, description="UID único de la tarjeta NFC")
    label: Optional[str] = Field(None, max_length=255, description="Etiqueta opcional de la tarjeta")

    @field_validator("card_uid")
    @classmethod
    def normalizar_uid(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v

    model_config = {
        "json_schema_extra": {
            "example": {
                "wp_user_login": "propietario123",
                "card_uid": "12345678ABCD",
                "label": "Tarjeta vehículo principal",
            }
        }
    }


# =====================================================
# RESPONSE SCHEMAS
# =====================================================

class CardRegistered(BaseModel):
    id: int
    wp_user_id: int
    card_uid: str
    label: Optional[str] = None
    active: bool


class CardWithOwner(BaseModel):
    """Tarjeta con datos del propietario (listado y búsqueda)."""
    id: int
    card_uid: str
    label: Optional[str] = None
    active: bool
    created_at: str
    wp_user_id: int
    user_login: str
    display_name: str
    user_email: str


class CardOwner(BaseModel):
    """Propietario de una tarjeta activa."""
    card_id: int
    card_uid: str
    label: Optional[str] = None
    active: bool
    wp_user_id: int
    user_login: str
    display_name: str
    user_email: str


class CardRegisteredResponse(ResponseBase):
    data: CardRegistered


class CardListResponse(ResponseBase):
    data: List[CardWithOwner]


class CardOwnerResponse(ResponseBase):
    data: CardOwner
