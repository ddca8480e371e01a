"""
Esquemas Pydantic para la bitácora de accesos.

Las respuestas reflejan el contrato que consume el plugin de WordPress:
sobre {success, message, data} con fechas en texto.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from app.schemas.common import ResponseBase


# =====================================================
# REQUEST SCHEMAS
# =====================================================

class AccessLogRequest(BaseModel):
    """Schema para registrar un ingreso o una salida."""
    card_uid: Optional[str] = Field(None, description="UID de la tarjeta NFC")
    access_type: Optional[str] = Field(None, description="'ingreso' o 'salida' (minúsculas exactas)")
    guard_user: Optional[str] = Field(None, max_length=100, description="Vigilante que registra el evento")

    @field_validator("card_uid")
    @classmethod
    def normalizar_uid(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v

    model_config = {
        "json_schema_extra": {
            "example": {
                "card_uid": "12345678ABCD",
                "access_type": "ingreso",
                "guard_user": "vigilante1",
            }
        }
    }


# =====================================================
# RESPONSE SCHEMAS
# =====================================================

class AccessLogCreated(BaseModel):
    id: int
    card_uid: str
    access_type: str
    timestamp: str = Field(..., description="DD/MM/YYYY hh:mm AM/PM")
    guard_user: Optional[str] = None


class AccessLogEntry(BaseModel):
    id: int
    access_type: str
    access_type_spanish: str
    timestamp: str = Field(..., description="YYYY-MM-DD HH:mm:ss (GMT-4)")
    timestamp_formatted: str
    guard_user: Optional[str] = None
    created_at: str
    card_uid: str
    card_label: Optional[str] = None
    user_login: str
    display_name: str


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class AccessHistory(BaseModel):
    logs: List[AccessLogEntry]
    pagination: Pagination


class AccessTotals(BaseModel):
    ingresos: int
    salidas: int
    total: int


class DailyStat(BaseModel):
    access_type: str
    count: int
    date: str


class AccessStats(BaseModel):
    period: str
    totals: AccessTotals
    daily_stats: List[DailyStat]


class LastAccess(BaseModel):
    access_type: str
    access_type_spanish: str
    timestamp: str
    timestamp_formatted: str
    guard_user: Optional[str] = None
    card_uid: str
    card_label: Optional[str] = None


class SummaryEntry(BaseModel):
    card_uid: str
    user_name: str
    user_login: str
    count: int


class DaySummary(BaseModel):
    ingresos: List[SummaryEntry]
    salidas: List[SummaryEntry]
    total_ingresos: int
    total_salidas: int


class TodaySummary(BaseModel):
    date: str
    summary: DaySummary


class AccessLogCreatedResponse(ResponseBase):
    data: AccessLogCreated


class AccessHistoryResponse(ResponseBase):
    data: AccessHistory


class AccessStatsResponse(ResponseBase):
    data: AccessStats


class LastAccessResponse(ResponseBase):
    data: Optional[LastAccess] = None


class TodaySummaryResponse(ResponseBase):
    data: TodaySummary
