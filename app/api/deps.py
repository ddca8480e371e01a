"""
Dependencies compartidas por los routers.

Los servicios se construyen por request con la sesión de ``get_db`` y el
TimeService guardado en ``app.state`` durante el arranque.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.access_ledger import AccessLedger
from app.services.card_registry import CardRegistry
from app.services.time_service import TimeService


def get_time_service(request: Request) -> TimeService:
    return request.app.state.time_service


def get_card_registry(
    db: Session = Depends(get_db),
    time_service: TimeService = Depends(get_time_service),
) -> CardRegistry:
    return CardRegistry(db, time_service)


def get_access_ledger(
    db: Session = Depends(get_db),
    time_service: TimeService = Depends(get_time_service),
) -> AccessLedger:
    return AccessLedger(db, time_service)
