"""
Utilidades para fechas de calendario recibidas como filtros.
"""

from datetime import date, datetime
from typing import Union


def parse_fecha(valor: Union[str, date]) -> date:
    """
    Convierte 'YYYY-MM-DD' en date.

    Raises:
        ValueError: si el texto no es una fecha válida
    """
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    return datetime.strptime(valor.strip(), "%Y-%m-%d").date()
