"""
Servicio de tiempo en la zona horaria civil del condominio.

Única fuente de verdad para "ahora" y para el formato de fechas:
- Escritura: ``now()`` / ``now_datetime()`` en 'YYYY-MM-DD HH:mm:ss' (GMT-4)
- Presentación: ``format_display()`` en 'DD/MM/YYYY hh:mm AM/PM'

La zona se resuelve siempre con zoneinfo, nunca con la zona del servidor.
America/Caracas no tiene horario de verano, así que el desfase es fijo.
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError

FORMATO_ALMACEN = "%Y-%m-%d %H:%M:%S"
FORMATO_FECHA = "%Y-%m-%d"

DIAS_SEMANA = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

PERIODOS = ("today", "week", "month", "year")
PERIODO_POR_DEFECTO = "month"

FechaEntrada = Union[datetime, date, str]


def _reloj_utc() -> datetime:
    return datetime.now(tz=dt_timezone.utc)


class TimeService:
    """
    Reloj y formateador en la zona civil configurada.

    Args:
        timezone: nombre IANA (por defecto settings.timezone)
        clock: callable que devuelve el instante actual; los tests lo
            reemplazan para congelar el tiempo. Un datetime naive se
            interpreta como UTC.
    """

    def __init__(self, timezone: Optional[str] = None, clock: Optional[Callable[[], datetime]] = None):
        self.timezone = timezone or settings.timezone
        self.zona = ZoneInfo(self.timezone)
        self._clock = clock or _reloj_utc

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    def now_datetime(self) -> datetime:
        """Instante actual como datetime naive en hora civil, sin microsegundos."""
        actual = self._clock()
        if actual.tzinfo is None:
            actual = actual.replace(tzinfo=dt_timezone.utc)
        return actual.astimezone(self.zona).replace(tzinfo=None, microsecond=0)

    def now(self) -> str:
        """Fecha y hora actual en formato 'YYYY-MM-DD HH:mm:ss'."""
        return self.now_datetime().strftime(FORMATO_ALMACEN)

    def today(self) -> str:
        """Fecha civil de hoy 'YYYY-MM-DD' (frontera del resumen diario)."""
        return self.now_datetime().strftime(FORMATO_FECHA)

    # ------------------------------------------------------------------
    # Conversión y formato
    # ------------------------------------------------------------------

    def to_civil(self, valor: FechaEntrada) -> datetime:
        """
        Normaliza cualquier fecha de entrada a datetime naive en hora civil.

        - datetime naive: ya está en hora civil (así se almacena)
        - datetime con zona: se convierte a la zona configurada
        - date: medianoche de ese día
        - str: 'YYYY-MM-DD HH:mm:ss' o ISO 8601

        Raises:
            InvalidArgumentError: si el valor no se puede interpretar
        """
        if isinstance(valor, datetime):
            if valor.tzinfo is not None:
                return valor.astimezone(self.zona).replace(tzinfo=None)
            return valor
        if isinstance(valor, date):
            return datetime(valor.year, valor.month, valor.day)
        if isinstance(valor, str):
            texto = valor.strip()
            try:
                return datetime.strptime(texto, FORMATO_ALMACEN)
            except ValueError:
                pass
            try:
                return self.to_civil(datetime.fromisoformat(texto))
            except ValueError:
                raise InvalidArgumentError(f"Fecha inválida: '{valor}'")
        raise InvalidArgumentError(f"Fecha inválida: {valor!r}")

    def to_storage(self, valor: FechaEntrada) -> str:
        """Texto 'YYYY-MM-DD HH:mm:ss' de un valor almacenado."""
        return self.to_civil(valor).strftime(FORMATO_ALMACEN)

    def convert_to_zone(self, valor: datetime) -> str:
        """Convierte un instante con zona (ej. UTC) a la hora civil configurada."""
        if valor.tzinfo is None:
            valor = valor.replace(tzinfo=dt_timezone.utc)
        return valor.astimezone(self.zona).strftime(FORMATO_ALMACEN)

    def format_display(self, valor: FechaEntrada) -> str:
        """
        Formato de presentación 'DD/MM/YYYY hh:mm AM/PM'.

        Ejemplo:
            >>> TimeService().format_display("2025-10-20 14:05:09")
            '20/10/2025 02:05 PM'
        """
        civil = self.to_civil(valor)
        meridiano = "AM" if civil.hour < 12 else "PM"
        hora_12 = civil.hour % 12 or 12
        return f"{civil:%d/%m/%Y} {hora_12:02d}:{civil:%M} {meridiano}"

    def format_display_with_day(self, valor: FechaEntrada) -> str:
        """Igual que format_display con el día de la semana: 'Monday, 20/10/2025 02:05 PM'."""
        civil = self.to_civil(valor)
        return f"{DIAS_SEMANA[civil.weekday()]}, {self.format_display(civil)}"

    @staticmethod
    def is_valid_datetime(texto: str) -> bool:
        """Valida estrictamente el formato 'YYYY-MM-DD HH:mm:ss'."""
        try:
            datetime.strptime(texto, FORMATO_ALMACEN)
            return True
        except (TypeError, ValueError):
            return False

    # ------------------------------------------------------------------
    # Ventanas de estadísticas
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_period(period: Optional[str]) -> str:
        """Períodos desconocidos caen en 'month'."""
        return period if period in PERIODOS else PERIODO_POR_DEFECTO

    def period_start(self, period: Optional[str]) -> datetime:
        """
        Límite inferior de la ventana de un período.

        - today: medianoche civil de hoy
        - week/month/year: ventana móvil de una unidad hacia atrás desde ahora
          (no alineada al calendario)
        """
        ahora = self.now_datetime()
        period = self.normalize_period(period)
        if period == "today":
            return ahora.replace(hour=0, minute=0, second=0)
        if period == "week":
            return ahora - timedelta(weeks=1)
        if period == "year":
            return ahora - relativedelta(years=1)
        return ahora - relativedelta(months=1)
