"""
Tests de la bitácora de accesos (AccessLedger).

Cubre:
- Registro de ingresos/salidas con UID en minúsculas
- Rechazo de tarjetas desactivadas
- Historial con respuestas vacías sin error y paginación estable
- Estadísticas por período y consistencia de totales
- Último acceso y resumen del día
"""
from datetime import datetime, timedelta

import pytest

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.crud import access_log as crud_access
from app.models import AccessLog, NfcCard
from app.services.access_ledger import AccessLedger, MotivoHistorialVacio
from app.services.card_registry import CardRegistry

pytestmark = pytest.mark.unit


@pytest.fixture
def registry(db, time_service, usuarios):
    return CardRegistry(db, time_service)


@pytest.fixture
def ledger(db, time_service, usuarios):
    return AccessLedger(db, time_service)


@pytest.fixture
def tarjeta_jdoe(registry, db):
    registry.register("jdoe", "AABBCC1122", "Auto principal")
    return db.query(NfcCard).filter(NfcCard.card_uid == "AABBCC1122").one()


def _insertar_acceso(db, tarjeta, tipo, momento):
    return crud_access.create_access_log(db, card_id=tarjeta.id, access_type=tipo, timestamp=momento)


# ==================== TEST SUITE: REGISTRO DE ACCESOS ====================

class TestRegistroAcceso:

    def test_ingreso_con_uid_en_minusculas(self, ledger, tarjeta_jdoe, db):
        """Escenario: el UID se normaliza y el evento queda asociado a la tarjeta."""
        resultado = ledger.log_access("aabbcc1122", "ingreso", "vigilante1")

        assert resultado["success"] is True
        assert resultado["message"] == "Ingreso registrado exitosamente"
        assert resultado["data"]["card_uid"] == "AABBCC1122"
        assert resultado["data"]["access_type"] == "ingreso"
        assert resultado["data"]["guard_user"] == "vigilante1"
        assert resultado["data"]["timestamp"] == "20/10/2025 02:05 PM"

        log = db.query(AccessLog).one()
        assert log.card_id == tarjeta_jdoe.id
        assert log.timestamp == datetime(2025, 10, 20, 14, 5, 9)
        assert log.created_at == log.timestamp

    def test_salida(self, ledger, tarjeta_jdoe):
        resultado = ledger.log_access("AABBCC1122", "salida")

        assert resultado["message"] == "Salida registrado exitosamente"
        assert resultado["data"]["guard_user"] is None

    @pytest.mark.parametrize("tipo", ["INGRESO", "entrada", ""])
    def test_tipo_invalido(self, ledger, tarjeta_jdoe, tipo):
        with pytest.raises(InvalidArgumentError):
            ledger.log_access("AABBCC1122", tipo)

    def test_mensaje_tipo_invalido(self, ledger, tarjeta_jdoe):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ledger.log_access("AABBCC1122", "Salida")

        assert exc_info.value.message == (
            'Error al registrar acceso: Tipo de acceso debe ser "ingreso" o "salida"'
        )

    def test_tarjeta_inexistente(self, ledger):
        with pytest.raises(NotFoundError) as exc_info:
            ledger.log_access("FFFFFFFF", "ingreso")

        assert exc_info.value.message == (
            "Error al registrar acceso: Tarjeta con UID 'FFFFFFFF' no encontrada o inactiva"
        )

    def test_tarjeta_desactivada_no_registra(self, ledger, registry, tarjeta_jdoe, db):
        """Escenario: después de desactivar, registrar una salida falla con NotFound."""
        registry.deactivate("AABBCC1122")

        with pytest.raises(NotFoundError):
            ledger.log_access("AABBCC1122", "salida")

        assert db.query(AccessLog).count() == 0

    def test_lecturas_repetidas_no_se_deduplican(self, ledger, tarjeta_jdoe, db):
        ledger.log_access("AABBCC1122", "ingreso")
        ledger.log_access("AABBCC1122", "ingreso")

        assert db.query(AccessLog).count() == 2


# ==================== TEST SUITE: HISTORIAL ====================

class TestHistorial:

    def test_usuario_inexistente_es_respuesta_vacia(self, ledger):
        """Escenario: historial de un usuario que no existe no es un error."""
        resultado = ledger.get_history(999999)

        assert resultado["success"] is True
        assert resultado["message"] == MotivoHistorialVacio.USUARIO_NO_ENCONTRADO.value
        assert resultado["data"]["logs"] == []
        assert resultado["data"]["pagination"]["total"] == 0
        assert resultado["data"]["pagination"]["has_more"] is False

    def test_usuario_sin_tarjetas(self, ledger, usuarios):
        resultado = ledger.get_history(usuarios["mperez"].id)
        assert resultado["message"] == "Usuario no tiene tarjetas registradas"
        assert resultado["data"]["logs"] == []

    def test_usuario_con_tarjeta_sin_registros(self, ledger, tarjeta_jdoe, usuarios):
        resultado = ledger.get_history(usuarios["jdoe"].id)
        assert resultado["message"] == "No se encontraron registros de acceso"

    def test_tarjetas_inactivas_cuentan_para_el_historial(self, ledger, registry, tarjeta_jdoe, usuarios):
        ledger.log_access("AABBCC1122", "ingreso")
        registry.deactivate("AABBCC1122")

        resultado = ledger.get_history(usuarios["jdoe"].id)

        assert resultado["message"] == "Historial obtenido exitosamente"
        assert len(resultado["data"]["logs"]) == 1

    def test_campos_del_registro(self, ledger, tarjeta_jdoe, usuarios):
        creado = ledger.log_access("AABBCC1122", "salida", "vigilante2")

        log = ledger.get_history(usuarios["jdoe"].id)["data"]["logs"][0]

        assert log["access_type"] == "salida"
        assert log["access_type_spanish"] == "Salida"
        assert log["timestamp"] == "2025-10-20 14:05:09"
        assert log["created_at"] == "2025-10-20 14:05:09"
        assert log["timestamp_formatted"] == creado["data"]["timestamp"]
        assert log["guard_user"] == "vigilante2"
        assert log["card_uid"] == "AABBCC1122"
        assert log["card_label"] == "Auto principal"
        assert log["user_login"] == "jdoe"
        assert log["display_name"] == "John Doe"

    def test_mas_recientes_primero(self, ledger, reloj, tarjeta_jdoe, usuarios):
        ledger.log_access("AABBCC1122", "ingreso")
        reloj.avanzar(hours=1)
        ledger.log_access("AABBCC1122", "salida")

        logs = ledger.get_history(usuarios["jdoe"].id)["data"]["logs"]

        assert [l["access_type"] for l in logs] == ["salida", "ingreso"]

    def test_paginacion_sin_huecos_ni_duplicados(self, ledger, tarjeta_jdoe, usuarios):
        """Con timestamps iguales el desempate por id mantiene las páginas estables."""
        ids = [ledger.log_access("AABBCC1122", "ingreso")["data"]["id"] for _ in range(7)]

        vistos = []
        has_more = []
        for offset in (0, 3, 6):
            pagina = ledger.get_history(usuarios["jdoe"].id, limit=3, offset=offset)["data"]
            assert pagina["pagination"]["total"] == 7
            vistos.extend(l["id"] for l in pagina["logs"])
            has_more.append(pagina["pagination"]["has_more"])

        assert vistos == sorted(ids, reverse=True)
        assert has_more == [True, True, False]

    def test_filtro_de_fechas_inclusivo(self, ledger, db, tarjeta_jdoe, usuarios):
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", datetime(2025, 10, 1, 8, 0, 0))
        _insertar_acceso(db, tarjeta_jdoe, "salida", datetime(2025, 10, 5, 23, 59, 59))
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", datetime(2025, 10, 6, 0, 0, 0))

        resultado = ledger.get_history(
            usuarios["jdoe"].id, start_date="2025-10-01", end_date="2025-10-05"
        )

        assert resultado["data"]["pagination"]["total"] == 2
        assert [l["timestamp"] for l in resultado["data"]["logs"]] == [
            "2025-10-05 23:59:59",
            "2025-10-01 08:00:00",
        ]

    @pytest.mark.parametrize(
        "kwargs, mensaje",
        [
            ({"limit": 0}, "Límite debe estar entre 1 y 200"),
            ({"limit": 201}, "Límite debe estar entre 1 y 200"),
            ({"offset": -1}, "Offset debe ser mayor o igual a 0"),
            ({"start_date": "01/10/2025"}, "start_date debe tener formato YYYY-MM-DD"),
            ({"end_date": "2025-13-01"}, "end_date debe tener formato YYYY-MM-DD"),
        ],
    )
    def test_parametros_invalidos(self, ledger, usuarios, kwargs, mensaje):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ledger.get_history(usuarios["jdoe"].id, **kwargs)

        assert exc_info.value.message == f"Error al obtener historial: {mensaje}"

    def test_id_de_usuario_invalido(self, ledger):
        with pytest.raises(InvalidArgumentError):
            ledger.get_history(0)


# ==================== TEST SUITE: ESTADÍSTICAS ====================

class TestEstadisticas:

    @pytest.fixture
    def accesos_distribuidos(self, db, tarjeta_jdoe):
        """Un acceso hoy y otros a 3, 20, 100 y 400 días del 20/10/2025 14:05:09."""
        ahora = datetime(2025, 10, 20, 14, 5, 9)
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", ahora - timedelta(hours=1))
        _insertar_acceso(db, tarjeta_jdoe, "salida", ahora - timedelta(days=3))
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", ahora - timedelta(days=20))
        _insertar_acceso(db, tarjeta_jdoe, "salida", ahora - timedelta(days=100))
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", ahora - timedelta(days=400))

    @pytest.mark.parametrize(
        "period, total",
        [("today", 1), ("week", 2), ("month", 3), ("year", 4)],
    )
    def test_totales_por_periodo(self, ledger, usuarios, accesos_distribuidos, period, total):
        resultado = ledger.get_stats(usuarios["jdoe"].id, period)

        assert resultado["data"]["period"] == period
        assert resultado["data"]["totals"]["total"] == total

    def test_today_empieza_a_medianoche_civil(self, ledger, db, tarjeta_jdoe, usuarios):
        _insertar_acceso(db, tarjeta_jdoe, "salida", datetime(2025, 10, 19, 23, 59, 59))
        _insertar_acceso(db, tarjeta_jdoe, "ingreso", datetime(2025, 10, 20, 0, 0, 0))

        data = ledger.get_stats(usuarios["jdoe"].id, "today")["data"]

        assert data["totals"] == {"ingresos": 1, "salidas": 0, "total": 1}
        assert data["daily_stats"] == [{"access_type": "ingreso", "count": 1, "date": "2025-10-20"}]

    def test_periodo_desconocido_equivale_a_month(self, ledger, usuarios, accesos_distribuidos):
        """Escenario: un período inválido se comporta igual que 'month'."""
        bogus = ledger.get_stats(usuarios["jdoe"].id, "bogus-period")
        month = ledger.get_stats(usuarios["jdoe"].id, "month")

        assert bogus == month
        assert bogus["data"]["period"] == "month"

    def test_totales_consistentes_con_daily_stats(self, ledger, usuarios, accesos_distribuidos):
        data = ledger.get_stats(usuarios["jdoe"].id, "year")["data"]
        totals = data["totals"]

        assert totals["ingresos"] + totals["salidas"] == totals["total"]
        assert sum(s["count"] for s in data["daily_stats"]) == totals["total"]
        assert totals == {"ingresos": 2, "salidas": 2, "total": 4}

    def test_daily_stats_por_fecha_descendente(self, ledger, usuarios, accesos_distribuidos):
        daily = ledger.get_stats(usuarios["jdoe"].id, "month")["data"]["daily_stats"]

        assert daily == [
            {"access_type": "ingreso", "count": 1, "date": "2025-10-20"},
            {"access_type": "salida", "count": 1, "date": "2025-10-17"},
            {"access_type": "ingreso", "count": 1, "date": "2025-09-30"},
        ]

    def test_usuario_sin_accesos(self, ledger, usuarios):
        data = ledger.get_stats(usuarios["mperez"].id)["data"]

        assert data["totals"] == {"ingresos": 0, "salidas": 0, "total": 0}
        assert data["daily_stats"] == []


# ==================== TEST SUITE: ÚLTIMO ACCESO Y RESUMEN ====================

class TestUltimoAccesoYResumen:

    def test_sin_accesos_previos(self, ledger, tarjeta_jdoe):
        resultado = ledger.get_last_access("AABBCC1122")

        assert resultado["success"] is True
        assert resultado["message"] == "No se encontraron accesos previos"
        assert resultado["data"] is None

    def test_ultimo_acceso_incluye_tarjetas_inactivas(self, ledger, registry, reloj, tarjeta_jdoe):
        ledger.log_access("AABBCC1122", "ingreso")
        reloj.avanzar(minutes=30)
        ledger.log_access("AABBCC1122", "salida", "vigilante1")
        registry.deactivate("AABBCC1122")

        resultado = ledger.get_last_access("aabbcc1122")

        assert resultado["message"] == "Último acceso obtenido exitosamente"
        assert resultado["data"]["access_type"] == "salida"
        assert resultado["data"]["access_type_spanish"] == "Salida"
        assert resultado["data"]["timestamp"] == "2025-10-20 14:35:09"
        assert resultado["data"]["timestamp_formatted"] == "20/10/2025 02:35 PM"
        assert resultado["data"]["card_label"] == "Auto principal"

    def test_resumen_del_dia(self, ledger, registry, db, tarjeta_jdoe):
        registry.register("mperez", "DDEEFF3344")
        ledger.log_access("AABBCC1122", "ingreso")
        ledger.log_access("AABBCC1122", "ingreso")
        ledger.log_access("AABBCC1122", "salida")
        ledger.log_access("DDEEFF3344", "ingreso")
        # Ayer no cuenta
        _insertar_acceso(db, tarjeta_jdoe, "salida", datetime(2025, 10, 19, 23, 59, 59))

        resultado = ledger.get_today_summary()
        summary = resultado["data"]["summary"]

        assert resultado["message"] == "Resumen del día obtenido exitosamente"
        assert resultado["data"]["date"] == "2025-10-20"
        assert summary["ingresos"] == [
            {"card_uid": "AABBCC1122", "user_name": "John Doe", "user_login": "jdoe", "count": 2},
            {"card_uid": "DDEEFF3344", "user_name": "María Pérez", "user_login": "mperez", "count": 1},
        ]
        assert summary["salidas"] == [
            {"card_uid": "AABBCC1122", "user_name": "John Doe", "user_login": "jdoe", "count": 1},
        ]
        assert summary["total_ingresos"] == sum(a["count"] for a in summary["ingresos"]) == 3
        assert summary["total_salidas"] == sum(a["count"] for a in summary["salidas"]) == 1

    def test_resumen_sin_accesos(self, ledger):
        summary = ledger.get_today_summary()["data"]["summary"]

        assert summary == {"ingresos": [], "salidas": [], "total_ingresos": 0, "total_salidas": 0}
