"""
Script para verificar y poblar la base de datos con datos de prueba.

1. Verifica que existan condo360_nfc_cards y condo360_access_logs
2. Busca los usuarios de WordPress indicados
3. Crea una tarjeta TEST######## por usuario si aún no hay tarjetas
4. Crea tres accesos de prueba para el primer usuario si no tiene registros

Uso:
    python scripts/seed_test_data.py --logins jmelendez apartamento1134
    python scripts/seed_test_data.py --check
"""
import argparse
import sys
from datetime import timedelta

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.crud import access_log as crud_access
from app.crud import card as crud_card
from app.db.session import Database
from app.models import NfcCard, WpUser
from app.services.time_service import TimeService

TABLAS_NFC = ("condo360_nfc_cards", "condo360_access_logs")

# (tipo, horas atrás)
ACCESOS_PRUEBA = (
    ("ingreso", 2),
    ("salida", 1),
    ("ingreso", 0.5),
)


def verificar_tablas(database: Database) -> bool:
    existentes = set(inspect(database.engine).get_table_names())
    faltantes = [t for t in TABLAS_NFC if t not in existentes]
    if faltantes:
        print(f" Faltan tablas: {', '.join(faltantes)} (ejecutar: alembic upgrade head)")
        return False
    print(" Ambas tablas existen")
    return True


def crear_tarjetas_prueba(db, usuarios, time_service: TimeService) -> None:
    if db.query(NfcCard).count() > 0:
        print(" Ya hay tarjetas registradas, no se crean tarjetas de prueba")
        return

    for usuario in usuarios:
        card_uid = f"TEST{usuario.id:08d}"
        crud_card.create_card(
            db,
            wp_user_id=usuario.id,
            card_uid=card_uid,
            label=f"Tarjeta de prueba - {usuario.display_name}",
            created_at=time_service.now_datetime(),
        )
        print(f"   Tarjeta creada: {card_uid} para {usuario.user_login}")


def crear_accesos_prueba(db, usuario: WpUser, time_service: TimeService) -> None:
    total = crud_access.count_logs_by_user(db, usuario.id)
    print(f"   Logs existentes para {usuario.user_login}: {total}")
    if total > 0:
        return

    tarjeta = db.query(NfcCard).filter(NfcCard.wp_user_id == usuario.id).first()
    if tarjeta is None:
        print(f"   {usuario.user_login} no tiene tarjetas; no se crean logs")
        return

    ahora = time_service.now_datetime()
    for tipo, horas in ACCESOS_PRUEBA:
        crud_access.create_access_log(
            db,
            card_id=tarjeta.id,
            access_type=tipo,
            timestamp=ahora - timedelta(hours=horas),
            guard_user=None,
        )
        print(f"   Log creado: {tipo} hace {horas}h")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Verifica y puebla las tablas NFC con datos de prueba"
    )
    parser.add_argument(
        "--logins",
        nargs="+",
        default=["jmelendez", "apartamento1134"],
        help="Logins de WordPress a usar (por defecto: jmelendez apartamento1134)"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Solo verificar tablas y usuarios, sin insertar datos"
    )
    args = parser.parse_args()

    database = Database()
    time_service = TimeService()
    db = database.session()

    try:
        print("\n1. Verificando estructura de tablas...")
        if not verificar_tablas(database):
            return 1

        print("\n2. Verificando usuarios de WordPress...")
        usuarios = (
            db.query(WpUser)
            .filter(WpUser.user_login.in_(args.logins))
            .order_by(WpUser.id)
            .all()
        )
        if not usuarios:
            print(" No se encontraron usuarios de prueba")
            return 1
        for usuario in usuarios:
            print(f"   ID: {usuario.id}, Login: {usuario.user_login}, Nombre: {usuario.display_name}")

        if args.check:
            return 0

        print("\n3. Verificando tarjetas...")
        crear_tarjetas_prueba(db, usuarios, time_service)

        print("\n4. Verificando logs de acceso...")
        crear_accesos_prueba(db, usuarios[0], time_service)

        print("\n5. Probando consulta de historial...")
        filas = crud_access.list_logs_by_user(db, usuarios[0].id, limit=50, offset=0)
        print(f"   Consulta exitosa: {len(filas)} registros encontrados")
        if filas:
            primero = filas[0]
            print(f"      Tarjeta: {primero.card_uid}")
            print(f"      Acceso: {primero.access_type}")
            print(f"      Fecha: {time_service.format_display(primero.timestamp)}")

        print("\n BASE DE DATOS VERIFICADA Y POBLADA")
        return 0

    except SQLAlchemyError as e:
        print(f" Error: {e}")
        db.rollback()
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
