"""Seed data script for the research budget database.

Populates the database with demo data for development: faculties, groups,
seedbeds, researchers, rubros, projects, budget entries, initial project
allocations and one user per role.  The script is idempotent: each step is
skipped when its table already has data.

Usage (from the project root):
    python seed_data.py
"""

from __future__ import annotations

import os
import sys
from datetime import date
from decimal import Decimal

# Ensure the app package is importable when running from the project root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models import (  # noqa: E402
    Facultad,
    Grupo,
    Investigador,
    Presupuesto,
    PresupuestoInicialProyecto,
    Proyecto,
    Rubro,
    Semillero,
    Usuario,
)
from app.utils.security import hash_password  # noqa: E402

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _dec(value: float) -> Decimal:
    """Convert float to Decimal for Numeric columns."""
    return Decimal(str(round(value, 2)))


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_facultades(session) -> dict[str, Facultad]:
    if session.query(Facultad).count() > 0:
        print("  [SKIP] Facultad: table already has data.")
        return {f.nombre: f for f in session.query(Facultad).all()}

    registros = [
        Facultad(nombre="Ingeniería"),
        Facultad(nombre="Ciencias de la Salud"),
        Facultad(nombre="Ciencias Agrarias"),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  [OK] Facultad: {len(registros)} registros insertados.")
    return {f.nombre: f for f in registros}


def seed_grupos(session, facultades: dict[str, Facultad]) -> dict[str, Grupo]:
    if session.query(Grupo).count() > 0:
        print("  [SKIP] Grupo: table already has data.")
        return {g.nombre: g for g in session.query(Grupo).all()}

    registros = [
        Grupo(nombre="Automatización y Robótica", facultad_id=facultades["Ingeniería"].id),
        Grupo(nombre="Materiales Avanzados", facultad_id=facultades["Ingeniería"].id),
        Grupo(nombre="Epidemiología Clínica", facultad_id=facultades["Ciencias de la Salud"].id),
        Grupo(nombre="Suelos y Cultivos", facultad_id=facultades["Ciencias Agrarias"].id),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  [OK] Grupo: {len(registros)} registros insertados.")
    return {g.nombre: g for g in registros}


def seed_semilleros(session, grupos: dict[str, Grupo]) -> dict[str, Semillero]:
    if session.query(Semillero).count() > 0:
        print("  [SKIP] Semillero: table already has data.")
        return {s.nombre: s for s in session.query(Semillero).all()}

    registros = [
        Semillero(nombre="Drones", grupo_id=grupos["Automatización y Robótica"].id),
        Semillero(nombre="Biopolímeros", grupo_id=grupos["Materiales Avanzados"].id),
        Semillero(nombre="Salud Pública", grupo_id=grupos["Epidemiología Clínica"].id),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  [OK] Semillero: {len(registros)} registros insertados.")
    return {s.nombre: s for s in registros}


def seed_investigadores(session, grupos: dict[str, Grupo]) -> None:
    if session.query(Investigador).count() > 0:
        print("  [SKIP] Investigador: table already has data.")
        return

    datos = [
        ("Ana María Restrepo", "1020304050", "Automatización y Robótica"),
        ("Carlos Pérez Gómez", "79845123", "Materiales Avanzados"),
        ("Luisa Fernanda Ortiz", "52369874", "Epidemiología Clínica"),
        ("Jorge Iván Cárdenas", "1098765432", "Suelos y Cultivos"),
    ]
    registros = [
        Investigador(
            nombre=nombre,
            documento=documento,
            email=f"{documento}@investigacion.edu.co",
            grupo_id=grupos[grupo].id,
        )
        for nombre, documento, grupo in datos
    ]
    session.add_all(registros)
    print(f"  [OK] Investigador: {len(registros)} registros insertados.")


def seed_rubros(session) -> dict[str, Rubro]:
    if session.query(Rubro).count() > 0:
        print("  [SKIP] Rubro: table already has data.")
        return {r.nombre: r for r in session.query(Rubro).all()}

    registros = [
        Rubro(nombre=nombre)
        for nombre in (
            "Equipos",
            "Materiales e insumos",
            "Viáticos",
            "Servicios técnicos",
            "Publicaciones",
            "Personal",
        )
    ]
    session.add_all(registros)
    session.flush()
    print(f"  [OK] Rubro: {len(registros)} registros insertados.")
    return {r.nombre: r for r in registros}


def seed_proyectos(
    session,
    facultades: dict[str, Facultad],
    grupos: dict[str, Grupo],
    semilleros: dict[str, Semillero],
) -> list[Proyecto]:
    if session.query(Proyecto).count() > 0:
        print("  [SKIP] Proyecto: table already has data.")
        return session.query(Proyecto).order_by(Proyecto.id).all()

    registros = [
        Proyecto(
            numero_proyecto="INV-2023-001",
            nombre="Dron de monitoreo para cultivos de café",
            fecha_inicio=date(2023, 2, 1),
            fecha_fin=date(2024, 12, 31),
            facultad_id=facultades["Ingeniería"].id,
            grupo_id=grupos["Automatización y Robótica"].id,
            semillero_id=semilleros["Drones"].id,
        ),
        Proyecto(
            numero_proyecto="INV-2023-014",
            nombre="Empaques biodegradables a partir de almidón de yuca",
            fecha_inicio=date(2023, 7, 15),
            fecha_fin=date(2025, 7, 14),
            facultad_id=facultades["Ingeniería"].id,
            grupo_id=grupos["Materiales Avanzados"].id,
            semillero_id=semilleros["Biopolímeros"].id,
        ),
        Proyecto(
            numero_proyecto="INV-2024-003",
            nombre="Prevalencia de hipertensión en zonas rurales",
            fecha_inicio=date(2024, 3, 1),
            fecha_fin=date(2025, 12, 31),
            facultad_id=facultades["Ciencias de la Salud"].id,
            grupo_id=grupos["Epidemiología Clínica"].id,
            semillero_id=semilleros["Salud Pública"].id,
        ),
        Proyecto(
            numero_proyecto="INV-2024-021",
            nombre="Fertilización orgánica en suelos ácidos",
            fecha_inicio=date(2024, 9, 1),
            fecha_fin=date(2026, 8, 31),
            facultad_id=facultades["Ciencias Agrarias"].id,
            grupo_id=grupos["Suelos y Cultivos"].id,
        ),
    ]
    session.add_all(registros)
    session.flush()
    print(f"  [OK] Proyecto: {len(registros)} registros insertados.")
    return registros


def seed_presupuestos(
    session, proyectos: list[Proyecto], rubros: dict[str, Rubro]
) -> None:
    if session.query(Presupuesto).count() > 0:
        print("  [SKIP] Presupuesto: table already has data.")
        return

    # (proyecto index, rubro, descripcion, valor_inicial, egreso, reserva)
    datos = [
        (0, "Equipos", "Dron cuadricóptero con cámara multiespectral", 18_500_000, 16_900_000, 0),
        (0, "Viáticos", "Salidas de campo a fincas piloto", 4_200_000, 2_750_000, 600_000),
        (0, "Personal", "Auxiliar de investigación", 12_000_000, 6_000_000, 6_000_000),
        (1, "Materiales e insumos", "Reactivos y almidón", 7_800_000, 3_120_500.5, 1_000_000),
        (1, "Servicios técnicos", "Ensayos de tracción", 3_500_000, 0, 3_500_000),
        (2, "Viáticos", "Brigadas de tamizaje", 9_600_000, 4_800_000, 1_200_000),
        (2, "Publicaciones", "Artículo de acceso abierto", 5_000_000, 0, 0),
        (3, "Materiales e insumos", "Compost y enmiendas", 6_300_000, 1_450_000, 800_000),
        (3, "Equipos", "Medidor de pH de campo", 2_900_000, 2_900_000, 0),
    ]
    registros = []
    for idx, rubro, descripcion, inicial, egreso, reserva in datos:
        registros.append(
            Presupuesto(
                descripcion=descripcion,
                valor_inicial=_dec(inicial),
                egreso=_dec(egreso),
                reserva=_dec(reserva),
                disponibilidad=_dec(inicial - egreso - reserva),
                proyecto_id=proyectos[idx].id,
                rubro_id=rubros[rubro].id,
            )
        )
    session.add_all(registros)
    print(f"  [OK] Presupuesto: {len(registros)} registros insertados.")


def seed_presupuestos_iniciales(
    session, proyectos: list[Proyecto], rubros: dict[str, Rubro]
) -> None:
    if session.query(PresupuestoInicialProyecto).count() > 0:
        print("  [SKIP] PresupuestoInicialProyecto: table already has data.")
        return

    registros = [
        PresupuestoInicialProyecto(
            proyecto_id=proyectos[0].id, rubro_id=rubros["Equipos"].id, valor_inicial=_dec(20_000_000)
        ),
        PresupuestoInicialProyecto(proyecto_id=proyectos[0].id, valor_inicial=_dec(15_000_000)),
        PresupuestoInicialProyecto(proyecto_id=proyectos[1].id, valor_inicial=_dec(11_300_000)),
        PresupuestoInicialProyecto(proyecto_id=proyectos[2].id, valor_inicial=_dec(14_600_000)),
        PresupuestoInicialProyecto(
            proyecto_id=proyectos[3].id,
            rubro_id=rubros["Materiales e insumos"].id,
            valor_inicial=_dec(6_300_000),
        ),
    ]
    session.add_all(registros)
    print(f"  [OK] PresupuestoInicialProyecto: {len(registros)} registros insertados.")


def seed_usuarios(session) -> None:
    if session.query(Usuario).count() > 0:
        print("  [SKIP] Usuario: table already has data.")
        return

    registros = [
        Usuario(
            username="admin",
            email="admin@investigacion.edu.co",
            password_hash=hash_password("Admin123!"),
            nombre_completo="Administrador",
            rol="ADMIN",
        ),
        Usuario(
            username="presupuesto",
            email="presupuesto@investigacion.edu.co",
            password_hash=hash_password("Presupuesto123!"),
            nombre_completo="Oficina de Presupuesto",
            rol="PRESUPUESTO",
        ),
        Usuario(
            username="consulta",
            email="consulta@investigacion.edu.co",
            password_hash=hash_password("Consulta123!"),
            nombre_completo="Usuario de Consulta",
            rol="CONSULTA",
        ),
    ]
    session.add_all(registros)
    print(f"  [OK] Usuario: {len(registros)} registros insertados.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    print("=" * 60)
    print("  Presupuestos de Investigación: Seed Data Script")
    print("=" * 60)

    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        print("\n[1/6] Facultades, grupos y semilleros...")
        facultades = seed_facultades(session)
        grupos = seed_grupos(session, facultades)
        semilleros = seed_semilleros(session, grupos)

        print("\n[2/6] Investigadores...")
        seed_investigadores(session, grupos)

        print("\n[3/6] Rubros...")
        rubros = seed_rubros(session)

        print("\n[4/6] Proyectos...")
        proyectos = seed_proyectos(session, facultades, grupos, semilleros)

        print("\n[5/6] Presupuestos y presupuesto inicial por proyecto...")
        seed_presupuestos(session, proyectos, rubros)
        seed_presupuestos_iniciales(session, proyectos, rubros)

        print("\n[6/6] Usuarios...")
        seed_usuarios(session)

        session.commit()
        print("\n" + "=" * 60)
        print("  Seed completado exitosamente.")
        print("=" * 60)

    except Exception as exc:
        session.rollback()
        print("\n[ERROR] Seed fallido: se hizo rollback.")
        print(f"  Detalle: {exc}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
