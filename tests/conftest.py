"""
Pytest fixtures for testing.

The settings are pointed at an in-memory SQLite database before the
application is imported, so no PostgreSQL server is needed.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.facultad import Facultad
from app.models.grupo import Grupo
from app.models.investigador import Investigador
from app.models.presupuesto import Presupuesto
from app.models.presupuesto_inicial_proyecto import PresupuestoInicialProyecto
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.models.semillero import Semillero
from app.models.usuario import Usuario
from app.services.auth_service import get_current_user
from app.utils.security import hash_password


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    TestingSession = sessionmaker(bind=db_engine, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def datos(db_session):
    """Two faculties, two projects (2023 and 2024) and three budget entries.

    Expected aggregates:
        Ingeniería / P-001 / 2023: disponibilidad 100.50 + 49.50 = 150.0,
            valor_inicial 1000.75 + 500.50 = 1501.25,
            initial allocations 1200 (Equipos) + 300 (no rubro).
        Ciencias / P-002 / 2024: disponibilidad 300, valor_inicial 2000,
            no initial allocation.
    """
    ingenieria = Facultad(nombre="Ingeniería")
    ciencias = Facultad(nombre="Ciencias")
    db_session.add_all([ingenieria, ciencias])
    db_session.flush()

    grupo_ing = Grupo(nombre="Robótica", facultad_id=ingenieria.id)
    grupo_cie = Grupo(nombre="Biología Molecular", facultad_id=ciencias.id)
    db_session.add_all([grupo_ing, grupo_cie])
    db_session.flush()

    semillero = Semillero(nombre="Drones", grupo_id=grupo_ing.id)
    equipos = Rubro(nombre="Equipos")
    viaticos = Rubro(nombre="Viáticos")
    db_session.add_all([semillero, equipos, viaticos])
    db_session.flush()

    p1 = Proyecto(
        numero_proyecto="P-001",
        nombre="Dron de monitoreo agrícola",
        fecha_inicio=date(2023, 3, 1),
        facultad_id=ingenieria.id,
        grupo_id=grupo_ing.id,
        semillero_id=semillero.id,
    )
    p2 = Proyecto(
        numero_proyecto="P-002",
        nombre="Marcadores genéticos del cacao",
        fecha_inicio=date(2024, 1, 15),
        facultad_id=ciencias.id,
        grupo_id=grupo_cie.id,
    )
    db_session.add_all([p1, p2])
    db_session.flush()

    db_session.add_all(
        [
            Presupuesto(
                descripcion="Cámara multiespectral",
                disponibilidad=Decimal("100.50"),
                egreso=Decimal("10"),
                reserva=Decimal("5"),
                valor_inicial=Decimal("1000.75"),
                proyecto_id=p1.id,
                rubro_id=equipos.id,
            ),
            Presupuesto(
                descripcion="Salida de campo",
                disponibilidad=Decimal("49.50"),
                egreso=Decimal("20"),
                reserva=Decimal("0"),
                valor_inicial=Decimal("500.50"),
                proyecto_id=p1.id,
                rubro_id=viaticos.id,
            ),
            Presupuesto(
                descripcion="Secuenciador",
                disponibilidad=Decimal("300"),
                egreso=Decimal("0"),
                reserva=Decimal("0"),
                valor_inicial=Decimal("2000"),
                proyecto_id=p2.id,
                rubro_id=equipos.id,
            ),
            PresupuestoInicialProyecto(
                proyecto_id=p1.id, rubro_id=equipos.id, valor_inicial=Decimal("1200")
            ),
            PresupuestoInicialProyecto(
                proyecto_id=p1.id, rubro_id=None, valor_inicial=Decimal("300")
            ),
            Investigador(
                nombre="Ana Restrepo",
                documento="1020304050",
                email="ana@investigacion.edu.co",
                grupo_id=grupo_ing.id,
            ),
        ]
    )
    db_session.commit()

    return {
        "ingenieria": ingenieria,
        "ciencias": ciencias,
        "grupo_ing": grupo_ing,
        "grupo_cie": grupo_cie,
        "semillero": semillero,
        "equipos": equipos,
        "viaticos": viaticos,
        "p1": p1,
        "p2": p2,
    }


def _crear_usuario(db_session: Session, username: str, rol: str) -> Usuario:
    user = Usuario(
        username=username,
        email=f"{username}@investigacion.edu.co",
        password_hash=hash_password("Clave123!"),
        nombre_completo=username.title(),
        rol=rol,
        activo=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin(db_session) -> Usuario:
    return _crear_usuario(db_session, "admin", "ADMIN")


@pytest.fixture
def consulta(db_session) -> Usuario:
    return _crear_usuario(db_session, "lector", "CONSULTA")


@pytest.fixture
def make_client(db_session):
    """Build a ``TestClient`` bound to the test session.

    ``make_client(user)`` authenticates every request as *user*;
    ``make_client()`` keeps the real JWT check.
    """

    def _get_db():
        yield db_session

    def _factory(user: Usuario | None = None) -> TestClient:
        app.dependency_overrides[get_db] = _get_db
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        else:
            app.dependency_overrides.pop(get_current_user, None)
        return TestClient(app)

    yield _factory
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, admin) -> TestClient:
    return make_client(admin)
