"""
Tests for the all-or-nothing CSV import of budget entries.
"""
import io
import logging
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.presupuesto import Presupuesto
from app.services.importacion_service import (
    ImportacionFallidaError,
    RegistroNoEncontradoError,
    ValidacionImportacionError,
    importar_csv,
)

ENCABEZADO = "rubro,numero_proyecto,valor_inicial,disponibilidad,descripcion,egreso,reserva\n"


def _csv(*filas: str) -> bytes:
    return (ENCABEZADO + "".join(f"{fila}\n" for fila in filas)).encode("latin-1")


def test_valid_rows_are_all_created(db_session, datos):
    creados = importar_csv(
        db_session,
        _csv(
            "Equipos,P-001,100,80,Reparación de equipo,10,10",
            "viáticos ,P-002,50.5,50.5,Viaje de campo,,",
        ),
        "presupuestos.csv",
    )

    assert creados == 2
    assert db_session.query(Presupuesto).count() == 5

    reparacion = db_session.query(Presupuesto).filter_by(descripcion="Reparación de equipo").one()
    assert reparacion.proyecto_id == datos["p1"].id
    assert reparacion.rubro_id == datos["equipos"].id

    viaje = db_session.query(Presupuesto).filter_by(descripcion="Viaje de campo").one()
    assert viaje.rubro_id == datos["viaticos"].id
    assert float(viaje.egreso) == 0.0
    assert float(viaje.reserva) == 0.0


def test_foreign_keys_come_from_lookups_not_from_csv(db_session, datos):
    contenido = (
        "rubro,numero_proyecto,valor_inicial,proyecto_id,rubro_id\n"
        "Equipos,P-002,75,999,999\n"
    ).encode("latin-1")

    importar_csv(db_session, contenido)

    creado = db_session.query(Presupuesto).order_by(Presupuesto.id.desc()).first()
    assert creado.proyecto_id == datos["p2"].id
    assert creado.rubro_id == datos["equipos"].id


def test_unknown_rubro_rolls_back_whole_file(db_session, datos):
    with pytest.raises(RegistroNoEncontradoError, match="rubro: Mobiliario"):
        importar_csv(
            db_session,
            _csv(
                "Equipos,P-001,100,80,Fila válida,0,0",
                "Mobiliario,P-001,100,80,Rubro inexistente,0,0",
            ),
        )

    assert db_session.query(Presupuesto).count() == 3


def test_unknown_project_is_a_lookup_error(db_session, datos):
    with pytest.raises(LookupError, match="proyecto: P-404"):
        importar_csv(db_session, _csv("Equipos,P-404,100,80,Sin proyecto,0,0"))

    assert db_session.query(Presupuesto).count() == 3


def test_non_numeric_amount_aborts_import(db_session, datos):
    with pytest.raises(ValidacionImportacionError, match="Fila 2"):
        importar_csv(
            db_session,
            _csv(
                "Equipos,P-001,100,80,Fila válida,0,0",
                "Equipos,P-001,cien,80,Monto inválido,0,0",
            ),
        )

    assert db_session.query(Presupuesto).count() == 3


def test_missing_initial_value_is_rejected(db_session, datos):
    with pytest.raises(ValueError):
        importar_csv(db_session, _csv("Equipos,P-001,,80,Sin valor inicial,0,0"))


def test_empty_file_is_rejected(db_session, datos):
    with pytest.raises(ValidacionImportacionError, match="vacío"):
        importar_csv(db_session, b"")


def test_header_only_file_is_rejected(db_session, datos):
    with pytest.raises(ValidacionImportacionError):
        importar_csv(db_session, ENCABEZADO.encode("latin-1"))


def test_import_from_path(db_session, datos, tmp_path):
    ruta = tmp_path / "carga.csv"
    ruta.write_bytes(_csv("Equipos,P-002,10,10,Desde disco,0,0"))

    assert importar_csv(db_session, ruta) == 1


def test_extra_decimals_are_rounded_to_cents(db_session, datos):
    importar_csv(db_session, _csv("Equipos,P-001,100.505,0.004,Tres decimales,0,0"))

    creado = db_session.query(Presupuesto).filter_by(descripcion="Tres decimales").one()
    assert creado.valor_inicial == Decimal("100.51")
    assert creado.disponibilidad == Decimal("0.00")


def test_import_from_binary_handle_keeps_accents(db_session, datos):
    archivo = io.BytesIO(_csv("Viáticos,P-001,40,40,Peajes,0,0"))

    assert importar_csv(db_session, archivo) == 1
    creado = db_session.query(Presupuesto).filter_by(descripcion="Peajes").one()
    assert creado.rubro_id == datos["viaticos"].id


def test_text_mode_handle_is_rejected(db_session, datos):
    archivo = io.StringIO(_csv("Viáticos,P-001,40,40,Peajes,0,0").decode("latin-1"))

    with pytest.raises(ValidacionImportacionError, match="binario"):
        importar_csv(db_session, archivo)

    assert db_session.query(Presupuesto).count() == 3


def test_database_failure_rolls_back_and_is_logged(db_session, datos, monkeypatch, caplog):
    def _commit_fallido():
        raise IntegrityError("INSERT INTO presupuestos", {}, Exception("constraint failed"))

    monkeypatch.setattr(db_session, "commit", _commit_fallido)

    with caplog.at_level(logging.ERROR, logger="app.services.importacion_service"):
        with pytest.raises(ImportacionFallidaError, match="No se pudo importar CSV"):
            importar_csv(
                db_session,
                _csv(
                    "Equipos,P-001,100,80,Primera,0,0",
                    "Equipos,P-002,200,80,Segunda,0,0",
                ),
            )

    monkeypatch.undo()
    assert db_session.query(Presupuesto).count() == 3
    assert any(registro.exc_info for registro in caplog.records)
