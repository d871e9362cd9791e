"""
CSV import (Importacion) service layer.

Loads budget entries in bulk from a CSV file exported by the research
office's spreadsheets:

1. Decode the file (Latin-1 by default) and read it with pandas, every cell
   as a string.
2. Resolve each row's rubro (column 0, case-insensitive name) and project
   (column 1, exact ``numero_proyecto``).
3. Validate the budget fields with ``PresupuestoCreate``.
4. Insert every row in a single transaction and commit once.

The import is all-or-nothing: a missing rubro or project, an invalid amount,
or a database error rolls the session back and nothing from the file is
persisted.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.presupuesto import Presupuesto
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.schemas.presupuesto import PresupuestoCreate
from app.utils.constants import CAMPOS_CSV_PRESUPUESTO

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class RegistroNoEncontradoError(LookupError):
    """A rubro or project referenced by a CSV row does not exist."""


class ValidacionImportacionError(ValueError):
    """The CSV is unreadable or one of its rows holds invalid values."""


class ImportacionFallidaError(RuntimeError):
    """The database rejected the bulk insert."""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _leer_origen(origen: str | Path | bytes | BinaryIO) -> bytes:
    """Normalise a path, raw bytes or a binary file object to bytes.

    Raises:
        ValidacionImportacionError: If *origen* is a text-mode file, whose
            characters were already decoded with an unknown encoding.
    """
    if isinstance(origen, bytes):
        return origen
    if isinstance(origen, (str, Path)):
        return Path(origen).read_bytes()
    data = origen.read()
    if not isinstance(data, bytes):
        raise ValidacionImportacionError("El archivo debe abrirse en modo binario ('rb').")
    return data


def _leer_csv(raw: bytes, encoding: str) -> pd.DataFrame:
    """Parse the CSV into a string DataFrame with the header row as columns.

    Raises:
        ValidacionImportacionError: If the file is empty, cannot be parsed,
            or lacks the rubro / project columns.
    """
    if not raw.strip():
        raise ValidacionImportacionError("El archivo está vacío.")

    try:
        df = pd.read_csv(
            io.BytesIO(raw),
            encoding=encoding,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ValidacionImportacionError(f"No se pudo leer el CSV: {exc}") from exc

    if len(df.columns) < 2:
        raise ValidacionImportacionError(
            "El CSV debe tener al menos las columnas de rubro y número de proyecto."
        )
    if df.empty:
        raise ValidacionImportacionError("El CSV no contiene filas de datos.")

    df.columns = [str(col).strip() for col in df.columns]
    # Short rows leave NaN in the missing trailing cells
    return df.fillna("")


class _Resolutor:
    """Memoised rubro / project lookups for the rows of one import."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._rubros: dict[str, int] = {}
        self._proyectos: dict[str, int] = {}

    def rubro_id(self, nombre: str) -> int:
        clave = nombre.strip().lower()
        if clave not in self._rubros:
            rubro = (
                self._db.query(Rubro)
                .filter(func.lower(Rubro.nombre) == clave)
                .first()
            )
            if rubro is None:
                raise RegistroNoEncontradoError(f"No se encontró rubro: {nombre}")
            self._rubros[clave] = rubro.id
        return self._rubros[clave]

    def proyecto_id(self, numero_proyecto: str) -> int:
        clave = numero_proyecto.strip()
        if clave not in self._proyectos:
            proyecto = (
                self._db.query(Proyecto)
                .filter(Proyecto.numero_proyecto == clave)
                .first()
            )
            if proyecto is None:
                raise RegistroNoEncontradoError(
                    f"No se encontró proyecto: {numero_proyecto}"
                )
            self._proyectos[clave] = proyecto.id
        return self._proyectos[clave]


def _construir_registro(
    fila: pd.Series, numero_fila: int, resolutor: _Resolutor
) -> Presupuesto:
    """Turn one CSV row into an unsaved ``Presupuesto``.

    The foreign keys always come from the resolved lookups; any
    ``proyecto_id`` / ``rubro_id`` column in the file is ignored.
    """
    rubro_id = resolutor.rubro_id(str(fila.iloc[0]))
    proyecto_id = resolutor.proyecto_id(str(fila.iloc[1]))

    datos: dict[str, Any] = {
        campo: fila[campo].strip()
        for campo in CAMPOS_CSV_PRESUPUESTO
        if campo in fila.index and fila[campo].strip() != ""
    }
    datos["proyecto_id"] = proyecto_id
    datos["rubro_id"] = rubro_id

    try:
        validado = PresupuestoCreate(**datos)
    except ValidationError as exc:
        detalle = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ValidacionImportacionError(f"Fila {numero_fila}: {detalle}") from exc

    return Presupuesto(**validado.model_dump())


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def importar_csv(
    db: Session,
    origen: str | Path | bytes | BinaryIO,
    nombre_archivo: str | None = None,
) -> int:
    """Import every row of a budget CSV atomically.

    Args:
        db: Active SQLAlchemy session; committed on success, rolled back on
            any failure.
        origen: CSV content as bytes, a filesystem path, or a binary file.
        nombre_archivo: Name used in log messages.

    Returns:
        Number of ``Presupuesto`` rows created.

    Raises:
        RegistroNoEncontradoError: A row names a rubro or project that does
            not exist.
        ValidacionImportacionError: The file is unreadable or a row holds an
            invalid amount.
        ImportacionFallidaError: The database rejected the insert.
    """
    settings = get_settings()
    nombre = nombre_archivo or (str(origen) if isinstance(origen, (str, Path)) else "upload.csv")

    try:
        df = _leer_csv(_leer_origen(origen), settings.CSV_ENCODING)
        resolutor = _Resolutor(db)
        registros = [
            _construir_registro(fila, numero_fila, resolutor)
            for numero_fila, (_, fila) in enumerate(df.iterrows(), start=1)
        ]
        db.add_all(registros)
        db.commit()
    except (RegistroNoEncontradoError, ValidacionImportacionError) as exc:
        db.rollback()
        logger.error("importar_csv: archivo='%s' rechazado: %s", nombre, exc)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("importar_csv: fallo al insertar archivo='%s'", nombre)
        raise ImportacionFallidaError(f"No se pudo importar CSV: {exc}") from exc

    logger.info("importar_csv: archivo='%s' registros=%d", nombre, len(registros))
    return len(registros)
