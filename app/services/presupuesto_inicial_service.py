"""
Initial project allocation (PresupuestoInicialProyecto) service layer.

The rows written here feed the ``presupuesto_inicial_proyectos`` column of
the grouped reports.  As in ``presupuesto_service``, referenced projects and
rubros are checked up front so callers get a 404 instead of a foreign-key
violation.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.presupuesto_inicial_proyecto import PresupuestoInicialProyecto
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.schemas.presupuesto_inicial import (
    PresupuestoInicialCreate,
    PresupuestoInicialUpdate,
)

logger = logging.getLogger(__name__)


def _verificar_referencias(
    db: Session, proyecto_id: int | None, rubro_id: int | None
) -> None:
    if proyecto_id is not None and db.get(Proyecto, proyecto_id) is None:
        raise LookupError(f"No se encontró proyecto con id {proyecto_id}")
    if rubro_id is not None and db.get(Rubro, rubro_id) is None:
        raise LookupError(f"No se encontró rubro con id {rubro_id}")


def listar(db: Session, proyecto_id: int | None = None) -> list[PresupuestoInicialProyecto]:
    """Return every allocation, optionally for one project, ordered by id."""
    q = db.query(PresupuestoInicialProyecto)
    if proyecto_id is not None:
        q = q.filter(PresupuestoInicialProyecto.proyecto_id == proyecto_id)
    return q.order_by(PresupuestoInicialProyecto.id).all()


def obtener(db: Session, asignacion_id: int) -> PresupuestoInicialProyecto:
    """Load one allocation by primary key.

    Raises:
        LookupError: If the allocation does not exist.
    """
    asignacion = db.get(PresupuestoInicialProyecto, asignacion_id)
    if asignacion is None:
        raise LookupError(f"No se encontró presupuesto inicial con id {asignacion_id}")
    return asignacion


def crear(db: Session, data: PresupuestoInicialCreate) -> PresupuestoInicialProyecto:
    _verificar_referencias(db, data.proyecto_id, data.rubro_id)
    asignacion = PresupuestoInicialProyecto(**data.model_dump())
    db.add(asignacion)
    db.commit()
    db.refresh(asignacion)
    logger.info(
        "crear: presupuesto inicial id=%d proyecto_id=%d rubro_id=%s",
        asignacion.id, asignacion.proyecto_id, asignacion.rubro_id,
    )
    return asignacion


def actualizar(
    db: Session, asignacion_id: int, data: PresupuestoInicialUpdate
) -> PresupuestoInicialProyecto:
    """Apply the fields present in *data*; only ``rubro_id`` may be cleared.

    Raises:
        LookupError: If the allocation, project or rubro does not exist.
        ValueError: If ``proyecto_id`` or ``valor_inicial`` is sent as null.
    """
    asignacion = obtener(db, asignacion_id)
    cambios = data.model_dump(exclude_unset=True)
    _verificar_referencias(db, cambios.get("proyecto_id"), cambios.get("rubro_id"))

    nulos = sorted(
        campo for campo, valor in cambios.items() if valor is None and campo != "rubro_id"
    )
    if nulos:
        raise ValueError(f"El campo '{nulos[0]}' no puede ser nulo.")
    for campo, valor in cambios.items():
        setattr(asignacion, campo, valor)

    db.commit()
    db.refresh(asignacion)
    logger.info("actualizar: presupuesto inicial id=%d campos=%s", asignacion.id, sorted(cambios))
    return asignacion


def eliminar(db: Session, asignacion_id: int) -> None:
    asignacion = obtener(db, asignacion_id)
    db.delete(asignacion)
    db.commit()
    logger.info("eliminar: presupuesto inicial id=%d", asignacion_id)
