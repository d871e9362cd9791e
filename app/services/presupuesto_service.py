"""
Budget entry (Presupuesto) service layer.

CRUD operations behind ``/api/presupuestos``.  Functions receive a
SQLAlchemy ``Session`` and schema instances, and return ORM objects or
schema instances ready for serialisation by FastAPI.

Numeric validation happens in the Pydantic write schemas; this module checks
the referential side (project and rubro must exist) so that the caller gets
a precise 404 instead of a foreign-key violation.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.presupuesto import Presupuesto
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.schemas.common import PaginationParams
from app.schemas.presupuesto import (
    PresupuestoCreate,
    PresupuestoListResponse,
    PresupuestoResponse,
    PresupuestoUpdate,
)

logger = logging.getLogger(__name__)


def _verificar_referencias(
    db: Session, proyecto_id: int | None, rubro_id: int | None
) -> None:
    """Raise ``LookupError`` if a referenced project or rubro does not exist."""
    if proyecto_id is not None and db.get(Proyecto, proyecto_id) is None:
        raise LookupError(f"No se encontró proyecto con id {proyecto_id}")
    if rubro_id is not None and db.get(Rubro, rubro_id) is None:
        raise LookupError(f"No se encontró rubro con id {rubro_id}")


def listar(
    db: Session,
    pagination: PaginationParams,
    proyecto_id: int | None = None,
    rubro_id: int | None = None,
) -> PresupuestoListResponse:
    """Return one page of budget entries, optionally for one project/rubro."""
    q = db.query(Presupuesto)
    if proyecto_id is not None:
        q = q.filter(Presupuesto.proyecto_id == proyecto_id)
    if rubro_id is not None:
        q = q.filter(Presupuesto.rubro_id == rubro_id)

    total: int = q.count()
    rows = (
        q.order_by(Presupuesto.id)
        .offset(pagination.offset)
        .limit(pagination.page_size)
        .all()
    )
    logger.debug(
        "listar: page=%d size=%d total=%d", pagination.page, pagination.page_size, total
    )
    return PresupuestoListResponse(
        rows=[PresupuestoResponse.model_validate(p) for p in rows],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


def obtener(db: Session, presupuesto_id: int) -> Presupuesto:
    """Load one entry by primary key.

    Raises:
        LookupError: If the entry does not exist.
    """
    presupuesto = db.get(Presupuesto, presupuesto_id)
    if presupuesto is None:
        raise LookupError(f"No se encontró presupuesto con id {presupuesto_id}")
    return presupuesto


def crear(db: Session, data: PresupuestoCreate) -> Presupuesto:
    """Persist a new budget entry after checking its project and rubro exist."""
    _verificar_referencias(db, data.proyecto_id, data.rubro_id)
    presupuesto = Presupuesto(**data.model_dump())
    db.add(presupuesto)
    db.commit()
    db.refresh(presupuesto)
    logger.info(
        "crear: presupuesto id=%d proyecto_id=%d rubro_id=%d",
        presupuesto.id, presupuesto.proyecto_id, presupuesto.rubro_id,
    )
    return presupuesto


def actualizar(db: Session, presupuesto_id: int, data: PresupuestoUpdate) -> Presupuesto:
    """Apply the fields present in *data* to an existing entry."""
    presupuesto = obtener(db, presupuesto_id)
    cambios = data.model_dump(exclude_unset=True)
    _verificar_referencias(db, cambios.get("proyecto_id"), cambios.get("rubro_id"))

    nulos = sorted(
        campo for campo, valor in cambios.items() if valor is None and campo != "descripcion"
    )
    if nulos:
        raise ValueError(f"El campo '{nulos[0]}' no puede ser nulo.")
    for campo, valor in cambios.items():
        setattr(presupuesto, campo, valor)

    db.commit()
    db.refresh(presupuesto)
    logger.info("actualizar: presupuesto id=%d campos=%s", presupuesto.id, sorted(cambios))
    return presupuesto


def eliminar(db: Session, presupuesto_id: int) -> None:
    presupuesto = obtener(db, presupuesto_id)
    db.delete(presupuesto)
    db.commit()
    logger.info("eliminar: presupuesto id=%d", presupuesto_id)
