"""
Initial project allocation (PresupuestoInicialProyecto) router.

Mounts under ``/api/presupuestos-iniciales`` (prefix set in ``main.py``).

Reading requires a valid JWT; writing requires the ADMIN or PRESUPUESTO
role (``require_role``).

Endpoints
---------
GET    /       - All allocations, filterable by proyecto_id.
GET    /{id}   - One allocation.
POST   /       - Create an allocation.
PATCH  /{id}   - Partial update.
DELETE /{id}   - Delete an allocation.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.common import MessageResponse
from app.schemas.datos_maestros import PresupuestoInicialProyectoResponse
from app.schemas.presupuesto_inicial import (
    PresupuestoInicialCreate,
    PresupuestoInicialUpdate,
)
from app.services import presupuesto_inicial_service
from app.services.auth_service import get_current_user, require_role
from app.utils.constants import ROLES_ESCRITURA

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Presupuestos Iniciales"])


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc.args[0]))


@router.get(
    "",
    response_model=list[PresupuestoInicialProyectoResponse],
    summary="Presupuesto inicial aprobado por proyecto",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_presupuestos_iniciales(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    proyecto_id: Annotated[int | None, Query(ge=1)] = None,
) -> list[PresupuestoInicialProyectoResponse]:
    return [
        PresupuestoInicialProyectoResponse.model_validate(a)
        for a in presupuesto_inicial_service.listar(db, proyecto_id)
    ]


@router.get(
    "/{asignacion_id}",
    response_model=PresupuestoInicialProyectoResponse,
    summary="Detalle de un presupuesto inicial",
    responses={404: {"description": "Presupuesto inicial no encontrado."}},
)
def get_presupuesto_inicial(
    asignacion_id: Annotated[int, Path(ge=1)],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PresupuestoInicialProyectoResponse:
    try:
        asignacion = presupuesto_inicial_service.obtener(db, asignacion_id)
    except LookupError as exc:
        raise _not_found(exc) from exc
    return PresupuestoInicialProyectoResponse.model_validate(asignacion)


@router.post(
    "",
    response_model=PresupuestoInicialProyectoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar presupuesto inicial de un proyecto",
    description=(
        "Asigna un valor inicial a un proyecto, opcionalmente para un rubro. "
        "Estos valores alimentan la columna presupuesto_inicial_proyectos de los "
        "reportes agrupados. Requiere rol ADMIN o PRESUPUESTO."
    ),
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Proyecto o rubro inexistente."},
        422: {"description": "Valor inválido."},
    },
)
def create_presupuesto_inicial(
    data: PresupuestoInicialCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> PresupuestoInicialProyectoResponse:
    logger.info("POST /presupuestos-iniciales user='%s'", current_user.username)
    try:
        asignacion = presupuesto_inicial_service.crear(db, data)
    except LookupError as exc:
        raise _not_found(exc) from exc
    return PresupuestoInicialProyectoResponse.model_validate(asignacion)


@router.patch(
    "/{asignacion_id}",
    response_model=PresupuestoInicialProyectoResponse,
    summary="Actualizar presupuesto inicial",
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Presupuesto inicial, proyecto o rubro inexistente."},
        422: {"description": "Valores inválidos."},
    },
)
def update_presupuesto_inicial(
    asignacion_id: Annotated[int, Path(ge=1)],
    data: PresupuestoInicialUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> PresupuestoInicialProyectoResponse:
    logger.info(
        "PATCH /presupuestos-iniciales/%d user='%s'", asignacion_id, current_user.username
    )
    try:
        asignacion = presupuesto_inicial_service.actualizar(db, asignacion_id, data)
    except LookupError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return PresupuestoInicialProyectoResponse.model_validate(asignacion)


@router.delete(
    "/{asignacion_id}",
    response_model=MessageResponse,
    summary="Eliminar presupuesto inicial",
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Presupuesto inicial no encontrado."},
    },
)
def delete_presupuesto_inicial(
    asignacion_id: Annotated[int, Path(ge=1)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> MessageResponse:
    logger.info(
        "DELETE /presupuestos-iniciales/%d user='%s'", asignacion_id, current_user.username
    )
    try:
        presupuesto_inicial_service.eliminar(db, asignacion_id)
    except LookupError as exc:
        raise _not_found(exc) from exc
    return MessageResponse(message=f"Presupuesto inicial {asignacion_id} eliminado.")
