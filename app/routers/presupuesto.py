"""
Budget entry (Presupuesto) router.

Mounts under ``/api/presupuestos`` (prefix set in ``main.py``).

Reading requires a valid JWT; writing requires the ADMIN or PRESUPUESTO
role (``require_role``).

Endpoints
---------
GET    /       - Paginated list, filterable by proyecto_id / rubro_id.
GET    /{id}   - One entry.
POST   /       - Create an entry (amounts validated as numbers).
PATCH  /{id}   - Partial update.
DELETE /{id}   - Delete an entry.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.common import MessageResponse, PaginationParams
from app.schemas.presupuesto import (
    PresupuestoCreate,
    PresupuestoListResponse,
    PresupuestoResponse,
    PresupuestoUpdate,
)
from app.services import presupuesto_service
from app.services.auth_service import get_current_user, require_role
from app.utils.constants import ROLES_ESCRITURA

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Presupuestos"])


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc.args[0]))


@router.get(
    "",
    response_model=PresupuestoListResponse,
    summary="Listado paginado de presupuestos",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_presupuestos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=200)] = 50,
    proyecto_id: Annotated[int | None, Query(ge=1)] = None,
    rubro_id: Annotated[int | None, Query(ge=1)] = None,
) -> PresupuestoListResponse:
    return presupuesto_service.listar(
        db,
        PaginationParams(page=page, page_size=page_size),
        proyecto_id=proyecto_id,
        rubro_id=rubro_id,
    )


@router.get(
    "/{presupuesto_id}",
    response_model=PresupuestoResponse,
    summary="Detalle de un presupuesto",
    responses={404: {"description": "Presupuesto no encontrado."}},
)
def get_presupuesto(
    presupuesto_id: Annotated[int, Path(ge=1)],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PresupuestoResponse:
    try:
        return PresupuestoResponse.model_validate(presupuesto_service.obtener(db, presupuesto_id))
    except LookupError as exc:
        raise _not_found(exc) from exc


@router.post(
    "",
    response_model=PresupuestoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar presupuesto",
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Proyecto o rubro inexistente."},
        422: {"description": "Valores numéricos inválidos."},
    },
)
def create_presupuesto(
    data: PresupuestoCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> PresupuestoResponse:
    """Create a budget entry for an existing project and rubro.

    Raises:
        HTTPException 404: If the project or rubro does not exist.
    """
    logger.info("POST /presupuestos user='%s'", current_user.username)
    try:
        presupuesto = presupuesto_service.crear(db, data)
    except LookupError as exc:
        raise _not_found(exc) from exc
    return PresupuestoResponse.model_validate(presupuesto)


@router.patch(
    "/{presupuesto_id}",
    response_model=PresupuestoResponse,
    summary="Actualizar presupuesto",
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Presupuesto, proyecto o rubro inexistente."},
        422: {"description": "Valores inválidos."},
    },
)
def update_presupuesto(
    presupuesto_id: Annotated[int, Path(ge=1)],
    data: PresupuestoUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> PresupuestoResponse:
    logger.info("PATCH /presupuestos/%d user='%s'", presupuesto_id, current_user.username)
    try:
        presupuesto = presupuesto_service.actualizar(db, presupuesto_id, data)
    except LookupError as exc:
        raise _not_found(exc) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return PresupuestoResponse.model_validate(presupuesto)


@router.delete(
    "/{presupuesto_id}",
    response_model=MessageResponse,
    summary="Eliminar presupuesto",
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Presupuesto no encontrado."},
    },
)
def delete_presupuesto(
    presupuesto_id: Annotated[int, Path(ge=1)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> MessageResponse:
    logger.info("DELETE /presupuestos/%d user='%s'", presupuesto_id, current_user.username)
    try:
        presupuesto_service.eliminar(db, presupuesto_id)
    except LookupError as exc:
        raise _not_found(exc) from exc
    return MessageResponse(message=f"Presupuesto {presupuesto_id} eliminado.")
