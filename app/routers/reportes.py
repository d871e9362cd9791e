"""
Budget reports router.

Mounts under ``/api/reportes`` (prefix set in ``main.py``).

All endpoints require a valid JWT token (``get_current_user`` dependency).

Endpoints
---------
GET /          - Dispatch by ``tipo`` and ``filtro`` query strings:
                 no tipo → all entries; tipo → grouped report;
                 tipo + filtro → entries of one dimension value.
GET /{tipo}    - Grouped report for one dimension.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.common import PaginationParams
from app.schemas.reporte import ReporteResponse
from app.services import reporte_service
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reportes"])


def _pagination_params(
    page: Annotated[int, Query(description="Página (base 1).", ge=1)] = 1,
    page_size: Annotated[
        int, Query(description="Registros por página (máx. 200).", ge=1, le=200)
    ] = 50,
) -> PaginationParams:
    """Assemble a ``PaginationParams`` instance from URL query parameters."""
    return PaginationParams(page=page, page_size=page_size)


def _generar(
    db: Session,
    tipo: str | None,
    filtro: int | None,
    pagination: PaginationParams | None,
) -> ReporteResponse:
    """Run the report service and map its ``ValueError`` to HTTP 422."""
    try:
        return reporte_service.generar_reporte(db, tipo, filtro, pagination)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc


@router.get(
    "",
    response_model=ReporteResponse,
    summary="Reporte de presupuestos",
    description=(
        "Sin ``tipo`` retorna todos los presupuestos. Con ``tipo`` "
        "(por_facultad, por_grupo, por_semillero, por_anio, por_rubro, por_proyecto) "
        "retorna los totales agrupados por esa dimensión. Con ``tipo`` y ``filtro`` "
        "retorna los presupuestos de ese valor de la dimensión."
    ),
    responses={
        200: {"description": "Reporte generado."},
        401: {"description": "Token JWT ausente o inválido."},
        422: {"description": "Tipo de reporte u opción de filtro no válidos."},
    },
)
def get_reporte(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    pagination: Annotated[PaginationParams, Depends(_pagination_params)],
    tipo: Annotated[
        str | None,
        Query(description="Tipo de reporte (no distingue mayúsculas).", max_length=50),
    ] = None,
    filtro: Annotated[
        int | None,
        Query(description="ID de la dimensión, o año para por_anio."),
    ] = None,
) -> ReporteResponse:
    logger.debug("GET /reportes tipo=%s filtro=%s", tipo, filtro)
    return _generar(db, tipo, filtro, pagination)


@router.get(
    "/{tipo}",
    response_model=ReporteResponse,
    summary="Reporte agrupado por dimensión",
    responses={
        200: {"description": "Totales agrupados."},
        401: {"description": "Token JWT ausente o inválido."},
        422: {"description": "Tipo de reporte no válido."},
    },
)
def get_reporte_agrupado(
    tipo: str,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> ReporteResponse:
    """Return one row of totals per group of the requested dimension.

    Args:
        tipo: Report type path segment, e.g. ``por_facultad``.
        db: Database session.
        _current_user: Authenticated user guard.

    Returns:
        A grouped ``ReporteResponse``.
    """
    logger.debug("GET /reportes/%s", tipo)
    return _generar(db, tipo, None, None)
