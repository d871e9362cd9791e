"""
Master Data (Datos Maestros) router.

Mounts under ``/api/datos-maestros`` (prefix set in ``main.py``).

These read-only list endpoints serve the selectors of the frontend (report
filters and the budget entry form).  No pagination is applied because the
cardinality of each catalogue is small.

All endpoints require a valid JWT (``get_current_user``).

Endpoints
---------
GET /facultades               - All faculties.
GET /grupos                   - Groups filtered by optional facultad_id.
GET /semilleros               - Seedbeds filtered by optional grupo_id.
GET /rubros                   - All expense categories.
GET /proyectos                - Projects filtered by faculty / group / seedbed.
GET /investigadores           - Researchers filtered by optional grupo_id.
GET /presupuestos-iniciales   - Initial project budgets by optional proyecto_id
                                (writes live in ``/api/presupuestos-iniciales``).
GET /opciones-filtro/{tipo}   - Accepted ``filtro`` values for a report type.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.facultad import Facultad
from app.models.grupo import Grupo
from app.models.investigador import Investigador
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.models.semillero import Semillero
from app.models.usuario import Usuario
from app.schemas.datos_maestros import (
    FacultadResponse,
    GrupoResponse,
    InvestigadorResponse,
    PresupuestoInicialProyectoResponse,
    ProyectoResponse,
    RubroResponse,
    SemilleroResponse,
)
from app.schemas.reporte import OpcionFiltro, TipoReporte
from app.services import presupuesto_inicial_service, reporte_service
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Datos Maestros"])


# ---------------------------------------------------------------------------
# GET /facultades
# ---------------------------------------------------------------------------


@router.get(
    "/facultades",
    response_model=list[FacultadResponse],
    summary="Listado de facultades",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_facultades(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> list[FacultadResponse]:
    """Return all faculties ordered alphabetically by name.

    Args:
        db: Database session injected by ``get_db``.
        _current_user: Authenticated user guard (validates JWT).

    Returns:
        List of ``FacultadResponse`` ordered by ``nombre`` ascending.
    """
    facultades = db.query(Facultad).order_by(Facultad.nombre).all()
    logger.debug("list_facultades: returned %d records", len(facultades))
    return [FacultadResponse.model_validate(f) for f in facultades]


# ---------------------------------------------------------------------------
# GET /grupos
# ---------------------------------------------------------------------------


@router.get(
    "/grupos",
    response_model=list[GrupoResponse],
    summary="Listado de grupos de investigación",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_grupos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    facultad_id: Annotated[
        int | None, Query(description="Filtrar por facultad.", ge=1)
    ] = None,
) -> list[GrupoResponse]:
    query = db.query(Grupo)
    if facultad_id is not None:
        query = query.filter(Grupo.facultad_id == facultad_id)
    grupos = query.order_by(Grupo.nombre).all()
    logger.debug("list_grupos: facultad_id=%s returned %d records", facultad_id, len(grupos))
    return [GrupoResponse.model_validate(g) for g in grupos]


# ---------------------------------------------------------------------------
# GET /semilleros
# ---------------------------------------------------------------------------


@router.get(
    "/semilleros",
    response_model=list[SemilleroResponse],
    summary="Listado de semilleros",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_semilleros(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    grupo_id: Annotated[int | None, Query(description="Filtrar por grupo.", ge=1)] = None,
) -> list[SemilleroResponse]:
    query = db.query(Semillero)
    if grupo_id is not None:
        query = query.filter(Semillero.grupo_id == grupo_id)
    return [SemilleroResponse.model_validate(s) for s in query.order_by(Semillero.nombre).all()]


# ---------------------------------------------------------------------------
# GET /rubros
# ---------------------------------------------------------------------------


@router.get(
    "/rubros",
    response_model=list[RubroResponse],
    summary="Listado de rubros",
    description="Categorías de gasto usadas en los presupuestos y en la importación CSV.",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_rubros(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> list[RubroResponse]:
    return [RubroResponse.model_validate(r) for r in db.query(Rubro).order_by(Rubro.nombre).all()]


# ---------------------------------------------------------------------------
# GET /proyectos
# ---------------------------------------------------------------------------


@router.get(
    "/proyectos",
    response_model=list[ProyectoResponse],
    summary="Listado de proyectos",
    description=(
        "Proyectos de investigación ordenados por número. Los filtros se combinan "
        "con AND y los omitidos no restringen el resultado."
    ),
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_proyectos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    facultad_id: Annotated[int | None, Query(ge=1)] = None,
    grupo_id: Annotated[int | None, Query(ge=1)] = None,
    semillero_id: Annotated[int | None, Query(ge=1)] = None,
) -> list[ProyectoResponse]:
    """Return research projects, optionally narrowed by organisational unit.

    Args:
        db: Database session.
        _current_user: Authenticated user guard.
        facultad_id: Optional faculty filter.
        grupo_id: Optional group filter.
        semillero_id: Optional seedbed filter.

    Returns:
        List of ``ProyectoResponse`` ordered by ``numero_proyecto``.
    """
    query = db.query(Proyecto)
    if facultad_id is not None:
        query = query.filter(Proyecto.facultad_id == facultad_id)
    if grupo_id is not None:
        query = query.filter(Proyecto.grupo_id == grupo_id)
    if semillero_id is not None:
        query = query.filter(Proyecto.semillero_id == semillero_id)

    proyectos = query.order_by(Proyecto.numero_proyecto).all()
    logger.debug(
        "list_proyectos: facultad_id=%s grupo_id=%s semillero_id=%s returned %d records",
        facultad_id,
        grupo_id,
        semillero_id,
        len(proyectos),
    )
    return [ProyectoResponse.model_validate(p) for p in proyectos]


# ---------------------------------------------------------------------------
# GET /investigadores
# ---------------------------------------------------------------------------


@router.get(
    "/investigadores",
    response_model=list[InvestigadorResponse],
    summary="Listado de investigadores",
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def list_investigadores(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    grupo_id: Annotated[int | None, Query(ge=1)] = None,
) -> list[InvestigadorResponse]:
    query = db.query(Investigador)
    if grupo_id is not None:
        query = query.filter(Investigador.grupo_id == grupo_id)
    return [
        InvestigadorResponse.model_validate(i)
        for i in query.order_by(Investigador.nombre).all()
    ]


# ---------------------------------------------------------------------------
# GET /presupuestos-iniciales
# ---------------------------------------------------------------------------


@router.get(
    "/presupuestos-iniciales",
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
        PresupuestoInicialProyectoResponse.model_validate(p)
        for p in presupuesto_inicial_service.listar(db, proyecto_id)
    ]


# ---------------------------------------------------------------------------
# GET /opciones-filtro/{tipo}
# ---------------------------------------------------------------------------


@router.get(
    "/opciones-filtro/{tipo}",
    response_model=list[OpcionFiltro],
    summary="Opciones de filtro de un reporte",
    description=(
        "Valores aceptados como ``filtro`` en ``/api/reportes`` para el tipo indicado: "
        "IDs de la dimensión con su nombre, o los años de inicio para ``por_anio``."
    ),
    responses={
        401: {"description": "Token JWT ausente o inválido."},
        422: {"description": "Tipo de reporte no válido."},
    },
)
def list_opciones_filtro(
    tipo: str,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> list[OpcionFiltro]:
    try:
        tipo_reporte = TipoReporte.parse(tipo)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return reporte_service.opciones_filtro(db, tipo_reporte)
