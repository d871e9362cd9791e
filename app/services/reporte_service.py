"""
Budget report service layer.

All database access for the ``/api/reportes`` endpoints lives here.  A report
is either a grouped aggregation of ``presupuestos`` by one organisational
dimension, or the plain list of entries restricted to one value of that
dimension ("single slice").

Design notes
------------
- Each ``TipoReporte`` maps to a ``_Dimension`` describing its grouping
  columns, joins, filter column and catalogue of accepted filter values.
  Dispatch looks the dimension up in ``_DIMENSIONES``; there is no
  string-keyed fallback.
- Grouped reports run two aggregations with the same key: sums over
  ``presupuestos`` and the sum of ``presupuesto_inicial_proyectos``.  The
  second result is merged into the first on the group key; groups without
  budget entries are not reported.
- ``func.coalesce(..., 0)`` guards against NULL sums.
- Numeric coercion happens in Python after the query: initial budgets and
  years become ``int`` (truncated), running totals become ``float``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import extract, func
from sqlalchemy.orm import Query, Session, joinedload

from app.models.facultad import Facultad
from app.models.grupo import Grupo
from app.models.presupuesto import Presupuesto
from app.models.presupuesto_inicial_proyecto import PresupuestoInicialProyecto
from app.models.proyecto import Proyecto
from app.models.rubro import Rubro
from app.models.semillero import Semillero
from app.schemas.common import PaginationParams
from app.schemas.reporte import OpcionFiltro, ReporteResponse, TipoReporte

logger = logging.getLogger(__name__)

# Output fields coerced after aggregation
_CAMPOS_ENTEROS: tuple[str, ...] = (
    "presupuesto_inicial",
    "presupuesto_inicial_proyectos",
    "anio_inicio",
)
_CAMPOS_DECIMALES: tuple[str, ...] = (
    "disponibilidad_total",
    "egreso_total",
    "reserva_total",
)


def _anio_inicio() -> Any:
    """SQL expression for the start year of the joined project."""
    return extract("year", Proyecto.fecha_inicio)


# ---------------------------------------------------------------------------
# Dimension table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Dimension:
    """How one report type groups, joins and filters budget rows.

    Attributes:
        claves: ``(label, column)`` pairs forming the group key.
        clave_union: Label of the key used to merge the initial-budget sums.
        columna_filtro: Column compared against the filter value.
        catalogo: ``(id column, label column)`` listing accepted filter
            values; ``None`` when the values are derived (years).
        tabla: Dimension table joined after ``proyectos`` (or instead of it).
        enlace: Builds the join condition for ``tabla`` given the source
            model (``Presupuesto`` or ``PresupuestoInicialProyecto``).
        via_proyecto: Whether the source must be joined to ``proyectos``.
    """

    claves: tuple[tuple[str, Any], ...]
    clave_union: str
    columna_filtro: Any
    catalogo: tuple[Any, Any] | None = None
    tabla: Any = None
    enlace: Callable[[Any], Any] | None = None
    via_proyecto: bool = True


_DIMENSIONES: dict[TipoReporte, _Dimension] = {
    TipoReporte.POR_FACULTAD: _Dimension(
        claves=(("id", Facultad.id), ("nombre_facultad", Facultad.nombre)),
        clave_union="id",
        columna_filtro=Proyecto.facultad_id,
        catalogo=(Facultad.id, Facultad.nombre),
        tabla=Facultad,
        enlace=lambda origen: Facultad.id == Proyecto.facultad_id,
    ),
    TipoReporte.POR_GRUPO: _Dimension(
        claves=(("id", Grupo.id), ("nombre_grupo", Grupo.nombre)),
        clave_union="id",
        columna_filtro=Proyecto.grupo_id,
        catalogo=(Grupo.id, Grupo.nombre),
        tabla=Grupo,
        enlace=lambda origen: Grupo.id == Proyecto.grupo_id,
    ),
    TipoReporte.POR_SEMILLERO: _Dimension(
        claves=(("id", Semillero.id), ("nombre_semillero", Semillero.nombre)),
        clave_union="id",
        columna_filtro=Proyecto.semillero_id,
        catalogo=(Semillero.id, Semillero.nombre),
        tabla=Semillero,
        enlace=lambda origen: Semillero.id == Proyecto.semillero_id,
    ),
    TipoReporte.POR_ANIO: _Dimension(
        claves=(("anio_inicio", _anio_inicio()),),
        clave_union="anio_inicio",
        columna_filtro=_anio_inicio(),
    ),
    TipoReporte.POR_RUBRO: _Dimension(
        claves=(("id", Rubro.id), ("nombre_rubro", Rubro.nombre)),
        clave_union="id",
        columna_filtro=Presupuesto.rubro_id,
        catalogo=(Rubro.id, Rubro.nombre),
        tabla=Rubro,
        enlace=lambda origen: Rubro.id == origen.rubro_id,
        via_proyecto=False,
    ),
    TipoReporte.POR_PROYECTO: _Dimension(
        claves=(
            ("id", Proyecto.id),
            ("numero_proyecto", Proyecto.numero_proyecto),
            ("nombre_proyecto", Proyecto.nombre),
        ),
        clave_union="id",
        columna_filtro=Presupuesto.proyecto_id,
        catalogo=(Proyecto.id, Proyecto.numero_proyecto),
    ),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _consulta_agrupada(
    db: Session, dimension: _Dimension, origen: Any, agregados: tuple[Any, ...]
) -> Query:
    """Build ``SELECT <key>, <aggregates> FROM origen ... GROUP BY <key>``.

    Args:
        db: Active SQLAlchemy session.
        dimension: Grouping definition of the requested report.
        origen: Source model, ``Presupuesto`` or ``PresupuestoInicialProyecto``.
        agregados: Labelled aggregate expressions over ``origen``.

    Returns:
        The grouped query, not yet executed.
    """
    columnas = [columna.label(nombre) for nombre, columna in dimension.claves]
    q = db.query(*columnas, *agregados).select_from(origen)
    if dimension.via_proyecto:
        q = q.join(Proyecto, Proyecto.id == origen.proyecto_id)
    if dimension.tabla is not None:
        q = q.join(dimension.tabla, dimension.enlace(origen))
    return q.group_by(*(columna for _, columna in dimension.claves))


def _totales_presupuesto() -> tuple[Any, ...]:
    return (
        func.coalesce(func.sum(Presupuesto.disponibilidad), 0).label("disponibilidad_total"),
        func.coalesce(func.sum(Presupuesto.egreso), 0).label("egreso_total"),
        func.coalesce(func.sum(Presupuesto.reserva), 0).label("reserva_total"),
        func.coalesce(func.sum(Presupuesto.valor_inicial), 0).label("presupuesto_inicial"),
    )


def _total_inicial_proyectos() -> tuple[Any, ...]:
    return (
        func.coalesce(func.sum(PresupuestoInicialProyecto.valor_inicial), 0).label(
            "presupuesto_inicial_proyectos"
        ),
    )


def _normalizar_fila(fila: dict[str, Any]) -> dict[str, Any]:
    """Coerce aggregate fields to the types exposed by the API.

    ``int()`` truncates toward zero, so a fractional initial budget such as
    ``1500.99`` is reported as ``1500``.
    """
    for campo in _CAMPOS_ENTEROS:
        if fila.get(campo) is not None:
            fila[campo] = int(fila[campo])
    for campo in _CAMPOS_DECIMALES:
        if fila.get(campo) is not None:
            fila[campo] = float(fila[campo])
    return fila


def _fila_detalle(presupuesto: Presupuesto) -> dict[str, Any]:
    """Flatten one budget entry into a report row."""
    return {
        "id": presupuesto.id,
        "descripcion": presupuesto.descripcion,
        "disponibilidad": float(presupuesto.disponibilidad or 0),
        "egreso": float(presupuesto.egreso or 0),
        "reserva": float(presupuesto.reserva or 0),
        "valor_inicial": float(presupuesto.valor_inicial or 0),
        "proyecto_id": presupuesto.proyecto_id,
        "numero_proyecto": presupuesto.proyecto.numero_proyecto,
        "rubro_id": presupuesto.rubro_id,
        "nombre_rubro": presupuesto.rubro.nombre,
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def agrupar(db: Session, tipo: TipoReporte) -> list[dict[str, Any]]:
    """Aggregate budget entries by the dimension of *tipo*.

    Produces one row per group present in ``presupuestos`` with the summed
    ``disponibilidad_total``, ``egreso_total``, ``reserva_total`` and
    ``presupuesto_inicial``, plus ``presupuesto_inicial_proyectos`` taken
    from the initial-allocation table for the same group (0 if none).

    Args:
        db: Active SQLAlchemy session.
        tipo: Grouping dimension.

    Returns:
        List of row mappings in database order.
    """
    dimension = _DIMENSIONES[tipo]

    filas = [
        dict(row._mapping)
        for row in _consulta_agrupada(db, dimension, Presupuesto, _totales_presupuesto()).all()
    ]
    iniciales = {
        row._mapping[dimension.clave_union]: row._mapping["presupuesto_inicial_proyectos"]
        for row in _consulta_agrupada(
            db, dimension, PresupuestoInicialProyecto, _total_inicial_proyectos()
        ).all()
    }

    for fila in filas:
        fila["presupuesto_inicial_proyectos"] = iniciales.get(fila[dimension.clave_union], 0)
        _normalizar_fila(fila)

    logger.debug(
        "agrupar: tipo=%s grupos=%d grupos_iniciales=%d",
        tipo.value, len(filas), len(iniciales),
    )
    return filas


def filtrar(db: Session, tipo: TipoReporte, valor: int) -> Query:
    """Return the budget entries whose *tipo* dimension equals *valor*.

    No grouping is applied.  The query is ordered by id so callers can
    paginate it.

    Args:
        db: Active SQLAlchemy session.
        tipo: Dimension to filter on.
        valor: Dimension id, or the start year for ``POR_ANIO``.

    Returns:
        An unexecuted ``Query`` over ``Presupuesto``.
    """
    dimension = _DIMENSIONES[tipo]
    q = db.query(Presupuesto)
    if dimension.via_proyecto:
        q = q.join(Proyecto, Proyecto.id == Presupuesto.proyecto_id)
    return q.filter(dimension.columna_filtro == valor).order_by(Presupuesto.id)


def opciones_filtro(db: Session, tipo: TipoReporte) -> list[OpcionFiltro]:
    """List the values accepted as ``filtro`` for *tipo*, read live from the DB.

    Dimension tables yield ``(id, nombre)``; ``POR_ANIO`` yields the distinct
    start years of the registered projects.
    """
    dimension = _DIMENSIONES[tipo]

    if dimension.catalogo is None:
        anio = _anio_inicio()
        rows = (
            db.query(anio)
            .filter(Proyecto.fecha_inicio.isnot(None))
            .distinct()
            .order_by(anio)
            .all()
        )
        return [OpcionFiltro(id=int(a), nombre=str(int(a))) for (a,) in rows]

    columna_id, columna_nombre = dimension.catalogo
    rows = db.query(columna_id, columna_nombre).order_by(columna_nombre).all()
    return [OpcionFiltro(id=row[0], nombre=str(row[1])) for row in rows]


def generar_reporte(
    db: Session,
    tipo: str | TipoReporte | None = None,
    filtro: int | None = None,
    paginacion: PaginationParams | None = None,
) -> ReporteResponse:
    """Dispatch a report request.

    - Without *tipo*: every budget entry, unaggregated.
    - With *tipo* and *filtro*: the entries of that single dimension value.
    - With *tipo* only: the grouped aggregation for that dimension.

    Args:
        db: Active SQLAlchemy session.
        tipo: Report type, case-insensitive (``"POR_FACULTAD"`` works).
        filtro: Optional dimension value; must be one of ``opciones_filtro``.
        paginacion: Page applied to entry listings; grouped reports are
            never paginated.

    Returns:
        A ``ReporteResponse`` envelope.

    Raises:
        ValueError: If *tipo* is unknown, or *filtro* is not an accepted
            value for *tipo*.
    """
    tipo_reporte = TipoReporte.parse(tipo) if tipo is not None else None

    if tipo_reporte is None:
        if filtro is not None:
            raise ValueError("El filtro requiere indicar el tipo de reporte.")
        return _listado(db.query(Presupuesto).order_by(Presupuesto.id), None, None, paginacion)

    if filtro is None:
        filas = agrupar(db, tipo_reporte)
        return ReporteResponse(
            tipo=tipo_reporte,
            agrupado=True,
            total=len(filas),
            filas=filas,
        )

    aceptados = {opcion.id for opcion in opciones_filtro(db, tipo_reporte)}
    if filtro not in aceptados:
        raise ValueError(
            f"Opción de filtro {filtro} no válida para el reporte '{tipo_reporte.value}'."
        )
    return _listado(filtrar(db, tipo_reporte, filtro), tipo_reporte, filtro, paginacion)


def _listado(
    query: Query,
    tipo: TipoReporte | None,
    filtro: int | None,
    paginacion: PaginationParams | None,
) -> ReporteResponse:
    """Count, paginate and flatten an entry query into a detail report."""
    total: int = query.count()
    query = query.options(joinedload(Presupuesto.proyecto), joinedload(Presupuesto.rubro))
    if paginacion is not None:
        query = query.offset(paginacion.offset).limit(paginacion.page_size)

    filas = [_fila_detalle(p) for p in query.all()]
    logger.debug(
        "_listado: tipo=%s filtro=%s total=%d devueltos=%d",
        tipo.value if tipo else None, filtro, total, len(filas),
    )
    return ReporteResponse(
        tipo=tipo,
        agrupado=False,
        filtro=filtro,
        total=total,
        filas=filas,
    )
