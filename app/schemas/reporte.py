"""
Pydantic v2 schemas and the report-type enumeration for the Reportes module.

A report row is a plain mapping from column name to a scalar so that the
same envelope carries grouped rows (whose columns depend on the dimension)
and detail rows (one per budget entry).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Scalar types a report cell may hold
ValorCelda = str | int | float | None


class TipoReporte(str, Enum):
    """Grouping dimension of a budget report."""

    POR_FACULTAD = "por_facultad"
    POR_GRUPO = "por_grupo"
    POR_SEMILLERO = "por_semillero"
    POR_ANIO = "por_anio"
    POR_RUBRO = "por_rubro"
    POR_PROYECTO = "por_proyecto"

    @classmethod
    def parse(cls, value: str) -> "TipoReporte":
        """Resolve a user-supplied report type, case-insensitively.

        Accepts the Spanish values (``"POR_FACULTAD"``) and the English
        aliases (``"by_faculty"``).

        Raises:
            ValueError: If *value* names no known report type.
        """
        key = (value or "").strip().lower()
        key = _ALIAS.get(key, key)
        try:
            return cls(key)
        except ValueError:
            validos = ", ".join(t.value for t in cls)
            raise ValueError(
                f"Tipo de reporte '{value}' no válido. Valores válidos: {validos}."
            ) from None


_ALIAS: dict[str, str] = {
    "by_faculty": TipoReporte.POR_FACULTAD.value,
    "by_group": TipoReporte.POR_GRUPO.value,
    "by_seedbed": TipoReporte.POR_SEMILLERO.value,
    "by_year": TipoReporte.POR_ANIO.value,
    "by_line_item": TipoReporte.POR_RUBRO.value,
    "by_project": TipoReporte.POR_PROYECTO.value,
}


class OpcionFiltro(BaseModel):
    """One accepted filter value for a report type.

    Attributes:
        id: Value to send as ``filtro`` (dimension id, or the year).
        nombre: Label shown in the selector.
    """

    id: int
    nombre: str

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 3, "nombre": "Facultad de Ingeniería"}}
    )


class ReporteResponse(BaseModel):
    """Envelope returned by ``GET /api/reportes``.

    Attributes:
        tipo: Report type that was applied, or ``None`` for the plain listing.
        agrupado: ``True`` for grouped aggregation, ``False`` for entry rows.
        filtro: Filter value applied in single-slice mode.
        total: Number of rows matching (before pagination in detail mode).
        filas: Report rows.
    """

    tipo: TipoReporte | None = None
    agrupado: bool
    filtro: int | None = None
    total: int = Field(..., ge=0)
    filas: list[dict[str, ValorCelda]] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tipo": "por_facultad",
                "agrupado": True,
                "filtro": None,
                "total": 1,
                "filas": [
                    {
                        "id": 1,
                        "nombre_facultad": "Ingeniería",
                        "disponibilidad_total": 150.0,
                        "egreso_total": 20.0,
                        "reserva_total": 5.0,
                        "presupuesto_inicial": 1000,
                        "presupuesto_inicial_proyectos": 1200,
                    }
                ],
            }
        }
    )
