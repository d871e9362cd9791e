"""
Pydantic v2 schemas for the Master Data (Datos Maestros) module.

These read-only response schemas are used by ``GET`` list endpoints that
power the selectors of the admin frontend.  All models enable ORM mode
(``from_attributes=True``) so that SQLAlchemy instances can be serialised
directly.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr


class FacultadResponse(BaseModel):
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)


class GrupoResponse(BaseModel):
    """Research group with its parent faculty id."""

    id: int
    nombre: str
    facultad_id: int

    model_config = ConfigDict(from_attributes=True)


class SemilleroResponse(BaseModel):
    id: int
    nombre: str
    grupo_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class RubroResponse(BaseModel):
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)


class ProyectoResponse(BaseModel):
    """Research project with its organisational foreign keys.

    Attributes:
        id: Primary key.
        numero_proyecto: Institutional project number.
        nombre: Project title.
        fecha_inicio: Start date.
        fecha_fin: Planned end date.
        facultad_id: Owning faculty.
        grupo_id: Owning group, if any.
        semillero_id: Seedbed, if any.
    """

    id: int
    numero_proyecto: str
    nombre: str | None = None
    fecha_inicio: date | None = None
    fecha_fin: date | None = None
    facultad_id: int
    grupo_id: int | None = None
    semillero_id: int | None = None

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 12,
                "numero_proyecto": "INV-2023-045",
                "nombre": "Sensores de bajo costo para calidad del aire",
                "fecha_inicio": "2023-02-01",
                "fecha_fin": "2024-12-31",
                "facultad_id": 1,
                "grupo_id": 3,
                "semillero_id": None,
            }
        },
    )


class InvestigadorResponse(BaseModel):
    id: int
    nombre: str
    documento: str
    email: EmailStr | None = None
    grupo_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class PresupuestoInicialProyectoResponse(BaseModel):
    id: int
    proyecto_id: int
    rubro_id: int | None = None
    valor_inicial: float

    model_config = ConfigDict(from_attributes=True)
