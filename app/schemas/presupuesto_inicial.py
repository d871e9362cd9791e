"""
Pydantic v2 write schemas for initial project allocations
(PresupuestoInicialProyecto).

The response model lives in ``app.schemas.datos_maestros`` next to the other
catalogue responses.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.presupuesto import Monto


class PresupuestoInicialCreate(BaseModel):
    """Payload for ``POST /api/presupuestos-iniciales``.

    Attributes:
        proyecto_id: Existing Proyecto primary key.
        rubro_id: Optional Rubro; ``None`` for an allocation to the whole project.
        valor_inicial: Allocated amount, rounded to cents.
    """

    proyecto_id: int = Field(..., ge=1)
    rubro_id: int | None = Field(default=None, ge=1)
    valor_inicial: Monto = Field(...)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"proyecto_id": 12, "rubro_id": 4, "valor_inicial": "25000000.00"}
        }
    )


class PresupuestoInicialUpdate(BaseModel):
    """Partial update. Sending ``rubro_id: null`` detaches the allocation from its rubro."""

    proyecto_id: int | None = Field(default=None, ge=1)
    rubro_id: int | None = Field(default=None, ge=1)
    valor_inicial: Monto | None = None
