"""
Pydantic v2 schemas for budget entries (Presupuesto).

Write schemas carry amounts as ``Decimal`` so that non-numeric input is
rejected before it reaches the database; response schemas expose them as
``float`` for the frontend grid.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

_CENTAVO = Decimal("0.01")
_MONTO_MAXIMO = Decimal("10") ** 13


def _redondear_monto(valor: Decimal) -> Decimal:
    """Round an amount to cents, as stored by the ``Numeric(15, 2)`` columns."""
    redondeado = valor.quantize(_CENTAVO, rounding=ROUND_HALF_UP)
    if abs(redondeado) >= _MONTO_MAXIMO:
        raise ValueError("El monto excede 13 dígitos enteros.")
    return redondeado


# Any finite number is accepted; extra decimals are rounded half-up to cents
Monto = Annotated[Decimal, AfterValidator(_redondear_monto)]


class PresupuestoBase(BaseModel):
    """Amount breakdown shared by create and response schemas."""

    descripcion: str | None = Field(default=None, max_length=500)


class PresupuestoCreate(PresupuestoBase):
    """Payload for ``POST /api/presupuestos`` and each imported CSV row.

    Attributes:
        valor_inicial: Initial value of the entry (required).
        disponibilidad: Available amount; defaults to 0.
        egreso: Spent amount; defaults to 0.
        reserva: Reserved amount; defaults to 0.
        proyecto_id: Existing Proyecto primary key.
        rubro_id: Existing Rubro primary key.
    """

    valor_inicial: Monto = Field(...)
    disponibilidad: Monto = Field(default=Decimal("0"))
    egreso: Monto = Field(default=Decimal("0"))
    reserva: Monto = Field(default=Decimal("0"))
    proyecto_id: int = Field(..., ge=1)
    rubro_id: int = Field(..., ge=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "descripcion": "Compra de reactivos",
                "valor_inicial": "5000000.00",
                "disponibilidad": "3200000.00",
                "egreso": "1500000.00",
                "reserva": "300000.00",
                "proyecto_id": 12,
                "rubro_id": 4,
            }
        }
    )


class PresupuestoUpdate(PresupuestoBase):
    """Partial update; only the fields that are sent are modified."""

    valor_inicial: Monto | None = None
    disponibilidad: Monto | None = None
    egreso: Monto | None = None
    reserva: Monto | None = None
    proyecto_id: int | None = Field(default=None, ge=1)
    rubro_id: int | None = Field(default=None, ge=1)


class PresupuestoResponse(PresupuestoBase):
    """Public representation of a stored budget entry."""

    id: int
    valor_inicial: float
    disponibilidad: float
    egreso: float
    reserva: float
    proyecto_id: int
    rubro_id: int

    model_config = ConfigDict(from_attributes=True)


class PresupuestoListResponse(BaseModel):
    """Paginated wrapper returned by ``GET /api/presupuestos``."""

    rows: list[PresupuestoResponse]
    total: int = Field(..., ge=0, description="Total de registros sin paginar.")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
