"""
Pydantic v2 schemas for the CSV import (Importacion) module.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ImportacionCsvResponse(BaseModel):
    """Summary returned after a CSV file of budget entries was imported.

    The import is all-or-nothing, so a response always means every row of
    the file was persisted.
    """

    archivo: str = Field(..., description="Nombre del archivo recibido.")
    registros_creados: int = Field(..., ge=0)
    mensaje: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "archivo": "presupuestos_2024.csv",
                "registros_creados": 128,
                "mensaje": "Se importaron 128 presupuestos.",
            }
        }
    )
