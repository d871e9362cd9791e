"""
Exportación router.

Mounts under ``/api/exportar`` (prefix set in ``main.py``).

All endpoints require a valid JWT token.  The workbook is generated in
memory and streamed with FastAPI's ``StreamingResponse``.

Endpoints
---------
GET /excel  - Grouped report as .xlsx (query param: tipo)

The ``Content-Disposition`` header uses the ``attachment; filename=...``
pattern so that browsers prompt a download rather than displaying the file
inline.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.reporte import TipoReporte
from app.services import exportacion_service
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exportación"])

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _make_filename(tipo: TipoReporte, ext: str) -> str:
    """Build a timestamped filename for the exported file.

    Args:
        tipo: Report type, used as the filename base.
        ext: File extension without dot, e.g. ``"xlsx"``.

    Returns:
        Filename string, e.g. ``"presupuesto_por_facultad_2026-02-17.xlsx"``.
    """
    return f"presupuesto_{tipo.value}_{date.today().isoformat()}.{ext}"


# ---------------------------------------------------------------------------
# GET /excel
# ---------------------------------------------------------------------------


@router.get(
    "/excel",
    summary="Exportar reporte agrupado a Excel (.xlsx)",
    description=(
        "Genera y descarga un archivo Excel con los totales agrupados del tipo de "
        "reporte indicado. Incluye cabecera, fila de totales y tabla formateada. "
        "Requiere autenticación."
    ),
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Archivo Excel generado exitosamente.",
            "content": {_XLSX_MEDIA_TYPE: {}},
        },
        401: {"description": "Token JWT ausente o inválido."},
        422: {"description": "Tipo de reporte no válido."},
        500: {"description": "Error consultando la base de datos."},
    },
)
def export_excel(
    tipo: Annotated[
        str,
        Query(
            description=(
                "Tipo de reporte: por_facultad, por_grupo, por_semillero, "
                "por_anio, por_rubro, por_proyecto."
            ),
            max_length=50,
        ),
    ],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> StreamingResponse:
    """Generate and stream an Excel file for a grouped budget report.

    Args:
        tipo: Report type (case-insensitive, English aliases accepted).
        db: Database session.
        _current_user: Authenticated user guard.

    Returns:
        A ``StreamingResponse`` with the ``.xlsx`` file attached.

    Raises:
        HTTPException 422: If the report type is invalid.
        HTTPException 500: If the report query fails.
    """
    try:
        tipo_reporte = TipoReporte.parse(tipo)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    logger.info("GET /exportar/excel tipo=%s", tipo_reporte.value)

    try:
        file_bytes = exportacion_service.export_reporte_excel(db, tipo_reporte)
    except SQLAlchemyError as exc:
        logger.exception("export_excel failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error generando el archivo Excel.",
        ) from exc

    filename = _make_filename(tipo_reporte, "xlsx")
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Content-Length": str(len(file_bytes)),
    }

    return StreamingResponse(
        io.BytesIO(file_bytes),
        media_type=_XLSX_MEDIA_TYPE,
        headers=headers,
    )
