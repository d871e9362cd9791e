"""
Import (Importacion) router.

Mounts under ``/api/importacion`` (prefix set in ``main.py``).

Upload endpoints require the ADMIN or PRESUPUESTO role (enforced via
``require_role``).

Endpoints
---------
POST /presupuestos - Upload a CSV of budget entries (all-or-nothing).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.importacion import ImportacionCsvResponse
from app.services import importacion_service
from app.services.auth_service import require_role
from app.utils.constants import ROLES_ESCRITURA

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Importación"])

_ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "text/csv",
        "application/csv",
        "application/vnd.ms-excel",  # what Windows browsers send for .csv
        "text/plain",
        "application/octet-stream",
    }
)


def _validate_csv_file(file: UploadFile) -> None:
    """Log a warning when the upload does not look like a CSV file.

    Browsers label CSV files inconsistently, so the real check is the parse
    done by the import service.
    """
    content_type = file.content_type or ""
    if content_type not in _ALLOWED_CONTENT_TYPES:
        logger.warning(
            "Unexpected content_type='%s' for file='%s', proceeding anyway",
            content_type,
            file.filename,
        )


@router.post(
    "/presupuestos",
    response_model=ImportacionCsvResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Importar presupuestos desde CSV",
    description=(
        "Carga un CSV (codificación Latin-1) cuya primera columna es el nombre del "
        "rubro y la segunda el número de proyecto, seguido de las columnas "
        "valor_inicial, disponibilidad, descripcion, egreso y reserva. Si alguna fila "
        "falla no se guarda ninguna. Requiere rol ADMIN o PRESUPUESTO."
    ),
    responses={
        201: {"description": "Todas las filas fueron importadas."},
        401: {"description": "Token JWT ausente o inválido."},
        403: {"description": "Rol insuficiente."},
        404: {"description": "Rubro o proyecto no encontrado."},
        422: {"description": "Archivo ilegible o valores inválidos."},
        500: {"description": "Error de base de datos; no se importó nada."},
    },
)
async def upload_presupuestos_csv(
    file: Annotated[UploadFile, File(description="Archivo CSV de presupuestos")],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_ESCRITURA))],
) -> ImportacionCsvResponse:
    """Import every row of the uploaded CSV in one transaction.

    Raises:
        HTTPException 404: A rubro or project named in the file does not exist.
        HTTPException 422: The file is empty, unreadable, or holds invalid amounts.
        HTTPException 500: The database rejected the insert.
    """
    _validate_csv_file(file)
    filename = file.filename or "upload.csv"
    logger.info("upload_presupuestos_csv: user='%s' file='%s'", current_user.username, filename)

    raw: bytes = await file.read()
    try:
        creados = importacion_service.importar_csv(db, raw, filename)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc

    return ImportacionCsvResponse(
        archivo=filename,
        registros_creados=creados,
        mensaje=f"Se importaron {creados} presupuestos.",
    )
