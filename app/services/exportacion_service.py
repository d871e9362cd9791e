"""
Export service layer.

Reuses ``reporte_service.agrupar`` so that exported workbooks always match
the JSON report, then hands the rows to ``ExcelExporter``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.exporters.excel_exporter import ExcelExporter
from app.schemas.reporte import TipoReporte
from app.services import reporte_service
from app.utils.constants import ETIQUETAS_COLUMNAS, TITULOS_REPORTE

logger = logging.getLogger(__name__)

# Totals shown above the table, in display order
_COLUMNAS_TOTALES: tuple[str, ...] = (
    "disponibilidad_total",
    "egreso_total",
    "reserva_total",
    "presupuesto_inicial",
    "presupuesto_inicial_proyectos",
)


def _tabla(filas: list[dict[str, Any]]) -> tuple[list[str], list[list[Any]]]:
    """Split report rows into header labels and value rows, keeping key order."""
    if not filas:
        return [ETIQUETAS_COLUMNAS[c] for c in _COLUMNAS_TOTALES], []
    columnas = list(filas[0].keys())
    headers = [ETIQUETAS_COLUMNAS.get(c, c) for c in columnas]
    rows = [[fila.get(c) for c in columnas] for fila in filas]
    return headers, rows


def export_reporte_excel(db: Session, tipo: TipoReporte) -> bytes:
    """Render the grouped report for *tipo* as ``.xlsx`` bytes.

    Args:
        db: Active SQLAlchemy session.
        tipo: Grouping dimension of the report.

    Returns:
        Raw bytes of the workbook.
    """
    filas = reporte_service.agrupar(db, tipo)
    headers, rows = _tabla(filas)
    totales = {
        ETIQUETAS_COLUMNAS[c]: sum(fila.get(c) or 0 for fila in filas)
        for c in _COLUMNAS_TOTALES
    }
    numeric_cols = {
        i for i, c in enumerate(filas[0].keys() if filas else []) if c in _COLUMNAS_TOTALES
    }

    exporter = ExcelExporter(
        title=TITULOS_REPORTE[tipo.value],
        filters={"Reporte": tipo.value, "Grupos": str(len(filas))},
    )
    exporter.add_header()
    exporter.add_totals_row(totales)
    exporter.add_data_table(headers, rows, numeric_cols=numeric_cols)
    file_bytes = exporter.finalize()

    logger.info("export_reporte_excel: tipo=%s grupos=%d bytes=%d", tipo.value, len(filas), len(file_bytes))
    return file_bytes
