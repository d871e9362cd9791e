"""
Application-wide constants for the research budget system.

Defines role codes, the budget fields accepted by the CSV import and the
column labels used when reports are rendered for people (exports).
"""

from typing import Final

# ---------------------------------------------------------------------------
# User roles
# ---------------------------------------------------------------------------

ROLES: Final[list[str]] = [
    "ADMIN",
    "PRESUPUESTO",
    "CONSULTA",
]

# Roles allowed to create, modify or import budget entries
ROLES_ESCRITURA: Final[tuple[str, ...]] = ("ADMIN", "PRESUPUESTO")

# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------

# Budget fields read from the CSV by header name (columns 0 and 1 are the
# rubro name and the project number, read by position)
CAMPOS_CSV_PRESUPUESTO: Final[tuple[str, ...]] = (
    "valor_inicial",
    "disponibilidad",
    "descripcion",
    "egreso",
    "reserva",
)

# ---------------------------------------------------------------------------
# Report column labels (Excel export headers)
# ---------------------------------------------------------------------------

ETIQUETAS_COLUMNAS: Final[dict[str, str]] = {
    "id": "ID",
    "nombre_facultad": "Facultad",
    "nombre_grupo": "Grupo",
    "nombre_semillero": "Semillero",
    "anio_inicio": "Año de inicio",
    "nombre_rubro": "Rubro",
    "numero_proyecto": "N° Proyecto",
    "nombre_proyecto": "Proyecto",
    "disponibilidad_total": "Disponibilidad",
    "egreso_total": "Egreso",
    "reserva_total": "Reserva",
    "presupuesto_inicial": "Valor inicial",
    "presupuesto_inicial_proyectos": "Presupuesto inicial proyectos",
}

TITULOS_REPORTE: Final[dict[str, str]] = {
    "por_facultad": "Presupuesto por facultad",
    "por_grupo": "Presupuesto por grupo",
    "por_semillero": "Presupuesto por semillero",
    "por_anio": "Presupuesto por año de inicio",
    "por_rubro": "Presupuesto por rubro",
    "por_proyecto": "Presupuesto por proyecto",
}
