"""SQLAlchemy models package.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from app.models import Presupuesto, Proyecto
"""

# Organisational hierarchy (report dimensions)
from app.models.facultad import Facultad  # noqa: F401
from app.models.grupo import Grupo  # noqa: F401
from app.models.semillero import Semillero  # noqa: F401
from app.models.investigador import Investigador  # noqa: F401

# Projects and line items
from app.models.rubro import Rubro  # noqa: F401
from app.models.proyecto import Proyecto  # noqa: F401

# Budget records
from app.models.presupuesto import Presupuesto  # noqa: F401
from app.models.presupuesto_inicial_proyecto import PresupuestoInicialProyecto  # noqa: F401

# Cross-cutting concerns
from app.models.usuario import Usuario  # noqa: F401

__all__ = [
    "Facultad",
    "Grupo",
    "Semillero",
    "Investigador",
    "Rubro",
    "Proyecto",
    "Presupuesto",
    "PresupuestoInicialProyecto",
    "Usuario",
]
