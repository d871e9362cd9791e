"""PresupuestoInicialProyecto model: initial allocation granted to a project."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from app.database import Base


class PresupuestoInicialProyecto(Base):
    """Initial budget allocation, aggregated independently of the entries.

    Attributes:
        id: Primary key.
        proyecto_id: Foreign key to Proyecto.
        rubro_id: Optional foreign key to Rubro (allocation per line item).
        valor_inicial: Allocated amount.
    """

    __tablename__ = "presupuesto_inicial_proyectos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    proyecto_id = Column(Integer, ForeignKey("proyectos.id"), nullable=False, index=True)
    rubro_id = Column(Integer, ForeignKey("rubros.id"), nullable=True, index=True)
    valor_inicial = Column(Numeric(15, 2), default=0, nullable=False)

    # Relationships
    proyecto = relationship(
        "Proyecto", back_populates="presupuestos_iniciales", lazy="select"
    )
    rubro = relationship("Rubro", back_populates="presupuestos_iniciales", lazy="select")
