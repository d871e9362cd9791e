"""Presupuesto model: one line-item budget record of a project."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


class Presupuesto(Base):
    """Budget entry tying an amount breakdown to a Proyecto and a Rubro.

    Both foreign keys are mandatory; the database rejects orphan entries and
    the CSV import resolves them before inserting.

    Attributes:
        id: Primary key.
        descripcion: Free-text description.
        disponibilidad: Available amount.
        egreso: Amount already spent.
        reserva: Amount reserved but not yet spent.
        valor_inicial: Initial value assigned to the entry.
        proyecto_id: Foreign key to Proyecto.
        rubro_id: Foreign key to Rubro.
    """

    __tablename__ = "presupuestos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    descripcion = Column(String(500), nullable=True)
    disponibilidad = Column(Numeric(15, 2), default=0, nullable=False)
    egreso = Column(Numeric(15, 2), default=0, nullable=False)
    reserva = Column(Numeric(15, 2), default=0, nullable=False)
    valor_inicial = Column(Numeric(15, 2), nullable=False)
    proyecto_id = Column(Integer, ForeignKey("proyectos.id"), nullable=False, index=True)
    rubro_id = Column(Integer, ForeignKey("rubros.id"), nullable=False, index=True)

    # Relationships
    proyecto = relationship("Proyecto", back_populates="presupuestos", lazy="select")
    rubro = relationship("Rubro", back_populates="presupuestos", lazy="select")
