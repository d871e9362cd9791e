"""Rubro model: budget line item (category of spending)."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Rubro(Base):
    """Budget category a Presupuesto belongs to, e.g. "Equipos" or "Viajes".

    CSV imports resolve rubros by case-insensitive ``nombre``.

    Attributes:
        id: Primary key.
        nombre: Unique line-item name.
    """

    __tablename__ = "rubros"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(200), unique=True, nullable=False)

    # Relationships
    presupuestos = relationship("Presupuesto", back_populates="rubro", lazy="select")
    presupuestos_iniciales = relationship(
        "PresupuestoInicialProyecto", back_populates="rubro", lazy="select"
    )
