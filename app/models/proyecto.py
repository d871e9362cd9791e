"""Proyecto model: research project, the unit budgets are tracked against."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Proyecto(Base):
    """Research project owned by a faculty and optionally a group/seedbed.

    Attributes:
        id: Primary key.
        numero_proyecto: Institutional project number; natural key used by
            the CSV import.
        nombre: Project title.
        fecha_inicio: Start date; its year drives the ``por_anio`` report.
        fecha_fin: Planned end date.
        facultad_id: Foreign key to Facultad.
        grupo_id: Optional foreign key to Grupo.
        semillero_id: Optional foreign key to Semillero.
    """

    __tablename__ = "proyectos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    numero_proyecto = Column(String(50), unique=True, nullable=False)
    nombre = Column(String(500), nullable=True)
    fecha_inicio = Column(Date, nullable=True)
    fecha_fin = Column(Date, nullable=True)
    facultad_id = Column(Integer, ForeignKey("facultades.id"), nullable=False, index=True)
    grupo_id = Column(Integer, ForeignKey("grupos.id"), nullable=True, index=True)
    semillero_id = Column(Integer, ForeignKey("semilleros.id"), nullable=True, index=True)

    # Relationships
    facultad = relationship("Facultad", back_populates="proyectos", lazy="select")
    grupo = relationship("Grupo", back_populates="proyectos", lazy="select")
    semillero = relationship("Semillero", back_populates="proyectos", lazy="select")
    presupuestos = relationship(
        "Presupuesto",
        back_populates="proyecto",
        lazy="select",
        cascade="all, delete-orphan",
    )
    presupuestos_iniciales = relationship(
        "PresupuestoInicialProyecto",
        back_populates="proyecto",
        lazy="select",
        cascade="all, delete-orphan",
    )
