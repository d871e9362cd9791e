"""Grupo model: research group registered under a faculty."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Grupo(Base):
    """Research group; deleting its faculty deletes the group.

    Attributes:
        id: Primary key.
        nombre: Group name.
        facultad_id: Foreign key to Facultad.
    """

    __tablename__ = "grupos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(200), nullable=False)
    facultad_id = Column(
        Integer,
        ForeignKey("facultades.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    facultad = relationship("Facultad", back_populates="grupos", lazy="select")
    semilleros = relationship("Semillero", back_populates="grupo", lazy="select")
    investigadores = relationship("Investigador", back_populates="grupo", lazy="select")
    proyectos = relationship("Proyecto", back_populates="grupo", lazy="select")
