"""Facultad model: academic faculty that owns research groups and projects."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Facultad(Base):
    """Faculty of the institution, the top level of the report hierarchy.

    Attributes:
        id: Primary key.
        nombre: Faculty name, e.g. "Ingeniería".
    """

    __tablename__ = "facultades"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(200), unique=True, nullable=False)

    # Relationships
    grupos = relationship("Grupo", back_populates="facultad", lazy="select")
    proyectos = relationship("Proyecto", back_populates="facultad", lazy="select")
