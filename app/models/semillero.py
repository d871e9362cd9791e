"""Semillero model: student research seedbed program."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Semillero(Base):
    __tablename__ = "semilleros"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(200), nullable=False)
    grupo_id = Column(Integer, ForeignKey("grupos.id"), nullable=True, index=True)

    # Relationships
    grupo = relationship("Grupo", back_populates="semilleros", lazy="select")
    proyectos = relationship("Proyecto", back_populates="semillero", lazy="select")
