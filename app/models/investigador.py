"""Investigador model: researcher affiliated with a group."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Investigador(Base):
    __tablename__ = "investigadores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(300), nullable=False)
    documento = Column(String(30), unique=True, nullable=False)
    email = Column(String(200), nullable=True)
    grupo_id = Column(Integer, ForeignKey("grupos.id"), nullable=True, index=True)

    # Relationships
    grupo = relationship("Grupo", back_populates="investigadores", lazy="select")
