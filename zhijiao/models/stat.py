"""Stat model definitions."""

from sqlalchemy import Column, Integer, String
from zhijiao.database import Base


class Stat(Base):
    """Key/value counter row."""
    __tablename__ = "stats"

    key = Column(String, primary_key=True)
    value = Column(Integer, default=0)
