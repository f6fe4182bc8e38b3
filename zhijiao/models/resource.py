"""Resource model definitions."""

from sqlalchemy import Column, Integer, String, Text
from zhijiao.database import Base


class Resource(Base):
    """Represents a catalog entry: article, teaching resource or tool."""
    __tablename__ = "resources"

    id = Column(String, primary_key=True)
    title = Column(String)
    description = Column(Text)
    type = Column(String)  # article/resource/tool
    author = Column(String)
    date = Column(String)
    tags = Column(Text)  # JSON list of strings
    link = Column(String)
    likes = Column(Integer, default=0)
    content = Column(Text)
    created_at = Column(Integer)  # unix seconds
