"""User model definitions."""

from sqlalchemy import Column, String
from zhijiao.database import Base


class User(Base):
    """Represents a registered account. Emails are not unique."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, index=True)
    password = Column(String)
    role = Column(String)  # user/admin
