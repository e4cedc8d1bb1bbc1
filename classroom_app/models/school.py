# classroom_app/models/school.py
"""School (tenant) and login identity models."""
from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import validates

from .base import Base


class School(Base):
    __tablename__ = "schools"

    name = Column(String(200), nullable=False, index=True)
    email = Column(String(254), nullable=True)
    address = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class User(Base):
    __tablename__ = "users"

    email = Column(String(254), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # principal | teacher | student

    @validates('email')
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value
