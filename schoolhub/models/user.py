# schoolhub/models/user.py
import enum

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship
from .base import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    PARENT = "PARENT"


class User(Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), index=True, nullable=False)
    avatar = Column(String(500), nullable=True)
    role = Column(Enum(Role, name="user_role"), default=Role.STUDENT, nullable=False, index=True)

    # At most one of these is set, selected by role
    student = relationship("Student", back_populates="user", uselist=False)
    teacher = relationship("Teacher", back_populates="user", uselist=False)
    parent = relationship("Parent", back_populates="user", uselist=False)
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
