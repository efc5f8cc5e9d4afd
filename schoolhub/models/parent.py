# schoolhub/models/parent.py
from sqlalchemy import Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base

class Parent(Base):
    __tablename__ = "parents"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", back_populates="parent")
    children = relationship("Student", back_populates="parent")
