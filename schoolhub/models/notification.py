# schoolhub/models/notification.py
from sqlalchemy import Column, String, Text, Boolean, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base
import enum


class NotificationType(str, enum.Enum):
    GENERAL = "GENERAL"
    PARENT_ASSIGNED = "PARENT_ASSIGNED"
    CLASS_ASSIGNED = "CLASS_ASSIGNED"
    ENROLLMENT = "ENROLLMENT"
    ATTENDANCE = "ATTENDANCE"
    GRADE = "GRADE"


class Notification(Base):
    __tablename__ = "notifications"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(NotificationType, name="notification_type"), default=NotificationType.GENERAL, nullable=False)
    read = Column(Boolean, default=False, nullable=False, index=True)

    user = relationship("User", back_populates="notifications")
