# schoolhub/services/notification_service.py
from typing import List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from .base_service import BaseService
from ..core.exceptions import NotFoundError
from ..models.notification import Notification, NotificationType
from ..models.user import Role, User

logger = logging.getLogger(__name__)

INBOX_LIMIT = 50


class NotificationService(BaseService[Notification]):
    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def list_for_user(self, user_id: UUID, unread_only: bool = False) -> Tuple[List[Notification], int]:
        """Newest notifications for a user plus the unread count"""
        stmt = select(self.model).where(self.model.user_id == user_id)
        if unread_only:
            stmt = stmt.where(self.model.read.is_(False))
        stmt = stmt.order_by(self.model.created_at.desc()).limit(INBOX_LIMIT)

        result = await self.db.execute(stmt)
        notifications = result.scalars().all()
        unread_count = await self.count(self.model.user_id == user_id, self.model.read.is_(False))
        return notifications, unread_count

    async def get_for_user(self, notification_id: UUID, user_id: UUID) -> Notification:
        stmt = select(self.model).where(
            self.model.id == notification_id,
            self.model.user_id == user_id
        )
        result = await self.db.execute(stmt)
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification")
        return notification

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self.get_for_user(notification_id, user_id)
        notification.read = True
        await self.commit()
        await self.db.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: UUID) -> None:
        stmt = (
            update(self.model)
            .where(self.model.user_id == user_id, self.model.read.is_(False))
            .values(read=True)
        )
        await self.db.execute(stmt)
        await self.commit()

    async def delete_for_user(self, notification_id: UUID, user_id: UUID) -> None:
        notification = await self.get_for_user(notification_id, user_id)
        await self.db.delete(notification)
        await self.commit()

    async def create_notification(
        self,
        user_id: UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.GENERAL,
        commit: bool = True
    ) -> Notification:
        return await self.create(
            {"user_id": user_id, "title": title, "message": message, "type": type},
            commit=commit
        )

    async def notify_admins(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.GENERAL
    ) -> int:
        """Create one notification per admin; returns how many were sent"""
        result = await self.db.execute(select(User.id).where(User.role == Role.ADMIN))
        admin_ids = result.scalars().all()
        for admin_id in admin_ids:
            self.db.add(Notification(user_id=admin_id, title=title, message=message, type=type))
        await self.commit()
        return len(admin_ids)

    async def send_after_commit(self, *notifications: Tuple[UUID, str, str, NotificationType],
                                admins: Optional[Tuple[str, str, NotificationType]] = None) -> None:
        """Best-effort notifications for a write that has already committed"""
        try:
            for user_id, title, message, type in notifications:
                self.db.add(Notification(user_id=user_id, title=title, message=message, type=type))
            await self.commit()
            if admins is not None:
                await self.notify_admins(*admins)
        except Exception as e:
            logger.error(f"Error creating notifications: {e}")
            await self.db.rollback()
