# schoolhub/routers/exams.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import require_class_membership
from ..core.database import get_db
from ..services.class_service import ClassService

router = APIRouter(prefix="/api/exams", tags=["Exams"])


@router.get("/class/{class_id}", dependencies=[Depends(require_class_membership("class_id"))])
async def get_class_exams(class_id: UUID, db: AsyncSession = Depends(get_db)):
    """Exams of a class in date order"""
    service = ClassService(db)
    return {"exams": await service.class_exams(class_id)}
