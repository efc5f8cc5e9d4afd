# schoolhub/routers/classes.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import require_class_membership
from ..core.database import get_db
from ..services.class_service import ClassService

router = APIRouter(prefix="/api/classes", tags=["Classes"])


@router.get("/{class_id}", dependencies=[Depends(require_class_membership("class_id"))])
async def get_class(class_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    return {"class": await service.get_class(class_id)}


@router.get("/{class_id}/students", dependencies=[Depends(require_class_membership("class_id"))])
async def get_class_students(class_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    return {"students": await service.class_students(class_id)}


@router.get("/{class_id}/subjects", dependencies=[Depends(require_class_membership("class_id"))])
async def get_class_subjects(class_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClassService(db)
    return {"subjects": await service.class_subjects(class_id)}
