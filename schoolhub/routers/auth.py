# schoolhub/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import get_current_caller
from ..core.caller import Caller
from ..core.database import get_db
from ..schemas.auth_schemas import LoginRequest, ProfileUpdate, RegisterRequest
from ..services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a user and its role profile"""
    service = AuthService(db)
    result = await service.register(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        role=body.role,
        parent_email=body.parent_email,
    )
    return {"message": "User registered successfully", **result}


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    service = AuthService(db)
    result = await service.login(body.email, body.password)
    return {"message": "Login successful", **result}


@router.get("/profile")
async def get_profile(caller: Caller = Depends(get_current_caller), db: AsyncSession = Depends(get_db)):
    service = AuthService(db)
    return {"user": await service.get_profile(caller.user_id)}


@router.patch("/profile")
async def update_profile(
    body: ProfileUpdate,
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.update_profile(
        caller.user_id,
        full_name=body.full_name,
        avatar=body.avatar,
        avatar_set="avatar" in body.model_fields_set,
    )
    return {"message": "Profile updated successfully", "user": user}
