# schoolhub/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..core.auth_dependencies import get_current_caller
from ..core.caller import Caller
from ..core.database import get_session_factory
from ..services.dashboard_reader import DashboardReader
from ..services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


def get_dashboard_service(
    session_factory: async_sessionmaker = Depends(get_session_factory)
) -> DashboardService:
    return DashboardService(DashboardReader(session_factory))


@router.get("")
async def get_dashboard(
    caller: Caller = Depends(get_current_caller),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Role-specific dashboard for the authenticated caller"""
    return await service.dispatch(caller)
