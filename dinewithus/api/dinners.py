from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from dinewithus.core.security import get_bearer_token
from dinewithus.models.dinner import Dinner, HostDinnerView
from dinewithus.services.dinner_service import DinnerService

router = APIRouter()
dinner_service = DinnerService()


def get_dinner_service() -> DinnerService:
    return dinner_service


@router.get("/dinners", response_model=List[Dinner])
async def list_dinners(
    limit: int = Query(20, ge=1, le=100),
    page: int = Query(1, ge=1),
    now: Optional[datetime] = None,
    service: DinnerService = Depends(get_dinner_service),
):
    """Home page and search listings: only dinners that can still be booked."""
    return await service.list_dinners(now, limit, page)


@router.get("/dinners/host/{host_id}", response_model=List[HostDinnerView])
async def list_host_dinners(
    host_id: str,
    now: Optional[datetime] = None,
    token: str = Depends(get_bearer_token),
    service: DinnerService = Depends(get_dinner_service),
):
    return await service.list_host_dinners(host_id, token, now)
