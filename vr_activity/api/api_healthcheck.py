from typing import Any

from fastapi import APIRouter

from vr_activity.schemas.sche_base import DataResponse

router = APIRouter()


@router.get("", response_model=DataResponse[dict])
async def get() -> Any:
    return DataResponse().success_response(data={"status": "healthy"})
