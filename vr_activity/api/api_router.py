from fastapi import APIRouter

from vr_activity.api import api_healthcheck, api_activity

router = APIRouter()

router.include_router(api_healthcheck.router, tags=["health-check"], prefix="/healthcheck")
router.include_router(api_activity.router, tags=["activity"], prefix="/activity")
