"""
Activity API Module.

REST endpoints for session lifecycle and single ticks, plus a WebSocket
stream for headsets that push samples every frame.

WebSocket protocol (JSON messages):
    client -> {"type": "tick", "delta_time": ..., "samples": [...], "calibrate": false}
    client -> {"type": "calibrate"}
    client -> {"type": "end_session"}
    server -> {"type": "tick_result", "data": TickResponse}
    server -> {"type": "calibration_requested", "data": SessionSummaryResponse}
    server -> {"type": "session_ended", "data": SessionResultsResponse}
    server -> {"type": "error", "code": ..., "message": ...}
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from vr_activity.helpers.exception_handler import CustomException
from vr_activity.schemas.sche_base import DataResponse
from vr_activity.schemas.sche_activity import (
    StartSessionRequest, StartSessionResponse, TickRequest, TickResponse,
    SessionSummaryResponse, SessionResultsResponse, ActivityHealthResponse,
)
from vr_activity.services.srv_activity import ActivitySessionService, get_activity_service

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== REST ENDPOINTS ====================

@router.get('/health', response_model=DataResponse[ActivityHealthResponse])
def get_health(service: ActivitySessionService = Depends(get_activity_service)) -> Any:
    return DataResponse().success_response(data=service.get_health())


@router.post('/sessions', response_model=DataResponse[StartSessionResponse])
def start_session(
    request: StartSessionRequest,
    service: ActivitySessionService = Depends(get_activity_service)
) -> Any:
    """Start a tracking session; scoring begins after the settle interval."""
    return DataResponse().success_response(data=service.start_session(request))


@router.get('/sessions/{session_id}', response_model=DataResponse[SessionSummaryResponse])
def get_session_summary(
    session_id: str,
    service: ActivitySessionService = Depends(get_activity_service)
) -> Any:
    return DataResponse().success_response(data=service.get_summary(session_id))


@router.post('/sessions/{session_id}/ticks', response_model=DataResponse[TickResponse])
def process_tick(
    session_id: str,
    request: TickRequest,
    service: ActivitySessionService = Depends(get_activity_service)
) -> Any:
    return DataResponse().success_response(data=service.process_tick(session_id, request))


@router.post('/sessions/{session_id}/calibrate', response_model=DataResponse[SessionSummaryResponse])
def request_calibration(
    session_id: str,
    service: ActivitySessionService = Depends(get_activity_service)
) -> Any:
    """Capture the standing height on the next active tick."""
    return DataResponse().success_response(data=service.request_calibration(session_id))


@router.delete('/sessions/{session_id}', response_model=DataResponse[SessionResultsResponse])
def end_session(
    session_id: str,
    service: ActivitySessionService = Depends(get_activity_service)
) -> Any:
    return DataResponse().success_response(data=service.end_session(session_id))


# ==================== WEBSOCKET ====================

async def _send(websocket: WebSocket, message_type: str, data: Any) -> None:
    await websocket.send_json({"type": message_type, "data": jsonable_encoder(data)})


async def _send_error(websocket: WebSocket, code: str, message: str) -> None:
    await websocket.send_json({"type": "error", "code": code, "message": message})


@router.websocket('/sessions/{session_id}/ws')
async def activity_stream_websocket(
    websocket: WebSocket,
    session_id: str,
    service: ActivitySessionService = Depends(get_activity_service)
):
    """
    Real-time tick stream for one session.

    Invalid messages are answered with an error and the stream continues.
    The connection is closed when the session is unknown or has ended.
    """
    await websocket.accept()

    try:
        service.get_session(session_id)
    except CustomException as e:
        await _send_error(websocket, e.code, e.message)
        await websocket.close(code=1008)
        return

    logger.info(f"WebSocket connected for session {session_id}")

    try:
        while True:
            data = await websocket.receive_json()
            message_type = data.pop("type", "tick") if isinstance(data, dict) else None

            try:
                if message_type == "tick":
                    tick = TickRequest.model_validate(data)
                    await _send(websocket, "tick_result", service.process_tick(session_id, tick))
                elif message_type == "calibrate":
                    await _send(websocket, "calibration_requested", service.request_calibration(session_id))
                elif message_type == "end_session":
                    await _send(websocket, "session_ended", service.end_session(session_id))
                    await websocket.close()
                    break
                else:
                    await _send_error(websocket, '400', f"Unknown message type: {message_type}")
            except ValidationError as e:
                await _send_error(websocket, '422', str(e))
            except ValueError as e:
                await _send_error(websocket, '400', str(e))
            except CustomException as e:
                await _send_error(websocket, e.code, e.message)
                if e.http_code == 404:
                    await websocket.close(code=1008)
                    break

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for session {session_id}")
