"""
Activity Session Service - Business Logic Layer.

Keeps one ActivityMonitor per session in memory and forwards ticks to it
(NO tracking logic in this layer).
"""

import logging
import time
import uuid
from typing import Dict, Optional

from vr_activity.core.config import settings, validate_activity_config
from vr_activity.helpers.enums import SessionStatus
from vr_activity.helpers.exception_handler import CustomException
from vr_activity.schemas.sche_activity import (
    StartSessionRequest, StartSessionResponse, TickRequest, TickResponse,
    SessionSummaryResponse, SessionResultsResponse, ActivityHealthResponse,
)
from vr_activity.tracking import ActivityConfig, ActivityMonitor
from vr_activity.tracking.utils import LogCategory, SessionLogger, create_session_logger


# ==================== CONSTANTS ====================

SERVICE_VERSION = "1.0.0"


# ==================== SESSION CLASS ====================

class ActivitySession:
    """Represents a single activity tracking session."""

    def __init__(
        self,
        session_id: str,
        monitor: ActivityMonitor,
        session_logger: SessionLogger,
        user_id: Optional[str] = None
    ):
        self.session_id = session_id
        self.monitor = monitor
        self.session_logger = session_logger
        self.user_id = user_id
        self.created_at = time.time()
        self.last_activity = time.time()
        self.status = SessionStatus.ACTIVE
        self.tick_count = 0
        self.teleport_count = 0

    def update_activity(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = time.time()

    def is_expired(self, timeout: int) -> bool:
        """Check if session has expired."""
        return time.time() - self.last_activity > timeout


# ==================== SERVICE CLASS ====================

class ActivitySessionService:
    """
    Service for activity tracking sessions.

    Manages sessions in memory, calls ActivityMonitor for processing.
    """

    def __init__(
        self,
        base_config: Optional[ActivityConfig] = None,
        session_timeout: Optional[int] = None,
        log_dir: Optional[str] = None,
        save_session_logs: Optional[bool] = None
    ):
        self.logger = logging.getLogger(__name__)
        self._base_config = base_config or settings.activity_config()
        self._session_timeout = session_timeout or settings.ACTIVITY_SESSION_TIMEOUT
        self._log_dir = log_dir or settings.ACTIVITY_LOG_DIR
        self._save_session_logs = (
            settings.ACTIVITY_SAVE_SESSION_LOGS if save_session_logs is None else save_session_logs
        )
        self._sessions: Dict[str, ActivitySession] = {}
        self.logger.info("ActivitySessionService initialized")

    # ==================== SESSION MANAGEMENT ====================

    def start_session(self, request: StartSessionRequest) -> StartSessionResponse:
        """
        Start a new activity session.

        Returns session_id and websocket_url for real-time streaming.
        """
        self.logger.info(f"start_session: user_id={request.user_id}")

        self._cleanup_expired_sessions()

        config = self._base_config
        if request.config is not None:
            try:
                config = validate_activity_config(request.config.apply(config))
            except ValueError as e:
                raise CustomException(http_code=400, code='400', message=f"Invalid config: {str(e)}")

        session_id = f"activity_{uuid.uuid4().hex[:12]}"
        monitor = ActivityMonitor.create_instance(config=config, instance_id=session_id)
        session_logger = create_session_logger(session_id, self._log_dir)
        session_logger.info(LogCategory.SYSTEM, "Session started", {'config': config.to_dict()})
        session = ActivitySession(
            session_id=session_id,
            monitor=monitor,
            session_logger=session_logger,
            user_id=request.user_id
        )
        self._sessions[session_id] = session

        self.logger.info(f"start_session success: session_id={session_id}")

        return StartSessionResponse(
            session_id=session_id,
            status=session.status,
            websocket_url=f"{settings.API_PREFIX}/activity/sessions/{session_id}/ws",
            activation_delay_seconds=config.activation_delay_seconds,
            message="Session started. Hold still while the trackers settle."
        )

    def get_session(self, session_id: str) -> ActivitySession:
        """Get session by ID, validate not expired."""
        session = self._sessions.get(session_id)

        if not session:
            raise CustomException(http_code=404, code='404', message=f"Session not found: {session_id}")

        if session.is_expired(self._session_timeout):
            session.status = SessionStatus.EXPIRED
            self._remove_session(session_id)
            raise CustomException(http_code=404, code='404', message=f"Session expired: {session_id}")

        session.update_activity()
        return session

    # ==================== TICK PROCESSING ====================

    def process_tick(self, session_id: str, request: TickRequest) -> TickResponse:
        """
        Process one tick of pose samples.

        Called by the REST endpoint and the WebSocket stream.
        """
        session = self.get_session(session_id)

        result = session.monitor.tick(request.to_frame())
        session.tick_count += 1
        session.teleport_count += len(result.teleports)
        session.session_logger.log_tick_result(result)

        return TickResponse(session_id=session_id, **result.to_dict())

    def request_calibration(self, session_id: str) -> SessionSummaryResponse:
        """Latch a calibration trigger for the next tick."""
        session = self.get_session(session_id)
        session.monitor.request_calibration()
        self.logger.info(f"request_calibration: session_id={session_id}")
        return self._summary(session)

    def get_summary(self, session_id: str) -> SessionSummaryResponse:
        return self._summary(self.get_session(session_id))

    # ==================== SESSION END ====================

    def end_session(self, session_id: str) -> SessionResultsResponse:
        """End session and return final results."""
        self.logger.info(f"end_session: session_id={session_id}")

        session = self.get_session(session_id)
        snapshot = session.monitor.snapshot()
        session.status = SessionStatus.ENDED

        session.session_logger.log_final_score({
            'score': snapshot['score'],
            'counts': snapshot['counts'],
            'distances': snapshot['distances'],
            'ticks': session.tick_count,
        })

        log_file = None
        if self._save_session_logs:
            try:
                log_file = str(session.session_logger.save_session_log())
            except OSError as e:
                self.logger.warning(f"end_session: Failed to save session log: {e}")

        self._remove_session(session_id)

        duration = int(time.time() - session.created_at)
        self.logger.info(f"end_session success: session_id={session_id}, duration={duration}s")

        return SessionResultsResponse(
            session_id=session_id,
            duration_seconds=duration,
            session_clock=snapshot['clock'],
            tick_count=session.tick_count,
            teleport_count=session.teleport_count,
            total_score=snapshot['score']['total'],
            score=snapshot['score'],
            counts=snapshot['counts'],
            distances=snapshot['distances'],
            log_file=log_file
        )

    # ==================== HEALTH CHECK ====================

    def get_health(self) -> ActivityHealthResponse:
        """Get service health status."""
        return ActivityHealthResponse(
            status="healthy",
            active_sessions=len(self._sessions),
            version=SERVICE_VERSION
        )

    # ==================== INTERNAL METHODS ====================

    def _summary(self, session: ActivitySession) -> SessionSummaryResponse:
        snapshot = session.monitor.snapshot()
        return SessionSummaryResponse(
            session_id=session.session_id,
            status=session.status,
            user_id=session.user_id,
            tick_count=session.tick_count,
            is_active=snapshot['is_active'],
            clock=snapshot['clock'],
            standing_height=snapshot['standing_height'],
            calibration_pending=snapshot['calibration_pending'],
            distances=snapshot['distances'],
            score=snapshot['score'],
            counts=snapshot['counts'],
            is_jumping=snapshot['is_jumping'],
            progress=snapshot['progress']
        )

    def _remove_session(self, session_id: str) -> None:
        """Remove session from memory."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            self.logger.debug(f"_remove_session: Removed {session_id}")

    def _cleanup_expired_sessions(self) -> int:
        """Cleanup expired sessions. Returns count of removed sessions."""
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(self._session_timeout)]

        for sid in expired:
            self._remove_session(sid)

        if expired:
            self.logger.info(f"_cleanup_expired_sessions: Removed {len(expired)} sessions")

        return len(expired)


# ==================== SINGLETON INSTANCE ====================

activity_session_service = ActivitySessionService()


def get_activity_service() -> ActivitySessionService:
    return activity_session_service
