"""
Logger Module for the VR activity tracker.

Session logging: keeps a structured, in-memory record of what happened
during a session (activation, calibrations, teleports, gestures, final
score) and can dump it to a JSON file when the session ends.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum
import json
import time
from pathlib import Path

from ..core.monitor import TickResult


class LogLevel(Enum):
    """Log levels."""
    INFO = "info"
    WARNING = "warning"


class LogCategory(Enum):
    """Log categories."""
    TRACKING = "tracking"
    GESTURE = "gesture"
    CALIBRATION = "calibration"
    SCORE = "score"
    SYSTEM = "system"


@dataclass
class LogEntry:
    """Log entry."""
    timestamp: float
    level: LogLevel
    category: LogCategory
    message: str
    data: Optional[Dict] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'level': self.level.value,
            'category': self.category.value,
            'message': self.message,
            'data': self.data,
        }


@dataclass
class SessionLogger:
    """
    Logger for activity sessions.
    """

    session_id: str
    log_dir: str = "./data/logs"
    entries: List[LogEntry] = field(default_factory=list)

    def log(self, level: LogLevel, category: LogCategory, message: str, data: Optional[Dict] = None):
        """
        Log a message.

        Args:
            level: Log level
            category: Log category
            message: Log message
            data: Optional data
        """
        entry = LogEntry(
            timestamp=time.time(),
            level=level,
            category=category,
            message=message,
            data=data
        )
        self.entries.append(entry)

    def info(self, category: LogCategory, message: str, data: Optional[Dict] = None):
        """Log info message."""
        self.log(LogLevel.INFO, category, message, data)

    def warning(self, category: LogCategory, message: str, data: Optional[Dict] = None):
        """Log warning message."""
        self.log(LogLevel.WARNING, category, message, data)

    def filter(self, category: Optional[LogCategory] = None, level: Optional[LogLevel] = None) -> List[LogEntry]:
        """Entries matching a category and/or level."""
        return [
            e for e in self.entries
            if (category is None or e.category == category)
            and (level is None or e.level == level)
        ]

    def log_tick_result(self, result: TickResult):
        """Record the noteworthy parts of one tick (quiet ticks leave no entry)."""
        clock = round(result.state.clock, 3)

        if result.activated:
            self.info(LogCategory.SYSTEM, "Tracking activated", {'clock': clock})

        if result.calibrated is not None:
            data = {'clock': clock, 'standing_height': result.state.baseline.standing_height}
            if result.calibrated:
                self.info(LogCategory.CALIBRATION, "Standing height calibrated", data)
            else:
                self.warning(LogCategory.CALIBRATION, "Calibration rejected", data)

        for teleport in result.teleports:
            self.warning(LogCategory.TRACKING, f"Teleport: {teleport.point.value}", teleport.to_dict())

        for event in result.gestures:
            if event.scored:
                self.info(
                    LogCategory.GESTURE,
                    f"{event.kind.value} {event.variant}",
                    {**event.to_dict(), 'total_score': round(result.breakdown.total, 2)}
                )

    def log_final_score(self, summary: Dict[str, Any]):
        """Log the end-of-session summary."""
        self.info(LogCategory.SCORE, "Session finished", summary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'session_id': self.session_id,
            'timestamp': time.time(),
            'entries': [entry.to_dict() for entry in self.entries],
        }

    def save_session_log(self) -> Path:
        """
        Save session log to file.

        Returns:
            Path of the written JSON file
        """
        log_dir = Path(self.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"session_{self.session_id}_{int(time.time())}.json"

        with open(log_file, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        return log_file


def create_session_logger(session_id: str, log_dir: str = "./data/logs") -> SessionLogger:
    """
    Create a session logger.

    Args:
        session_id: Session ID
        log_dir: Log directory

    Returns:
        SessionLogger instance
    """
    return SessionLogger(session_id, log_dir)
