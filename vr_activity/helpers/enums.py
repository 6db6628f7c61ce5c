import enum


class SessionStatus(str, enum.Enum):
    ACTIVE = 'ACTIVE'
    ENDED = 'ENDED'
    EXPIRED = 'EXPIRED'
