# paintperfect/models/enums.py
from enum import Enum


class Role(str, Enum):
    USER = "user"
    VENDOR = "vendor"
    ADMIN = "admin"


class PriceType(str, Enum):
    PER_SQ_FT = "per_sq_ft"
    PER_ROOM = "per_room"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


# linear job workflow; completed is terminal
STATUS_FLOW = {
    RequestStatus.PENDING: RequestStatus.ACCEPTED,
    RequestStatus.ACCEPTED: RequestStatus.IN_PROGRESS,
    RequestStatus.IN_PROGRESS: RequestStatus.COMPLETED,
}
