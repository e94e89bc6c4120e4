from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Tuple
from datetime import datetime
from models.enums import ReportStatus, UserRole

# Statuses in which a report can never carry an assignee
UNASSIGNED_STATUSES = {
    ReportStatus.SUBMITTED,
    ReportStatus.UNDER_REVIEW,
    ReportStatus.VERIFIED,
    ReportStatus.REJECTED,
}

class ReportLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    barangay: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

# One entry per transition, never modified once appended
class StatusHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ReportStatus
    actor_id: str
    actor_role: UserRole
    timestamp: datetime
    note: Optional[str] = None
    assigned_to: Optional[str] = None

# What the filing form sends
class ReportCreate(BaseModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    location: ReportLocation

# Immutable snapshot of a report; the state machine returns a new one per transition
class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    reporter_id: str
    title: str
    description: str
    location: ReportLocation
    status: ReportStatus = ReportStatus.SUBMITTED
    created_at: datetime
    updated_at: Optional[datetime] = None
    status_history: Tuple[StatusHistoryEntry, ...]
    assigned_to: Optional[str] = None  # City Engineer id
    version: int = 1

    @model_validator(mode="after")
    def check_history(self):
        if not self.status_history:
            raise ValueError("status_history must not be empty")
        if self.status_history[0].status != ReportStatus.SUBMITTED:
            raise ValueError("status_history must start with Submitted")
        if self.status_history[-1].status != self.status:
            raise ValueError(
                f"last history entry {self.status_history[-1].status.value} "
                f"does not match status {self.status.value}"
            )
        if self.assigned_to and self.status in UNASSIGNED_STATUSES:
            raise ValueError(f"a {self.status.value} report cannot have an assignee")
        return self

# Body of a transition request
class TransitionRequest(BaseModel):
    target_status: ReportStatus
    note: Optional[str] = None
    assignee_id: Optional[str] = None
    expected_version: Optional[int] = None  # Snapshot the caller was looking at
