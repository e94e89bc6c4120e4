from pydantic import BaseModel, ConfigDict
from datetime import datetime
from models.enums import NotificationType

# Notification as stored; only is_read ever changes, and only for its owner
class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    report_id: str
    title: str
    message: str
    notification_type: NotificationType
    is_read: bool = False
    created_at: datetime

class UnreadCount(BaseModel):
    user_id: str
    unread_count: int

class MarkAllReadResult(BaseModel):
    message: str
    updated_count: int
