# notification_routes.py
from fastapi import APIRouter, Depends, Query
from typing import List

from models.notification import MarkAllReadResult, Notification, UnreadCount
from models.user import User
from routes.auth_routes import get_current_user
from services.workflow import WorkflowService, get_workflow

router = APIRouter(tags=["Notifications"])


# -------------------- List notifications -------------------- #
@router.get("/", response_model=List[Notification])
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    """
    Lists the authenticated user's notifications, newest first.
    Each user only ever sees their own notifications.
    """
    notifications = workflow.notifications_for(current_user.id, unread_only=unread_only)
    return notifications[offset:offset + limit]


# -------------------- Count unread notifications -------------------- #
@router.get("/unread/count", response_model=UnreadCount)
def count_unread_notifications(
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return UnreadCount(user_id=current_user.id, unread_count=workflow.unread_count(current_user.id))


# -------------------- Mark notification as read -------------------- #
@router.patch("/{notification_id}/read", response_model=Notification)
def mark_as_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    """
    Marks a notification as read.
    Users can only mark their own notifications.
    """
    return workflow.mark_read(notification_id, current_user.id)


# -------------------- Mark all as read -------------------- #
@router.post("/mark-all-read", response_model=MarkAllReadResult)
def mark_all_as_read(
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    updated_count = workflow.mark_all_read(current_user.id)
    return MarkAllReadResult(
        message=f"Marked {updated_count} notifications as read",
        updated_count=updated_count,
    )
