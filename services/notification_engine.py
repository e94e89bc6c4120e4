# notification_engine.py - Notification events derived from transitions
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from models.enums import NotificationType, ReportStatus
from models.notification import Notification
from models.report import Report
from models.user import User
from services.errors import InvalidTransition, Unauthorized
from services.state_machine import edge_for, utcnow

logger = logging.getLogger(__name__)

# Title, message template and type for the reporter, by target status
REPORTER_TEMPLATES: Dict[ReportStatus, Tuple[str, str, NotificationType]] = {
    ReportStatus.UNDER_REVIEW: (
        "Report under review",
        'Your report "{title}" is now being reviewed by your barangay.',
        NotificationType.STATUS_CHANGE,
    ),
    ReportStatus.VERIFIED: (
        "Report verified",
        'Your report "{title}" has been verified and is awaiting an engineer.',
        NotificationType.STATUS_CHANGE,
    ),
    ReportStatus.REJECTED: (
        "Report rejected",
        'Your report "{title}" was rejected after review.',
        NotificationType.CASE_CLOSED,
    ),
    ReportStatus.SUBMITTED: (
        "Report returned for revision",
        'Your report "{title}" was sent back for revision: {note}',
        NotificationType.REVISION_REQUEST,
    ),
    ReportStatus.ASSIGNED: (
        "Report assigned",
        'Your report "{title}" has been assigned to a City Engineer.',
        NotificationType.ASSIGNMENT,
    ),
    ReportStatus.IN_PROGRESS: (
        "Repair in progress",
        'Work has started on your report "{title}".',
        NotificationType.STATUS_CHANGE,
    ),
    ReportStatus.RESOLVED: (
        "Report resolved",
        'Your report "{title}" has been resolved.',
        NotificationType.CASE_CLOSED,
    ),
}


def _build(user_id: str, report: Report, title: str, message: str,
           notification_type: NotificationType, created_at: datetime) -> Notification:
    return Notification(
        id=str(uuid.uuid4()),
        user_id=user_id,
        report_id=report.id,
        title=title,
        message=message,
        notification_type=notification_type,
        is_read=False,
        created_at=created_at,
    )


def on_transition(report: Report, from_status: ReportStatus, to_status: ReportStatus,
                  actor: User, previous_assignee: Optional[str] = None,
                  now: Optional[datetime] = None) -> List[Notification]:
    """
    Derives the notifications a validated transition must emit.

    `report` is the snapshot after the transition. For reassignments the
    engineer who lost the report is passed as `previous_assignee`.
    Each recipient gets at most one notification per transition.
    """
    edge = edge_for(ReportStatus(from_status), ReportStatus(to_status))
    if edge is None:
        raise InvalidTransition(
            f"No notifications for undefined transition {from_status} -> {to_status}"
        )

    created_at = now or utcnow()
    note = report.status_history[-1].note or ""
    outgoing: Dict[str, Notification] = {}

    def add(user_id, title, message, notification_type):
        if user_id and user_id not in outgoing:
            outgoing[user_id] = _build(user_id, report, title, message, notification_type, created_at)

    if edge.source == edge.target:
        # Reassignment: both engineers and the reporter hear about it
        add(previous_assignee, "Report reassigned",
            f'Report "{report.title}" has been reassigned to another engineer.',
            NotificationType.REASSIGNMENT)
        add(report.assigned_to, "New report assigned",
            f'You have been assigned the report "{report.title}".',
            NotificationType.REASSIGNMENT)
        add(report.reporter_id, "Report reassigned",
            f'Your report "{report.title}" has been reassigned to another engineer.',
            NotificationType.REASSIGNMENT)
    else:
        title, template, notification_type = REPORTER_TEMPLATES[edge.target]
        add(report.reporter_id, title,
            template.format(title=report.title, note=note), notification_type)
        if edge.sets_assignee:
            add(report.assigned_to, "New report assigned",
                f'You have been assigned the report "{report.title}".',
                NotificationType.ASSIGNMENT)

    logger.info(
        "[NOTIFICATION] Report %s (%s -> %s by %s): %d recipients",
        report.id, edge.source.value, edge.target.value, actor.id, len(outgoing),
    )
    return list(outgoing.values())


# -------------------- Per-user queries -------------------- #
def notifications_for(user_id: str, notifications: Iterable[Notification]) -> List[Notification]:
    own = [n for n in notifications if n.user_id == user_id]
    own.sort(key=lambda n: n.created_at, reverse=True)
    return own


def unread_count(user_id: str, notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if n.user_id == user_id and not n.is_read)


def mark_read(notification: Notification, actor_user_id: str) -> Notification:
    if notification.user_id != actor_user_id:
        raise Unauthorized("You can only mark your own notifications as read")
    if notification.is_read:
        return notification
    return notification.model_copy(update={"is_read": True})
