# access_control.py - Which reports a user sees and what they may do with them
from typing import FrozenSet, Iterable, List

from models.enums import Action, ReportStatus, UserRole
from models.report import Report
from models.user import User
from services.state_machine import TERMINAL_STATUSES, can_perform, edges_from

# Statuses a Barangay Official works with
OFFICIAL_STATUSES = frozenset({
    ReportStatus.SUBMITTED,
    ReportStatus.UNDER_REVIEW,
    ReportStatus.VERIFIED,
    ReportStatus.REJECTED,
})

# Roles whose list is a work queue when asked for one
QUEUE_ROLES = frozenset({UserRole.BARANGAY_OFFICIAL, UserRole.CITY_ENGINEER})


def can_view(user: User, report: Report) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.RESIDENT:
        return report.reporter_id == user.id
    if user.role == UserRole.BARANGAY_OFFICIAL:
        return report.status in OFFICIAL_STATUSES
    if user.role == UserRole.CITY_ENGINEER:
        return (
            report.assigned_to == user.id
            or (report.status == ReportStatus.VERIFIED and report.assigned_to is None)
        )
    return False


def _newest_first(reports: List[Report]) -> List[Report]:
    # Two stable passes: id breaks ties between reports filed at the same instant
    reports = sorted(reports, key=lambda r: r.id)
    return sorted(reports, key=lambda r: r.created_at, reverse=True)


def _queue_order(report: Report):
    # Active work first, then oldest first (FIFO triage), then id
    return (report.status in TERMINAL_STATUSES, report.created_at, report.id)


def visible_reports(user: User, reports: Iterable[Report], queue: bool = False) -> List[Report]:
    """
    Filters the candidate reports down to what the user may see.

    For Barangay Officials the candidates must already be narrowed to the
    official's jurisdiction. With queue=True, officials and engineers get
    their triage order instead of the newest-first listing.
    """
    visible = [report for report in reports if can_view(user, report)]
    if queue and user.role in QUEUE_ROLES:
        return sorted(visible, key=_queue_order)
    return _newest_first(visible)


def allowed_actions(user: User, report: Report) -> FrozenSet[Action]:
    return frozenset(
        edge.action for edge in edges_from(report.status)
        if can_perform(user, edge, report)
    )
