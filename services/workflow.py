# workflow.py - Boundary API driving the report workflow
#
# Every call names the acting user explicitly; the service keeps no notion
# of a "current" user. Reads always go back to the store, so a transition is
# visible to every other user as soon as it is committed.
import logging
import uuid
from typing import FrozenSet, List, Optional

from models.dashboard import DashboardView
from models.enums import Action, ReportStatus, UserRole
from models.notification import Notification
from models.report import Report, ReportLocation
from models.user import User
from services import access_control, notification_engine, state_machine
from services.dashboard import dashboard_view
from services.errors import NotFound, StaleState, WorkflowError
from services.identity import is_official
from services.jurisdiction import BarangayJurisdiction
from services.store import ReportStore, build_store

logger = logging.getLogger(__name__)


class WorkflowService:

    def __init__(self, store: ReportStore, jurisdiction=None):
        self.store = store
        self.jurisdiction = jurisdiction or BarangayJurisdiction()

    # -------------------- Users -------------------- #
    def register_user(self, fullname: str, role: UserRole, email: Optional[str] = None,
                      barangay: Optional[str] = None, password_hash: Optional[str] = None) -> User:
        user = User(
            id=str(uuid.uuid4()),
            fullname=fullname,
            role=role,
            email=email.lower() if email else None,
            barangay=barangay,
        )
        self.store.add_user(user, password_hash)
        logger.info("[AUTH] Registered %s user %s", user.role.value, user.id)
        return user

    def get_user(self, user_id: str) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def find_user_by_email(self, email: str):
        return self.store.find_user_by_email(email)

    # -------------------- Reports -------------------- #
    def _load_report(self, report_id: str) -> Report:
        report = self.store.get_report(report_id)
        if report is None:
            raise NotFound(f"Report {report_id} not found")
        return report

    def _in_scope(self, user: User, report: Report) -> bool:
        return self.jurisdiction.within_jurisdiction(user, report)

    def file_report(self, reporter_id: str, title: str, description: str,
                    location: ReportLocation) -> Report:
        reporter = self.get_user(reporter_id)
        report = state_machine.file_report(reporter, title, description, location)
        self.store.add_report(report)
        logger.info("[REPORT] %s filed report %s (%s)", reporter.id, report.id, report.title)
        return report

    def transition(self, report_id: str, actor_id: str, target_status: ReportStatus,
                   note: Optional[str] = None, assignee_id: Optional[str] = None,
                   expected_version: Optional[int] = None) -> Report:
        actor = self.get_user(actor_id)
        current = self._load_report(report_id)
        if is_official(actor) and not self._in_scope(actor, current):
            raise NotFound(f"Report {report_id} not found")

        if expected_version is not None and expected_version != current.version:
            raise StaleState(
                f"Report {report_id} changed (version {current.version}, expected {expected_version})"
            )

        assignee = None
        if assignee_id and _sets_assignee(current.status, target_status):
            assignee = self.get_user(assignee_id)

        try:
            updated = state_machine.transition(current, actor, target_status, note=note, assignee=assignee)
        except WorkflowError as exc:
            logger.warning(
                "[TRANSITION] Rejected %s -> %s on report %s by %s: %s",
                current.status.value, target_status, report_id, actor.id, exc.detail,
            )
            raise

        notifications = notification_engine.on_transition(
            updated, current.status, updated.status, actor,
            previous_assignee=current.assigned_to,
            now=updated.updated_at,
        )

        try:
            self.store.commit_transition(updated, notifications, expected_version=current.version)
        except StaleState:
            logger.warning("[TRANSITION] Stale commit on report %s by %s", report_id, actor.id)
            raise
        return updated

    def visible_reports(self, user_id: str, queue: bool = False) -> List[Report]:
        user = self.get_user(user_id)
        candidates = self.jurisdiction.candidates(user, self.store.list_reports())
        return access_control.visible_reports(user, candidates, queue=queue)

    def _visible_report(self, user: User, report_id: str) -> Report:
        report = self._load_report(report_id)
        if not (self._in_scope(user, report) and access_control.can_view(user, report)):
            raise NotFound(f"Report {report_id} not found")
        return report

    def get_report(self, user_id: str, report_id: str) -> Report:
        return self._visible_report(self.get_user(user_id), report_id)

    def allowed_actions(self, user_id: str, report_id: str) -> FrozenSet[Action]:
        user = self.get_user(user_id)
        return access_control.allowed_actions(user, self._visible_report(user, report_id))

    def dashboard(self, user_id: str, queue: bool = False) -> DashboardView:
        user = self.get_user(user_id)
        candidates = self.jurisdiction.candidates(user, self.store.list_reports())
        return dashboard_view(user, candidates, queue=queue)

    # -------------------- Notifications -------------------- #
    def notifications_for(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        notifications = notification_engine.notifications_for(
            user_id, self.store.list_notifications(user_id)
        )
        if unread_only:
            notifications = [n for n in notifications if not n.is_read]
        return notifications

    def unread_count(self, user_id: str) -> int:
        return notification_engine.unread_count(user_id, self.store.list_notifications(user_id))

    def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self.store.get_notification(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found")

        updated = notification_engine.mark_read(notification, user_id)
        if updated is not notification:
            self.store.update_notification(updated)
        return updated

    def mark_all_read(self, user_id: str) -> int:
        updated_count = self.store.mark_all_read(user_id)
        logger.info("[NOTIFICATION] %s marked %d notifications as read", user_id, updated_count)
        return updated_count


# Only assignment edges look up the named assignee
def _sets_assignee(source: ReportStatus, target) -> bool:
    try:
        edge = state_machine.edge_for(source, ReportStatus(target))
    except ValueError:
        return False
    return edge is not None and edge.sets_assignee


_workflow: Optional[WorkflowService] = None


# FastAPI dependency: one service per process
def get_workflow() -> WorkflowService:
    global _workflow
    if _workflow is None:
        _workflow = WorkflowService(build_store())
    return _workflow
