# store.py - Persistence for users, reports and notifications
#
# The workflow core never talks to a database directly. It loads snapshots
# from a store and hands back the new snapshot plus its notifications in a
# single commit, which the store applies only if the report still has the
# version the transition was computed from.
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import config
from models.notification import Notification
from models.report import Report
from models.user import User
from services.errors import NotFound, StaleState

logger = logging.getLogger(__name__)

FIRESTORE_BATCH_LIMIT = 500


class ReportStore(ABC):

    # -------------------- Users -------------------- #
    @abstractmethod
    def add_user(self, user: User, password_hash: Optional[str] = None) -> None: ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[Tuple[User, Optional[str]]]: ...

    # -------------------- Reports -------------------- #
    @abstractmethod
    def add_report(self, report: Report) -> None: ...

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Report]: ...

    @abstractmethod
    def list_reports(self) -> List[Report]: ...

    @abstractmethod
    def commit_transition(self, report: Report, notifications: List[Notification],
                          expected_version: int) -> None:
        """Stores the new snapshot and its notifications, or nothing at all."""

    # -------------------- Notifications -------------------- #
    @abstractmethod
    def list_notifications(self, user_id: str) -> List[Notification]: ...

    @abstractmethod
    def get_notification(self, notification_id: str) -> Optional[Notification]: ...

    @abstractmethod
    def update_notification(self, notification: Notification) -> None: ...

    @abstractmethod
    def mark_all_read(self, user_id: str) -> int:
        """Marks every unread notification of the user as read in one write."""


class InMemoryStore(ReportStore):
    """Session-local store; every commit happens under one lock."""

    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._passwords: Dict[str, Optional[str]] = {}
        self._reports: Dict[str, Report] = {}
        self._notifications: Dict[str, Notification] = {}

    def add_user(self, user, password_hash=None):
        with self._lock:
            self._users[user.id] = user
            self._passwords[user.id] = password_hash

    def get_user(self, user_id):
        return self._users.get(user_id)

    def find_user_by_email(self, email):
        email = email.lower()
        with self._lock:
            for user in self._users.values():
                if user.email and user.email.lower() == email:
                    return user, self._passwords.get(user.id)
        return None

    def add_report(self, report):
        with self._lock:
            self._reports[report.id] = report

    def get_report(self, report_id):
        return self._reports.get(report_id)

    def list_reports(self):
        with self._lock:
            return list(self._reports.values())

    def commit_transition(self, report, notifications, expected_version):
        with self._lock:
            current = self._reports.get(report.id)
            if current is None:
                raise NotFound(f"Report {report.id} not found")
            if current.version != expected_version:
                raise StaleState(
                    f"Report {report.id} changed (version {current.version}, expected {expected_version})"
                )
            self._reports[report.id] = report
            for notification in notifications:
                self._notifications[notification.id] = notification

    def list_notifications(self, user_id):
        with self._lock:
            return [n for n in self._notifications.values() if n.user_id == user_id]

    def get_notification(self, notification_id):
        return self._notifications.get(notification_id)

    def update_notification(self, notification):
        with self._lock:
            if notification.id not in self._notifications:
                raise NotFound(f"Notification {notification.id} not found")
            self._notifications[notification.id] = notification

    def mark_all_read(self, user_id):
        with self._lock:
            unread = [n for n in self._notifications.values()
                      if n.user_id == user_id and not n.is_read]
            for notification in unread:
                self._notifications[notification.id] = notification.model_copy(update={"is_read": True})
            return len(unread)


class FirestoreStore(ReportStore):
    """Firestore collections: users, reports, notifications (document id = entity id)."""

    def __init__(self, db):
        self.db = db

    def add_user(self, user, password_hash=None):
        user_dict = user.model_dump(mode="json")
        user_dict["password"] = password_hash
        self.db.collection("users").document(user.id).set(user_dict)

    def get_user(self, user_id):
        doc = self.db.collection("users").document(user_id).get()
        if not doc.exists:
            return None
        return _user_from_doc(doc.to_dict())

    def find_user_by_email(self, email):
        query = self.db.collection("users").where("email", "==", email.lower()).limit(1).stream()
        for doc in query:
            data = doc.to_dict()
            return _user_from_doc(data), data.get("password")
        return None

    def add_report(self, report):
        self.db.collection("reports").document(report.id).set(report.model_dump(mode="json"))

    def get_report(self, report_id):
        doc = self.db.collection("reports").document(report_id).get()
        if not doc.exists:
            return None
        return Report(**doc.to_dict())

    def list_reports(self):
        return [Report(**doc.to_dict()) for doc in self.db.collection("reports").stream()]

    def commit_transition(self, report, notifications, expected_version):
        from firebase_admin import firestore

        report_ref = self.db.collection("reports").document(report.id)
        notifications_ref = self.db.collection("notifications")

        @firestore.transactional
        def apply(transaction):
            snapshot = report_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound(f"Report {report.id} not found")
            stored_version = snapshot.to_dict().get("version")
            if stored_version != expected_version:
                raise StaleState(
                    f"Report {report.id} changed (version {stored_version}, expected {expected_version})"
                )
            transaction.set(report_ref, report.model_dump(mode="json"))
            for notification in notifications:
                transaction.set(notifications_ref.document(notification.id),
                                notification.model_dump(mode="json"))

        apply(self.db.transaction())

    def list_notifications(self, user_id):
        docs = self.db.collection("notifications").where("user_id", "==", user_id).stream()
        return [Notification(**doc.to_dict()) for doc in docs]

    def get_notification(self, notification_id):
        doc = self.db.collection("notifications").document(notification_id).get()
        if not doc.exists:
            return None
        return Notification(**doc.to_dict())

    def update_notification(self, notification):
        notification_ref = self.db.collection("notifications").document(notification.id)
        if not notification_ref.get().exists:
            raise NotFound(f"Notification {notification.id} not found")
        notification_ref.update({"is_read": notification.is_read})

    def mark_all_read(self, user_id):
        unread = (self.db.collection("notifications")
                  .where("user_id", "==", user_id)
                  .where("is_read", "==", False))

        # Firestore allows at most 500 writes per batch
        batch = self.db.batch()
        batch_count = 0
        updated_count = 0
        for doc in unread.stream():
            batch.update(doc.reference, {"is_read": True})
            batch_count += 1
            updated_count += 1
            if batch_count >= FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = self.db.batch()
                batch_count = 0

        if batch_count > 0:
            batch.commit()
        return updated_count


def _user_from_doc(data: dict) -> User:
    data = dict(data)
    data.pop("password", None)
    return User(**data)


def build_store() -> ReportStore:
    if config.STORE_BACKEND == "firestore":
        from services.firebase_client import get_db

        logger.info("[STORE] Using Firestore store")
        return FirestoreStore(get_db())
    logger.info("[STORE] Using in-memory store")
    return InMemoryStore()
