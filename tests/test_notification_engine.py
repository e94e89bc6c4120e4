import pytest

from models.enums import NotificationType, ReportStatus
from services.errors import InvalidTransition, Unauthorized
from services.notification_engine import mark_read, notifications_for, on_transition, unread_count
from services.state_machine import transition


def recipients(notifications):
    return sorted(n.user_id for n in notifications)


@pytest.mark.parametrize("start, target, actor_name, extra", [
    (ReportStatus.SUBMITTED, ReportStatus.UNDER_REVIEW, "official", {}),
    (ReportStatus.UNDER_REVIEW, ReportStatus.VERIFIED, "official", {}),
    (ReportStatus.UNDER_REVIEW, ReportStatus.REJECTED, "official", {}),
    (ReportStatus.UNDER_REVIEW, ReportStatus.SUBMITTED, "official", {"note": "need photos"}),
    (ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS, "e2", {}),
    (ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED, "e2", {}),
])
def test_reporter_only_edges(people, make_report, start, target, actor_name, extra):
    before = make_report(start)
    after = transition(before, getattr(people, actor_name), target, **extra)

    notifications = on_transition(after, before.status, after.status, getattr(people, actor_name))

    assert recipients(notifications) == [people.resident.id]
    assert notifications[0].report_id == after.id
    assert notifications[0].is_read is False
    assert "Clogged culvert" in notifications[0].message


def test_assignment_notifies_reporter_and_engineer(people, make_report):
    before = make_report(ReportStatus.VERIFIED)
    after = transition(before, people.admin, ReportStatus.ASSIGNED, assignee=people.e2)

    notifications = on_transition(after, before.status, after.status, people.admin)

    assert recipients(notifications) == sorted([people.resident.id, people.e2.id])
    assert {n.notification_type for n in notifications} == {NotificationType.ASSIGNMENT}


def test_reassignment_notifies_both_engineers_and_reporter(people, make_report):
    before = make_report(ReportStatus.ASSIGNED, assignee=people.e2)
    after = transition(before, people.admin, ReportStatus.ASSIGNED, assignee=people.e3)

    notifications = on_transition(
        after, before.status, after.status, people.admin, previous_assignee=before.assigned_to
    )

    assert recipients(notifications) == sorted([people.resident.id, people.e2.id, people.e3.id])


def test_send_back_message_quotes_note(people, make_report):
    before = make_report(ReportStatus.UNDER_REVIEW)
    after = transition(before, people.official, ReportStatus.SUBMITTED, note="need photos")

    [notification] = on_transition(after, before.status, after.status, people.official)

    assert notification.notification_type == NotificationType.REVISION_REQUEST
    assert "need photos" in notification.message


def test_undefined_edge_emits_nothing(people, make_report):
    report = make_report(ReportStatus.VERIFIED)
    with pytest.raises(InvalidTransition):
        on_transition(report, ReportStatus.SUBMITTED, ReportStatus.VERIFIED, people.official)


# -------------------- Queries -------------------- #
@pytest.fixture
def inbox(people, make_report):
    before = make_report(ReportStatus.VERIFIED)
    after = transition(before, people.admin, ReportStatus.ASSIGNED, assignee=people.e2)
    return on_transition(after, before.status, after.status, people.admin)


def test_unread_count_is_per_user(people, inbox):
    assert unread_count(people.resident.id, inbox) == 1
    assert unread_count(people.e2.id, inbox) == 1
    assert unread_count(people.official.id, inbox) == 0


def test_mark_read_by_owner(people, inbox):
    own = notifications_for(people.resident.id, inbox)[0]
    read = mark_read(own, people.resident.id)

    assert read.is_read is True
    assert own.is_read is False
    assert mark_read(read, people.resident.id) is read


def test_mark_read_by_someone_else_is_unauthorized(people, inbox):
    own = notifications_for(people.resident.id, inbox)[0]
    with pytest.raises(Unauthorized):
        mark_read(own, people.e2.id)
