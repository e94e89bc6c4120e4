from datetime import datetime

import pytz

from models.enums import ReportStatus
from services.dashboard import dashboard_view

MANILA = pytz.timezone("Asia/Manila")


def test_counts_are_grouped_by_status(people, make_report):
    reports = [
        make_report(),
        make_report(ReportStatus.UNDER_REVIEW),
        make_report(ReportStatus.ASSIGNED),
        make_report(ReportStatus.IN_PROGRESS),
        make_report(ReportStatus.RESOLVED),
        make_report(ReportStatus.REJECTED),
    ]
    view = dashboard_view(people.admin, reports)

    assert view.total == 6
    assert view.pending == 2
    assert view.active == 2
    assert view.resolved == 1
    assert view.rejected == 1
    assert view.counts["Verified"] == 0
    assert set(view.counts) == {status.value for status in ReportStatus}


def test_view_is_scoped_to_the_user(people, make_report):
    reports = [make_report(), make_report(reporter=people.neighbour)]
    view = dashboard_view(people.resident, reports)

    assert view.total == 1
    assert view.reports[0].reporter_id == people.resident.id


def test_filed_today_uses_local_day(people, make_report):
    now = MANILA.localize(datetime(2026, 10, 19, 9, 0)).astimezone(pytz.utc)
    # 01:00 on the 19th in Manila, still the 18th in UTC
    early_today = make_report(created_at=datetime(2026, 10, 18, 17, 0, tzinfo=pytz.utc))
    # 23:00 on the 18th in Manila
    yesterday = make_report(created_at=datetime(2026, 10, 18, 15, 0, tzinfo=pytz.utc))

    view = dashboard_view(people.resident, [early_today, yesterday], now=now, timezone=MANILA)

    assert view.filed_today == 1


def test_queue_view_keeps_triage_order(people, make_report):
    older = make_report(created_at=datetime(2026, 10, 1, tzinfo=pytz.utc))
    newer = make_report(created_at=datetime(2026, 10, 2, tzinfo=pytz.utc))

    assert [r.id for r in dashboard_view(people.official, [newer, older], queue=True).reports] == [older.id, newer.id]
    assert [r.id for r in dashboard_view(people.official, [older, newer]).reports] == [newer.id, older.id]
