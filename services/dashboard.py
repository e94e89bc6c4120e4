# dashboard.py - Role-scoped summaries, recomputed on every request
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

import pytz

import config
from models.dashboard import DashboardView
from models.enums import ReportStatus
from models.report import Report
from models.user import User
from services.access_control import visible_reports
from services.state_machine import utcnow

PENDING_STATUSES = {ReportStatus.SUBMITTED, ReportStatus.UNDER_REVIEW, ReportStatus.VERIFIED}
ACTIVE_STATUSES = {ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS}


def _local_day_start(now: datetime, timezone) -> datetime:
    now_local = now.astimezone(timezone)
    start = now_local.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    return timezone.localize(start).astimezone(pytz.utc)


def dashboard_view(user: User, reports: Iterable[Report], queue: bool = False,
                   now: Optional[datetime] = None, timezone=None) -> DashboardView:
    visible = visible_reports(user, reports, queue=queue)
    counts = Counter(report.status for report in visible)
    day_start = _local_day_start(now or utcnow(), timezone or config.TIMEZONE)

    return DashboardView(
        role=user.role,
        total=len(visible),
        counts={status.value: counts.get(status, 0) for status in ReportStatus},
        pending=sum(counts[s] for s in PENDING_STATUSES),
        active=sum(counts[s] for s in ACTIVE_STATUSES),
        resolved=counts[ReportStatus.RESOLVED],
        rejected=counts[ReportStatus.REJECTED],
        filed_today=sum(1 for report in visible if report.created_at >= day_start),
        reports=visible,
    )
