# state_machine.py - Report lifecycle: edges, guards and transitions
import logging
import uuid
from datetime import datetime
from typing import Dict, NamedTuple, Optional, Tuple

import pytz

from models.enums import Action, Capability, ReportStatus, UserRole
from models.report import Report, ReportLocation, StatusHistoryEntry
from models.user import User
from services.errors import InvalidAssignee, InvalidTransition, MissingNote, Unauthorized
from services.identity import has_capability, is_engineer

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    source: ReportStatus
    target: ReportStatus
    action: Action
    capability: Capability
    escalatable: bool = False      # Admin may act through override_status
    assignee_bound: bool = False   # Only the assigned engineer may act
    requires_note: bool = False
    sets_assignee: bool = False


EDGES: Tuple[Edge, ...] = (
    Edge(ReportStatus.SUBMITTED, ReportStatus.UNDER_REVIEW, Action.REVIEW,
         Capability.VERIFY_REPORT, escalatable=True),
    Edge(ReportStatus.UNDER_REVIEW, ReportStatus.VERIFIED, Action.VERIFY,
         Capability.VERIFY_REPORT, escalatable=True),
    Edge(ReportStatus.UNDER_REVIEW, ReportStatus.REJECTED, Action.REJECT,
         Capability.REJECT_REPORT, escalatable=True),
    Edge(ReportStatus.UNDER_REVIEW, ReportStatus.SUBMITTED, Action.SEND_BACK,
         Capability.SEND_BACK, escalatable=True, requires_note=True),
    Edge(ReportStatus.VERIFIED, ReportStatus.ASSIGNED, Action.ASSIGN,
         Capability.ASSIGN_REPORT, sets_assignee=True),
    Edge(ReportStatus.ASSIGNED, ReportStatus.ASSIGNED, Action.REASSIGN,
         Capability.REASSIGN, sets_assignee=True),
    Edge(ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS, Action.START_PROGRESS,
         Capability.START_PROGRESS, assignee_bound=True),
    Edge(ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED, Action.RESOLVE,
         Capability.RESOLVE_REPORT, assignee_bound=True),
)

TRANSITIONS: Dict[Tuple[ReportStatus, ReportStatus], Edge] = {
    (edge.source, edge.target): edge for edge in EDGES
}

TERMINAL_STATUSES = frozenset({ReportStatus.RESOLVED, ReportStatus.REJECTED})
ACTIVE_STATUSES = frozenset(ReportStatus) - TERMINAL_STATUSES

# Holding none of these means the actor can never move a report
TRANSITION_CAPABILITIES = frozenset(
    {edge.capability for edge in EDGES} | {Capability.OVERRIDE_STATUS}
)


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def edge_for(source: ReportStatus, target: ReportStatus) -> Optional[Edge]:
    return TRANSITIONS.get((source, target))


def edges_from(source: ReportStatus) -> Tuple[Edge, ...]:
    return tuple(edge for edge in EDGES if edge.source == source)


def can_perform(actor: User, edge: Edge, report: Report) -> bool:
    """Capability and identity check for one edge on one report."""
    if edge.assignee_bound and actor.id != report.assigned_to:
        return False
    if has_capability(actor, edge.capability):
        return True
    return edge.escalatable and has_capability(actor, Capability.OVERRIDE_STATUS)


# -------------------- Filing -------------------- #
def file_report(reporter: User, title: str, description: str,
                location: ReportLocation, now: Optional[datetime] = None) -> Report:
    if not has_capability(reporter, Capability.FILE_REPORT):
        raise Unauthorized(f"{reporter.role.value} users cannot file reports")

    created_at = now or utcnow()
    entry = StatusHistoryEntry(
        status=ReportStatus.SUBMITTED,
        actor_id=reporter.id,
        actor_role=reporter.role,
        timestamp=created_at,
    )
    return Report(
        id=str(uuid.uuid4()),
        reporter_id=reporter.id,
        title=title,
        description=description,
        location=location,
        status=ReportStatus.SUBMITTED,
        created_at=created_at,
        status_history=(entry,),
    )


# -------------------- Transitions -------------------- #
def _resolve_assignee(report: Report, actor: User, edge: Edge,
                      assignee: Optional[User]) -> str:
    if is_engineer(actor):
        # Engineers can only take a verified report for themselves
        if assignee is not None and assignee.id != actor.id:
            raise Unauthorized("City Engineers can only assign reports to themselves")
        assignee = actor

    if assignee is None:
        raise InvalidAssignee(f"An assignee is required to {edge.action.value} a report")
    if assignee.role != UserRole.CITY_ENGINEER:
        raise InvalidAssignee(f"Reports can only be assigned to City Engineers, not {assignee.role.value}")
    if edge.action == Action.REASSIGN and assignee.id == report.assigned_to:
        raise InvalidAssignee(f"Report {report.id} is already assigned to {assignee.id}")
    return assignee.id


def transition(report: Report, actor: User, target_status: ReportStatus,
               note: Optional[str] = None, assignee: Optional[User] = None,
               now: Optional[datetime] = None) -> Report:
    """
    Validates one move of the report along the workflow graph and returns the
    resulting snapshot. The given report is never modified.

    Raises Unauthorized, InvalidTransition, MissingNote or InvalidAssignee;
    on any error nothing changes.
    """
    try:
        target_status = ReportStatus(target_status)
    except ValueError:
        raise InvalidTransition(f"Unknown report status: {target_status}")

    if report.status in TERMINAL_STATUSES:
        raise InvalidTransition(
            f"Report {report.id} is {report.status.value} and cannot change status"
        )

    if not any(has_capability(actor, capability) for capability in TRANSITION_CAPABILITIES):
        raise Unauthorized(f"{actor.role.value} users cannot change report status")

    edge = edge_for(report.status, target_status)
    if edge is None:
        raise InvalidTransition(
            f"Invalid status transition: {report.status.value} -> {target_status.value}"
        )

    if not can_perform(actor, edge, report):
        if edge.assignee_bound and has_capability(actor, edge.capability):
            raise Unauthorized(f"Only the assigned engineer can {edge.action.value} report {report.id}")
        raise Unauthorized(f"{actor.role.value} users cannot {edge.action.value} reports")

    note = (note or "").strip() or None
    if edge.requires_note and note is None:
        raise MissingNote(f"A note is required to {edge.action.value} a report")

    assigned_to = report.assigned_to
    if edge.sets_assignee:
        assigned_to = _resolve_assignee(report, actor, edge, assignee)

    timestamp = now or utcnow()
    entry = StatusHistoryEntry(
        status=target_status,
        actor_id=actor.id,
        actor_role=actor.role,
        timestamp=timestamp,
        note=note,
        assigned_to=assigned_to if edge.sets_assignee else None,
    )

    logger.info(
        "[TRANSITION] Report %s: %s -> %s by %s (%s)",
        report.id, report.status.value, target_status.value, actor.id, actor.role.value,
    )
    return report.model_copy(update={
        "status": target_status,
        "status_history": report.status_history + (entry,),
        "assigned_to": assigned_to,
        "updated_at": timestamp,
        "version": report.version + 1,
    })
