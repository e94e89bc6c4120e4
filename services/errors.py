# errors.py - Typed errors raised by the workflow core
#
# Every failure that crosses the core boundary is one of these. The HTTP
# layer turns them into JSON responses with the matching status code.


class WorkflowError(Exception):
    code = "workflow_error"
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class Unauthorized(WorkflowError):
    """The actor lacks the capability or identity binding for the action."""

    code = "unauthorized"
    status_code = 403


class InvalidTransition(WorkflowError):
    """The requested edge does not exist from the report's current status."""

    code = "invalid_transition"
    status_code = 400


class MissingNote(WorkflowError):
    """A send-back was requested without a justification note."""

    code = "missing_note"
    status_code = 422


class InvalidAssignee(WorkflowError):
    """The assignee given for an assignment edge is not acceptable."""

    code = "invalid_assignee"
    status_code = 400


class NotFound(WorkflowError):
    code = "not_found"
    status_code = 404


class StaleState(WorkflowError):
    """The report changed after the caller's snapshot was taken."""

    code = "stale_state"
    status_code = 409
