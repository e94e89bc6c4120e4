from enum import Enum

# User roles in the system
class UserRole(str, Enum):
    RESIDENT = "Resident"
    BARANGAY_OFFICIAL = "Barangay Official"
    CITY_ENGINEER = "City Engineer"
    ADMIN = "Admin"

# Possible states of a report in the workflow
class ReportStatus(str, Enum):
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "UnderReview"
    VERIFIED = "Verified"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"

# Named permissions, derived only from the user's role
class Capability(str, Enum):
    FILE_REPORT = "file_report"
    VIEW_OWN_REPORTS = "view_own_reports"
    VIEW_REPORTS = "view_reports"
    VERIFY_REPORT = "verify_report"
    REJECT_REPORT = "reject_report"
    SEND_BACK = "send_back"
    VIEW_ASSIGNED_REPORTS = "view_assigned_reports"
    ASSIGN_REPORT = "assign_report"
    START_PROGRESS = "start_progress"
    RESOLVE_REPORT = "resolve_report"
    VIEW_ALL_REPORTS = "view_all_reports"
    REASSIGN = "reassign"
    OVERRIDE_STATUS = "override_status"

# Actions a user can take on a report, one per edge of the workflow
class Action(str, Enum):
    REVIEW = "review"
    VERIFY = "verify"
    REJECT = "reject"
    SEND_BACK = "send_back"
    ASSIGN = "assign"
    REASSIGN = "reassign"
    START_PROGRESS = "start_progress"
    RESOLVE = "resolve"

# Types of notifications sent to users
class NotificationType(str, Enum):
    STATUS_CHANGE = "status_change"
    ASSIGNMENT = "assignment"
    REASSIGNMENT = "reassignment"
    REVISION_REQUEST = "revision_request"
    CASE_CLOSED = "case_closed"
