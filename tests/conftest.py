"""Shared fixtures: a cast of users, a report builder and an in-memory workflow."""
from types import SimpleNamespace

import pytest

from models.enums import ReportStatus, UserRole
from models.report import ReportLocation
from models.user import User
from services.state_machine import file_report, transition
from services.store import InMemoryStore
from services.workflow import WorkflowService


@pytest.fixture
def people():
    return SimpleNamespace(
        resident=User(id="res-1", fullname="Maria Santos", role=UserRole.RESIDENT,
                      email="maria@example.com", barangay="San Isidro"),
        neighbour=User(id="res-2", fullname="Jose Reyes", role=UserRole.RESIDENT,
                       email="jose@example.com", barangay="San Isidro"),
        official=User(id="brgy-1", fullname="Ana Cruz", role=UserRole.BARANGAY_OFFICIAL,
                      email="ana@example.com", barangay="San Isidro"),
        other_official=User(id="brgy-2", fullname="Pedro Lim", role=UserRole.BARANGAY_OFFICIAL,
                            email="pedro@example.com", barangay="Malanday"),
        e1=User(id="eng-1", fullname="Engr. Ramos", role=UserRole.CITY_ENGINEER),
        e2=User(id="eng-2", fullname="Engr. Villanueva", role=UserRole.CITY_ENGINEER),
        e3=User(id="eng-3", fullname="Engr. Garcia", role=UserRole.CITY_ENGINEER),
        admin=User(id="admin-1", fullname="City Admin", role=UserRole.ADMIN),
    )


@pytest.fixture
def location():
    return ReportLocation(address="Rizal St. corner Mabini", barangay="San Isidro")


@pytest.fixture
def make_report(people, location):
    """Builds a report and walks it along the happy path up to `status`."""

    def _make(status=ReportStatus.SUBMITTED, reporter=None, assignee=None,
              created_at=None, title="Clogged culvert", where=None):
        reporter = reporter or people.resident
        assignee = assignee or people.e2
        report = file_report(
            reporter, title, "Water backs up onto the road after every rain",
            where or location, now=created_at,
        )

        review = [(people.official, ReportStatus.UNDER_REVIEW, {})]
        verified = review + [(people.official, ReportStatus.VERIFIED, {})]
        assigned = verified + [(people.admin, ReportStatus.ASSIGNED, {"assignee": assignee})]
        in_progress = assigned + [(assignee, ReportStatus.IN_PROGRESS, {})]
        paths = {
            ReportStatus.SUBMITTED: [],
            ReportStatus.UNDER_REVIEW: review,
            ReportStatus.VERIFIED: verified,
            ReportStatus.REJECTED: review + [(people.official, ReportStatus.REJECTED, {})],
            ReportStatus.ASSIGNED: assigned,
            ReportStatus.IN_PROGRESS: in_progress,
            ReportStatus.RESOLVED: in_progress + [(assignee, ReportStatus.RESOLVED, {})],
        }
        for actor, target, extra in paths[ReportStatus(status)]:
            report = transition(report, actor, target, **extra)
        return report

    return _make


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def workflow(store, people):
    for user in vars(people).values():
        store.add_user(user)
    return WorkflowService(store)


@pytest.fixture
def filed(workflow, people, location):
    """Scenario report R1 filed by the resident through the boundary API."""
    return workflow.file_report(
        people.resident.id, "Clogged culvert",
        "Water backs up onto the road after every rain", location,
    )
