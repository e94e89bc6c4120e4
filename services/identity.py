# identity.py - Capabilities derived from roles
from typing import FrozenSet, Union

from models.enums import Capability, UserRole
from models.user import User

ROLE_CAPABILITIES = {
    UserRole.RESIDENT: frozenset({
        Capability.FILE_REPORT,
        Capability.VIEW_OWN_REPORTS,
    }),
    UserRole.BARANGAY_OFFICIAL: frozenset({
        Capability.VIEW_REPORTS,
        Capability.VERIFY_REPORT,
        Capability.REJECT_REPORT,
        Capability.SEND_BACK,
    }),
    UserRole.CITY_ENGINEER: frozenset({
        Capability.VIEW_ASSIGNED_REPORTS,
        Capability.ASSIGN_REPORT,
        Capability.START_PROGRESS,
        Capability.RESOLVE_REPORT,
    }),
    UserRole.ADMIN: frozenset({
        Capability.VIEW_ALL_REPORTS,
        Capability.ASSIGN_REPORT,
        Capability.REASSIGN,
        Capability.OVERRIDE_STATUS,
    }),
}


def capabilities_for(role) -> FrozenSet[Capability]:
    try:
        role = UserRole(role)
    except ValueError:
        return frozenset()
    return ROLE_CAPABILITIES.get(role, frozenset())


def has_capability(user: User, capability: Union[Capability, str]) -> bool:
    """
    Checks whether the user's role grants the capability.
    Unknown capability names and unknown roles are always denied.
    """
    try:
        capability = Capability(capability)
    except ValueError:
        return False
    return capability in capabilities_for(user.role)


# Role helpers
def is_official(user: User) -> bool:
    return user.role == UserRole.BARANGAY_OFFICIAL

def is_engineer(user: User) -> bool:
    return user.role == UserRole.CITY_ENGINEER
