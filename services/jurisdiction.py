# jurisdiction.py - Barangay scoping for officials
from typing import Iterable, List

from models.enums import UserRole
from models.report import Report
from models.user import User


class BarangayJurisdiction:
    """
    Default location lookup: an official covers the reports filed in their
    own barangay. Officials without a barangay on record cover every report.
    Other roles are not scoped by location.
    """

    def within_jurisdiction(self, user: User, report: Report) -> bool:
        if user.role != UserRole.BARANGAY_OFFICIAL or not user.barangay:
            return True
        barangay = report.location.barangay or ""
        return barangay.strip().casefold() == user.barangay.strip().casefold()

    def candidates(self, user: User, reports: Iterable[Report]) -> List[Report]:
        return [report for report in reports if self.within_jurisdiction(user, report)]
