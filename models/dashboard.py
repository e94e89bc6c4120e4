from pydantic import BaseModel
from typing import Dict, List
from models.enums import UserRole
from models.report import Report

# Role-scoped view consumed by the dashboard screens
class DashboardView(BaseModel):
    role: UserRole
    total: int
    counts: Dict[str, int]
    pending: int
    active: int
    resolved: int
    rejected: int
    filed_today: int
    reports: List[Report]
