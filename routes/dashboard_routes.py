# dashboard_routes.py
from fastapi import APIRouter, Depends, Query

from models.dashboard import DashboardView
from models.user import User
from routes.auth_routes import get_current_user
from services.workflow import WorkflowService, get_workflow

router = APIRouter(tags=["Dashboard"])


# Role-scoped dashboard; always recomputed from the current reports
@router.get("/", response_model=DashboardView)
def get_dashboard(
    queue: bool = Query(False),
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return workflow.dashboard(current_user.id, queue=queue)
