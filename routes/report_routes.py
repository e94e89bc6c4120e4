# report_routes.py
from fastapi import APIRouter, Depends, Query, status
from typing import List

from models.enums import Action
from models.report import Report, ReportCreate, TransitionRequest
from models.user import User
from routes.auth_routes import get_current_user
from services.workflow import WorkflowService, get_workflow

# Router configuration
router = APIRouter(tags=["Reports"])


# Endpoint for residents to file a new report
@router.post("/", response_model=Report, status_code=status.HTTP_201_CREATED)
def create_report(
    report_data: ReportCreate,
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return workflow.file_report(
        current_user.id,
        report_data.title,
        report_data.description,
        report_data.location,
    )


# Endpoint listing the reports the user may see, filtered by role
@router.get("/", response_model=List[Report])
def list_reports(
    queue: bool = Query(False, description="Triage order: active first, oldest first"),
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return workflow.visible_reports(current_user.id, queue=queue)


# Endpoint for a single report, including its status history
@router.get("/{report_id}", response_model=Report)
def get_report(
    report_id: str,
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return workflow.get_report(current_user.id, report_id)


# Endpoint listing the actions the user can take on a report right now
@router.get("/{report_id}/actions", response_model=List[Action])
def get_allowed_actions(
    report_id: str,
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    actions = workflow.allowed_actions(current_user.id, report_id)
    return sorted(actions, key=lambda a: a.value)


# Endpoint to move a report along the workflow
@router.post("/{report_id}/transition", response_model=Report)
def transition_report(
    report_id: str,
    request: TransitionRequest,
    current_user: User = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow),
):
    return workflow.transition(
        report_id,
        current_user.id,
        request.target_status,
        note=request.note,
        assignee_id=request.assignee_id,
        expected_version=request.expected_version,
    )
