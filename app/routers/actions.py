"""Action router - API endpoints for action management."""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.database import get_database
from app.exceptions import GoalWizardError, http_status
from app.models.action import (
    ActionListRequest,
    ActionListResponse,
    CompleteActionRequest,
    CompleteActionResponse,
    DashboardResponse,
    DeleteActionRequest,
    DeleteActionResponse,
    SuccessResponse,
    UpdateActionRequest,
)
from app.services.action_service import ActionService
from app.utils.auth import get_current_user_id
from app.utils.sanitizers import clean_text


router = APIRouter(prefix="/api/actions", tags=["actions"])


def _check_user_context(supplied_user_id, user_id: str) -> None:
    """Reject a body/query userId that differs from the token subject (403)."""
    if supplied_user_id is not None and clean_text(supplied_user_id) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized user context.",
        )


@router.post("/list", response_model=ActionListResponse, response_model_exclude_none=True)
async def list_actions(
    body: Optional[ActionListRequest] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List the caller's actions ordered by deadline.

    Args:
        body: Optional targetId filter
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Actions with their target's title as goalTitle
    """
    body = body or ActionListRequest()
    service = ActionService(db)
    actions = await service.list_actions(
        user_id=user_id,
        target_id=body.target_id,
        include_archived=body.include_archived,
    )
    return ActionListResponse(actions=actions)


@router.post("/update", response_model=SuccessResponse)
async def update_action(
    body: UpdateActionRequest,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update an action's status.

    Raises:
        HTTPException: 400 for a bad status, 404 if not found, 403 if not owned
    """
    service = ActionService(db)
    try:
        await service.update_status(user_id=user_id, action_id=body.action_id, status=body.status)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return SuccessResponse()


@router.post("/delete", response_model=DeleteActionResponse)
async def delete_action(
    body: DeleteActionRequest,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete an action.

    - mode "soft" (default) archives it
    - mode "hard" removes it permanently
    """
    service = ActionService(db)
    try:
        mode = await service.delete_action(user_id=user_id, action_id=body.action_id, mode=body.mode)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return DeleteActionResponse(mode=mode)


@router.post("/complete", response_model=CompleteActionResponse)
async def complete_action(
    body: CompleteActionRequest,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Check an action in for today.

    - A second check-in on the same day succeeds without writing
    """
    _check_user_context(body.user_id, user_id)

    service = ActionService(db)
    try:
        message = await service.complete_action(user_id=user_id, action_id=body.action_id)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return CompleteActionResponse(message=message)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    requested_user_id: Optional[str] = Query(None, alias="userId"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Active actions with today's check-in state and current streak.

    - userId, when given, must match the token (403 otherwise)
    """
    _check_user_context(requested_user_id, user_id)

    service = ActionService(db)
    actions = await service.dashboard(user_id=user_id)
    return DashboardResponse(actions=actions)
