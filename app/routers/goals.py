"""Goal router - persists the finished wizard."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.exceptions import GoalWizardError, http_status
from app.models.generation import SaveGoalRequest, SaveGoalResponse
from app.services.goal_service import GoalService
from app.utils.auth import get_current_user_id
from app.utils.sanitizers import clean_text


router = APIRouter(prefix="/api", tags=["goals"])


@router.post("/save-goal-data", response_model=SaveGoalResponse)
async def save_goal_data(
    body: SaveGoalRequest,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Save a goal, its SMART breakdown and its actions.

    - Requires authentication; a supplied userId must match the token
    - Every action needs a title and a valid userDeadline
    - Not idempotent: a repeated request creates another target
    """
    if body.user_id is not None and clean_text(body.user_id) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized user context.",
        )

    service = GoalService(db)
    try:
        target_id = await service.save_goal(
            user_id=user_id,
            goal_title=body.goal_title,
            smart=body.smart,
            actions=body.actions,
        )
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)

    return SaveGoalResponse(success=True, target_id=target_id)
