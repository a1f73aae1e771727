"""Generation router - LLM-backed wizard endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from app.exceptions import GoalWizardError, http_status
from app.models.generation import (
    GenerateActionsRequest,
    GenerateActionsResponse,
    GenerateMoreActionsRequest,
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    GenerateSmartRequest,
    GenerateSmartResponse,
)
from app.services.generation_service import GenerationService
from app.services.llm_client import get_completion_client


router = APIRouter(prefix="/api", tags=["generation"])


def get_generation_service(llm=Depends(get_completion_client)) -> GenerationService:
    """Dependency building the generation service around the completion client."""
    return GenerationService(llm)


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
async def generate_questions(
    body: GenerateQuestionsRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """
    Generate three clarifying questions for a goal.

    - Returns 400 if userInput is empty
    - Returns 500 if the model output cannot be parsed
    """
    try:
        questions = await service.generate_questions(body.user_input)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return GenerateQuestionsResponse(questions=questions)


@router.post("/generate-smart", response_model=GenerateSmartResponse)
async def generate_smart(
    body: GenerateSmartRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """Generate a goal title and SMART breakdown from the goal and answers."""
    try:
        result = await service.generate_smart(body.user_input, body.answers)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return GenerateSmartResponse.model_validate(result)


@router.post(
    "/generate-actions",
    response_model=GenerateActionsResponse,
    response_model_exclude_none=True,
)
async def generate_actions(
    body: GenerateActionsRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """
    Generate 6-10 action suggestions.

    - Requires goalTitle and all five SMART fields
    - Missing ids are backfilled; nothing is stored
    """
    try:
        actions = await service.generate_actions(body.goal_title, body.smart, body.target_id)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return GenerateActionsResponse.model_validate({"actions": actions})


@router.post(
    "/generate-more-actions",
    response_model=GenerateActionsResponse,
    response_model_exclude_none=True,
)
async def generate_more_actions(
    body: GenerateMoreActionsRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """
    Generate 4-8 additional suggestions unlike the previous ones.

    - Suggestions repeating a previous title are dropped
    - Returns 400 if every suggestion was a repeat
    """
    previous = [item.model_dump() for item in body.previous_actions or []]
    try:
        actions = await service.generate_more_actions(
            body.goal_title,
            body.smart,
            previous_actions=previous,
            target_id=body.target_id,
        )
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
    return GenerateActionsResponse.model_validate({"actions": actions})
