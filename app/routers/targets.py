"""Target router - API endpoints for saved goals."""
from fastapi import APIRouter, Body, Depends, HTTPException, Query

from app.database import get_database
from app.exceptions import GoalWizardError, http_status
from app.models.action import DeleteMode
from app.models.target import (
    ArchiveTargetRequest,
    ArchiveTargetResponse,
    DeleteTargetResponse,
    TargetListResponse,
)
from app.services.target_service import TargetService
from app.utils.auth import get_current_user_id


router = APIRouter(prefix="/api/targets", tags=["targets"])


@router.get("", response_model=TargetListResponse)
async def list_targets(
    include_archived: bool = Query(False, alias="includeArchived"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List the caller's targets, newest first.

    - Archived targets are hidden unless includeArchived=true
    """
    service = TargetService(db)
    targets = await service.list_targets(user_id=user_id, include_archived=include_archived)
    return TargetListResponse(targets=targets)


@router.delete("/{target_id}", response_model=DeleteTargetResponse)
async def delete_target(
    target_id: str,
    mode: DeleteMode = Query(DeleteMode.SOFT),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a target.

    - mode=soft (default) archives the target and its actions
    - mode=hard removes the target, its actions and their check-ins
    - Returns 404 if not found, 403 if owned by someone else
    """
    service = TargetService(db)
    try:
        return await service.delete_target(user_id=user_id, target_id=target_id, mode=mode)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)


@router.patch("/{target_id}/archive", response_model=ArchiveTargetResponse)
async def archive_target(
    target_id: str,
    body: ArchiveTargetRequest | None = Body(None),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Archive (default) or unarchive a target.

    - The archived flag cascades to every action of the target
    """
    archived = body.archived if body is not None else None
    service = TargetService(db)
    try:
        return await service.set_archived(user_id=user_id, target_id=target_id, archived=archived)
    except GoalWizardError as e:
        raise HTTPException(status_code=http_status(e), detail=e.message)
