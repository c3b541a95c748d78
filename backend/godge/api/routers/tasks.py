from fastapi import APIRouter, Depends

from godge.api.deps import get_coordinator
from godge.schemas.task import TaskOut
from godge.services.coordinator import SubmissionCoordinator

router = APIRouter(tags=["tasks"])


@router.get("/tasks", response_model=list[TaskOut])
async def list_tasks(coordinator: SubmissionCoordinator = Depends(get_coordinator)):
    return [TaskOut(name=t.name, description=t.description) for t in coordinator.tasks()]
