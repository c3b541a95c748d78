from fastapi import APIRouter, Depends

from godge.api.deps import get_coordinator, get_current_user
from godge.schemas.submission import SubmissionIn, SubmissionOut
from godge.services.coordinator import SubmissionCoordinator

router = APIRouter(tags=["submissions"])


@router.post("/submit", response_model=SubmissionOut)
async def submit(
    payload: SubmissionIn,
    user: str = Depends(get_current_user),
    coordinator: SubmissionCoordinator = Depends(get_coordinator),
):
    outcome = await coordinator.submit(
        user, payload.task_name, payload.language, payload.code, payload.files
    )
    return SubmissionOut(passed=outcome.passed, error=outcome.error)
