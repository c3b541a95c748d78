from fastapi import APIRouter, Depends

from godge.api.deps import get_coordinator
from godge.schemas.user import RegisterOut, RegisterRequest
from godge.services.coordinator import SubmissionCoordinator

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterOut, status_code=201)
def register(
    payload: RegisterRequest,
    coordinator: SubmissionCoordinator = Depends(get_coordinator),
):
    coordinator.register(payload.username, payload.password)
    return RegisterOut(username=payload.username)
