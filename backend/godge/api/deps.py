from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from godge.core.errors import UnauthorizedError
from godge.services.coordinator import SubmissionCoordinator

basic = HTTPBasic(auto_error=False)


def get_coordinator(request: Request) -> SubmissionCoordinator:
    return request.app.state.coordinator


def get_current_user(
    creds: HTTPBasicCredentials | None = Depends(basic),
    coordinator: SubmissionCoordinator = Depends(get_coordinator),
) -> str:
    # runs before the body is looked at, so bad credentials never reach the queue
    if not creds or not coordinator.authenticate(creds.username, creds.password):
        raise UnauthorizedError()
    return creds.username
