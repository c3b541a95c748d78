from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from godge.api.deps import get_coordinator
from godge.services.coordinator import SubmissionCoordinator
from godge.services.scoreboard import render_scoreboard

router = APIRouter(tags=["scoreboard"])


@router.get("/scoreboard", response_class=HTMLResponse)
async def scoreboard(coordinator: SubmissionCoordinator = Depends(get_coordinator)):
    return HTMLResponse(render_scoreboard(coordinator.scoreboard()))
