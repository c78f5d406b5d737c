from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from app.dependencies import get_forwarding
from services.forwarding import ForwardingService

OFFLINE_MESSAGE = "Raspberry ist wahrscheinlich Offline"

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter(include_in_schema=False)


@router.get("/forward", name="forward", response_class=HTMLResponse)
async def forward(
    request: Request,
    forwarding: ForwardingService = Depends(get_forwarding),
) -> Response:
    target = forwarding.resolve_target()
    if target is None:
        return templates.TemplateResponse(
            request=request,
            name="offline.html",
            context={"message": OFFLINE_MESSAGE},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return RedirectResponse(target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
