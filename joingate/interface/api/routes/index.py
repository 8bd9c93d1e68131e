"""Index route."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from joingate.application.messages import Messages
from joingate.interface.api.pages import render_index

router = APIRouter(tags=["index"], route_class=DishkaRoute)


@router.get("/", response_class=HTMLResponse)
async def index(messages: FromDishka[Messages]) -> HTMLResponse:
    """Status page listing the served endpoints."""
    return HTMLResponse(
        render_index(
            messages.text("page_index_title"),
            messages.text("page_index_body"),
            ["GET /auth?payload=...", "GET /health"],
            lang=messages.locale,
        )
    )
