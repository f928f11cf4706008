"""Visibility endpoint, the web counterpart of the page visibility event."""

from pydantic import BaseModel, StrictBool, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from nestmon.logging import get_logger

logger = get_logger("server.api.visibility")


class VisibilityChange(BaseModel):
    """Body of a visibility change notification."""

    hidden: StrictBool


async def update_visibility(request: Request) -> JSONResponse:
    """Record a viewer visibility change; regaining it refreshes the nests."""
    try:
        raw_data = await request.json()
    except ValueError:
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    try:
        change = VisibilityChange.model_validate(raw_data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        return JSONResponse({"errors": errors}, status_code=400)

    service = request.app.state.service
    was_hidden = service.hidden
    service.visibility_changed(change.hidden)
    refreshed = was_hidden and not change.hidden
    logger.debug("Visibility hidden=%s (refresh=%s)", change.hidden, refreshed)
    return JSONResponse({"hidden": change.hidden, "refreshed": refreshed})
