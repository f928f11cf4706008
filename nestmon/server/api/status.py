from starlette.requests import Request
from starlette.responses import JSONResponse


async def get_status(request: Request) -> JSONResponse:
    """Return the rendered nest table and connection banner."""
    return JSONResponse(request.app.state.service.display.snapshot())
