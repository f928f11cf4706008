"""Health check endpoint reporting nest connectivity."""

from datetime import UTC, datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

from nestmon.nest.models import CycleOutcome


def _device_checks(cycle: CycleOutcome) -> dict[str, dict[str, object]]:
    return {
        outcome.device.name: {
            "ok": outcome.ok,
            "error": str(outcome.error) if outcome.error else None,
        }
        for outcome in cycle.outcomes
    }


async def health_check(request: Request) -> JSONResponse:
    """Return healthy when at least one nest answered the last cycle."""
    cycle: CycleOutcome | None = request.app.state.service.last_cycle
    timestamp = datetime.now(UTC).isoformat()

    if cycle is None:
        return JSONResponse(
            {"status": "starting", "timestamp": timestamp},
            status_code=503,
        )

    is_healthy = cycle.connected > 0
    return JSONResponse(
        {
            "status": "healthy" if is_healthy else "unhealthy",
            "timestamp": timestamp,
            "connected": cycle.connected,
            "total": cycle.total,
            "checks": _device_checks(cycle),
        },
        status_code=200 if is_healthy else 503,
    )
