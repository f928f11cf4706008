"""Status API entrypoint.

Runs the Starlette application using uvicorn, with the nest polling
loop running inside the application lifespan.

Usage: python -m nestmon.server
"""
import uvicorn

from nestmon.lib.config import get_settings


def main() -> None:
    """Run the status API server."""
    cfg = get_settings().server
    uvicorn.run(
        "nestmon.server:create_app",
        factory=True,
        host=cfg.host,
        port=cfg.port,
    )


if __name__ == "__main__":
    main()
