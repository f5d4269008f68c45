import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scoutdesk.application import UnknownWatchError
from scoutdesk.core import settings
from scoutdesk.core.validation import ValidationError
from scoutdesk.infrastructure import ScoutingAPIError
from scoutdesk.routes import jobs, projects, queue, reports

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Scoutdesk Scouting API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(reports.router, prefix="/api")
    app.include_router(queue.router, prefix="/api")
    app.include_router(projects.router, prefix="/api")
    app.include_router(jobs.router, prefix="/api")

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(UnknownWatchError)
    async def unknown_watch(_: Request, exc: UnknownWatchError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": f"watch not found: {exc.args[0]}"})

    @app.exception_handler(ScoutingAPIError)
    async def upstream_payload_error(_: Request, exc: ScoutingAPIError) -> JSONResponse:
        logger.warning("Scouting backend reported an error: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(httpx.HTTPError)
    async def upstream_http_error(_: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.warning("Scouting backend call failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": "scouting backend unavailable"})

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Scoutdesk Scouting API",
                "docs": "/docs",
            }
        )

    return app


app = create_app()
