from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from journey_planner.adapters.api.controllers.journeys import router as journeys_router
from journey_planner.domain.exceptions import RoutingError, UnknownStop

logger = logging.getLogger(__name__)

app = FastAPI(title="Journey Planner")
app.include_router(journeys_router)


@app.exception_handler(FileNotFoundError)
async def snapshot_missing_handler(
    request: Request, exc: FileNotFoundError
) -> JSONResponse:
    """The network snapshot has not been exported yet; the client may retry."""

    logger.error("Network snapshot unavailable: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": f"Network snapshot unavailable: {exc.filename or exc}"},
    )


@app.exception_handler(RoutingError)
async def routing_error_handler(request: Request, exc: RoutingError) -> JSONResponse:
    status_code = 404 if isinstance(exc, UnknownStop) else 422
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Starlette's default 500 body is plain text; the mobile client expects JSON.
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
