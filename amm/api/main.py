"""FastAPI application for the exchange quote service."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm import __version__
from amm.api.endpoints import router
from amm.api.models import ErrorResponse
from amm.errors import AMMError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Constant-Product Exchange",
    description="Read-only price quotes for constant-product exchanges",
    version=__version__,
)


@app.exception_handler(AMMError)
@app.exception_handler(ArithmeticError)
async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map pricing and validation failures to 400 with the error class name."""
    logger.info("request_rejected", path=request.url.path, error=type(exc).__name__)
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the quote service.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "amm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
