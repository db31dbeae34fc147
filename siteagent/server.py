"""HTTP boundary for SiteAgent command orchestration."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from siteagent.config import get_config
from siteagent.orchestrator import Orchestrator
from siteagent.schemas import (
    DiscoveryResponse,
    ErrorResponse,
    HealthResponse,
    OrchestrationResult,
    RunCommandRequest,
)

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="SiteAgent Orchestrator",
    description="Discovers site capabilities and executes free-text commands against them",
    version="0.1.0",
)

# The visualization panel calls from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def get_orchestrator() -> Orchestrator:
    """Build an orchestrator over the process-wide configuration."""
    return Orchestrator(get_config())


# --- HTTP Endpoints ---


@app.post("/run-agent", response_model=OrchestrationResult)
def run_agent(request: RunCommandRequest) -> OrchestrationResult:
    """Orchestrate a free-text command.

    Args:
        request: RunCommandRequest with the command string

    Returns:
        OrchestrationResult with the trace and per-action results
    """
    logger.info(f"Received command: {request.command!r}")
    result = get_orchestrator().run(request.command)
    logger.info(f"Completed command: {len(result.results)} result(s), {len(result.log)} trace entries")
    return result


@app.get("/intents", response_model=DiscoveryResponse)
def list_intents() -> DiscoveryResponse:
    """Run a discovery pass and return the merged intent pool."""
    return get_orchestrator().discover()


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Report server status and configured sites."""
    return HealthResponse(sites=list(get_config().sites))


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            detail=str(exc),
            error_code="INTERNAL_ERROR",
        ).model_dump(),
    )
