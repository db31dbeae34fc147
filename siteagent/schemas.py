"""Pydantic schemas for SiteAgent request/response contracts."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TraceKind(str, Enum):
    """Kinds of trace entries."""

    INFO = "info"
    ACTION = "action"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class ActionStatus(str, Enum):
    """Outcome of a dispatched action."""

    SUCCESS = "success"
    FAILED = "failed"


class Category(str, Enum):
    """Intent matcher categories."""

    VIDEO = "video"
    MERCH = "merch"
    AVAILABILITY = "availability"
    PUBLISH = "publish"
    SCHEDULING = "scheduling"


class HttpMethod(str, Enum):
    """Dispatch methods: GET sends a query string, POST a JSON body."""

    GET = "GET"
    POST = "POST"


# --- Sites and Intents ---


class Site(BaseModel):
    """A configured site publishing an agent.json manifest."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    base_url: str = Field(..., min_length=1)


class ManifestIntent(BaseModel):
    """Intent entry as published in a site manifest."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    description: str = ""
    endpoint: str


class Manifest(BaseModel):
    """A site's agent.json document."""

    model_config = ConfigDict(extra="allow")

    intents: list[ManifestIntent]


class Intent(ManifestIntent):
    """Discovered intent, annotated with its owning site."""

    base_url: str
    site: str


# --- Trace and Results ---


class TraceEntry(BaseModel):
    """A single observability event."""

    model_config = ConfigDict(frozen=True)

    kind: TraceKind
    message: str


class ActionResult(BaseModel):
    """Outcome record for one dispatched action."""

    intent_name: str
    site: str
    status: ActionStatus
    data: Any = None
    error: str | None = None


# --- Request/Response Schemas ---


class RunCommandRequest(BaseModel):
    """Request to orchestrate a free-text command."""

    command: str = Field(
        ...,
        min_length=1,
        description="Free-text instruction to orchestrate",
    )

    @field_validator("command")
    @classmethod
    def command_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command must not be empty")
        return value


class OrchestrationResult(BaseModel):
    """Summary returned for one invocation."""

    status: Literal["success"] = "success"
    log: list[TraceEntry] = Field(default_factory=list)
    results: list[ActionResult] = Field(default_factory=list)


class DiscoveryResponse(BaseModel):
    """Snapshot of a discovery pass."""

    intents: list[Intent] = Field(default_factory=list)
    log: list[TraceEntry] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response for failed requests."""

    status: Literal["error"] = "error"
    detail: str
    error_code: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = "healthy"
    sites: list[str] = Field(default_factory=list)
