"""HTTP dispatch of planned actions to their owning sites."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from siteagent.matcher import PlannedAction
from siteagent.schemas import (
    ActionResult,
    ActionStatus,
    HttpMethod,
    Intent,
    TraceEntry,
    TraceKind,
)

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Raised when an action's HTTP call or response decoding fails."""

    pass


@dataclass
class ActionOutcome:
    """Result of one dispatch together with its trace entries."""

    result: ActionResult
    entries: list[TraceEntry] = field(default_factory=list)


class ActionDispatcher:
    """Executes planned actions over HTTP."""

    def __init__(self, client: httpx.Client):
        self.client = client

    def call(self, intent: Intent, method: HttpMethod, params: dict[str, Any]) -> Any:
        """Issue the HTTP call for an intent and decode the JSON body.

        GET sends params as a query string, POST as a JSON body. The status
        code is not inspected: any decodable body counts as data.

        Raises:
            DispatchError: On an invalid URL, transport failure or undecodable body
        """
        url = f"{intent.base_url}{intent.endpoint}"
        logger.info(f"Dispatching {method.value} {url} intent={intent.name}")

        try:
            if method == HttpMethod.POST:
                response = self.client.post(url, json=params)
            else:
                response = self.client.get(url, params=params or None)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise DispatchError(str(e) or type(e).__name__) from e

        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            logger.error(f"Non-JSON response from {url} (status {response.status_code})")
            raise DispatchError(f"Invalid JSON response from {intent.site}: {e}") from e

    def execute(self, action: PlannedAction) -> ActionOutcome:
        """Dispatch one action. Failures are recorded, never raised."""
        intent = action.intent
        entries = [TraceEntry(kind=TraceKind.ACTION, message=action.action_message)]

        try:
            data = self.call(intent, action.rule.method, action.params)
        except DispatchError as e:
            entries.append(TraceEntry(
                kind=TraceKind.ERROR,
                message=f"{action.rule.failure_label}: {e}",
            ))
            return ActionOutcome(
                result=ActionResult(
                    intent_name=intent.name,
                    site=intent.site,
                    status=ActionStatus.FAILED,
                    error=str(e),
                ),
                entries=entries,
            )

        entries.append(TraceEntry(kind=TraceKind.SUCCESS, message=action.rule.summarize(data)))
        return ActionOutcome(
            result=ActionResult(
                intent_name=intent.name,
                site=intent.site,
                status=ActionStatus.SUCCESS,
                data=data,
            ),
            entries=entries,
        )
