"""Discovery, matching and dispatch pipeline for one command."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

import httpx

from siteagent.concurrency import run_ordered
from siteagent.config import OrchestratorConfig
from siteagent.dispatcher import ActionDispatcher
from siteagent.inference import today_utc
from siteagent.matcher import DEFAULT_RULES, IntentMatcher, Rule
from siteagent.registry import CapabilityRegistry, IntentPool
from siteagent.schemas import DiscoveryResponse, OrchestrationResult
from siteagent.trace import ExecutionTrace, ResultAggregator

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs Start -> Discovering -> EvaluatingCategory* -> Summarizing -> Done.

    Each call to run() owns a fresh trace and result list; nothing is kept
    between invocations.
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        client: httpx.Client | None = None,
        rules: tuple[Rule, ...] = DEFAULT_RULES,
        today: Callable[[], date] = today_utc,
    ):
        """Initialize the orchestrator.

        Args:
            config: Sites and execution settings
            client: HTTP client to use; a new one per invocation if omitted
            rules: Matcher rule table
            today: Clock used for date inference
        """
        self.config = config
        self.client = client
        self.matcher = IntentMatcher(rules=rules, today=today)

    def _client(self) -> httpx.Client:
        if self.client is not None:
            return self.client
        return httpx.Client(timeout=self.config.timeout_seconds)

    def _discover(self, client: httpx.Client, trace: ExecutionTrace) -> IntentPool:
        return CapabilityRegistry(self.config, client).discover(trace)

    def discover(self) -> DiscoveryResponse:
        """Run a discovery pass on its own."""
        trace = ExecutionTrace()
        client = self._client()
        try:
            pool = self._discover(client, trace)
        finally:
            if client is not self.client:
                client.close()
        return DiscoveryResponse(intents=pool.intents(), log=trace.entries())

    def run(self, command: str) -> OrchestrationResult:
        """Orchestrate a command and return the trace and results."""
        trace = ExecutionTrace()
        results = ResultAggregator()

        logger.info(f"Processing command: {command!r}")
        trace.info(f'AI Agent Activated. Processing command: "{command}"')

        client = self._client()
        try:
            pool = self._discover(client, trace)
            trace.info("Analyzing command and executing identified actions...")

            actions = self.matcher.plan(command, pool)
            dispatcher = ActionDispatcher(client)
            outcomes = run_ordered(
                dispatcher.execute,
                actions,
                mode=self.config.concurrency,
                max_workers=self.config.max_workers,
            )
        finally:
            if client is not self.client:
                client.close()

        for outcome in outcomes:
            trace.extend(outcome.entries)
            results.append(outcome.result)

        if not actions:
            trace.warning(f'No specific actionable intents found for command: "{command}"')

        trace.info("AI Agent Orchestration Complete.")
        logger.info(f"Completed command with {len(results)} action(s), {len(pool)} intents discovered")

        return OrchestrationResult(log=trace.entries(), results=results.results())
