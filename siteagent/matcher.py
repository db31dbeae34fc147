"""Rule table mapping command keywords to intents."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from siteagent.inference import (
    infer_availability_params,
    infer_merch_params,
    infer_publish_params,
    infer_scheduling_params,
    no_params,
    today_utc,
)
from siteagent.registry import IntentPool
from siteagent.schemas import Category, HttpMethod, Intent

logger = logging.getLogger(__name__)

ParamBuilder = Callable[[str, date], dict[str, Any]]

MISSING = "n/a"


def _field(data: Any, key: str) -> str:
    """Render a response field for a trace message."""
    if isinstance(data, dict) and data.get(key) is not None:
        return str(data[key])
    return MISSING


def _slots(data: Any) -> str:
    slots = data.get("available_slots") if isinstance(data, dict) else None
    if isinstance(slots, list):
        return ", ".join(str(slot) for slot in slots)
    return MISSING


@dataclass(frozen=True)
class Rule:
    """One independent matcher category."""

    category: Category
    keywords: tuple[str, ...]
    intent_name: str
    method: HttpMethod
    build_params: ParamBuilder
    describe: Callable[[dict[str, Any]], str]
    summarize: Callable[[Any], str]
    failure_label: str

    def matches(self, command: str) -> bool:
        """True if any keyword occurs in the lower-cased command."""
        lowered = command.lower()
        return any(keyword in lowered for keyword in self.keywords)


@dataclass(frozen=True)
class PlannedAction:
    """A matched rule resolved against a discovered intent."""

    rule: Rule
    intent: Intent
    params: dict[str, Any]

    @property
    def action_message(self) -> str:
        return f"Executing: {self.intent.description}{self.rule.describe(self.params)}"


# Rule definitions, evaluated in this order
DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        category=Category.VIDEO,
        keywords=("video", "youtube"),
        intent_name="get_latest_youtube_video",
        method=HttpMethod.GET,
        build_params=no_params,
        describe=lambda params: "",
        summarize=lambda data: f"Video details fetched: {_field(data, 'title')}",
        failure_label="Failed to get video",
    ),
    Rule(
        category=Category.MERCH,
        keywords=("merch", "t-shirt", "mug"),
        intent_name="get_merch_item",
        method=HttpMethod.GET,
        build_params=infer_merch_params,
        describe=lambda params: f" for '{params['item_name']}'",
        summarize=lambda data: (
            f"Merch details fetched: {_field(data, 'name')} - {_field(data, 'price')}"
        ),
        failure_label="Failed to get merch",
    ),
    Rule(
        category=Category.AVAILABILITY,
        keywords=("availability", "check date"),
        intent_name="get_availability",
        method=HttpMethod.GET,
        build_params=infer_availability_params,
        describe=lambda params: f" for '{params['date']}'",
        summarize=lambda data: f"Availability for {_field(data, 'date')}: {_slots(data)}",
        failure_label="Failed to get availability",
    ),
    Rule(
        category=Category.PUBLISH,
        keywords=("publish", "post", "social media"),
        intent_name="publish_post",
        method=HttpMethod.POST,
        build_params=infer_publish_params,
        describe=lambda params: f" to {params['platform']}",
        summarize=lambda data: f"Post simulated: {_field(data, 'message')}",
        failure_label="Failed to publish post",
    ),
    Rule(
        category=Category.SCHEDULING,
        keywords=("book interview", "schedule"),
        intent_name="book_interview",
        method=HttpMethod.POST,
        build_params=infer_scheduling_params,
        describe=lambda params: f" for {params['interviewee_name']}",
        summarize=lambda data: f"Booking simulated: {_field(data, 'message')}",
        failure_label="Failed to book interview",
    ),
)


class IntentMatcher:
    """Evaluates every rule against a command and plans the matching actions."""

    def __init__(
        self,
        rules: Sequence[Rule] = DEFAULT_RULES,
        today: Callable[[], date] = today_utc,
    ):
        self.rules = tuple(rules)
        self.today = today

    def matching_rules(self, command: str) -> list[Rule]:
        """Rules whose predicate matches, in table order."""
        return [rule for rule in self.rules if rule.matches(command)]

    def plan(self, command: str, pool: IntentPool) -> list[PlannedAction]:
        """Resolve matching rules to actions.

        A rule whose intent was not discovered contributes nothing.
        """
        current_date = self.today()
        actions = []
        for rule in self.matching_rules(command):
            intent = pool.get(rule.intent_name)
            if intent is None:
                logger.info(f"Rule {rule.category.value} matched but {rule.intent_name} not discovered")
                continue
            actions.append(PlannedAction(
                rule=rule,
                intent=intent,
                params=rule.build_params(command, current_date),
            ))
        return actions
