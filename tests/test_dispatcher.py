"""Tests for HTTP action dispatch."""

import json

import httpx
import pytest

from siteagent.dispatcher import ActionDispatcher, DispatchError
from siteagent.matcher import DEFAULT_RULES, PlannedAction
from siteagent.schemas import ActionStatus, Category, HttpMethod, Intent, TraceKind

RULES = {rule.category: rule for rule in DEFAULT_RULES}


def _intent(name: str, endpoint: str, host: str, site: str) -> Intent:
    return Intent(
        name=name,
        description=f"Run {name}",
        endpoint=endpoint,
        base_url=f"https://{host}",
        site=site,
    )


@pytest.fixture
def dispatcher(http_client) -> ActionDispatcher:
    return ActionDispatcher(http_client)


@pytest.fixture
def merch_action() -> PlannedAction:
    return PlannedAction(
        rule=RULES[Category.MERCH],
        intent=_intent("get_merch_item", "/api/merch", "creator.test", "creator"),
        params={"item_name": "new t-shirt"},
    )


@pytest.fixture
def publish_action() -> PlannedAction:
    return PlannedAction(
        rule=RULES[Category.PUBLISH],
        intent=_intent("publish_post", "/api/publish", "publisher.test", "publisher"),
        params={"platform": "facebook", "content": "hello", "media_url": "https://example.com/x.jpg"},
    )


class TestCall:
    """Test the raw HTTP call."""

    def test_get_sends_query_string(self, dispatcher, fake_sites, merch_action):
        data = dispatcher.call(merch_action.intent, HttpMethod.GET, merch_action.params)

        assert data == {"name": "new t-shirt", "price": "$25"}
        request = fake_sites.dispatched()[0]
        assert request.method == "GET"
        assert request.url.params["item_name"] == "new t-shirt"
        assert request.content == b""

    def test_get_without_params_has_no_query(self, dispatcher, fake_sites):
        intent = _intent("get_latest_youtube_video", "/api/latest-video", "creator.test", "creator")
        dispatcher.call(intent, HttpMethod.GET, {})

        assert fake_sites.dispatched()[0].url.query == b""

    def test_post_sends_json_body(self, dispatcher, fake_sites, publish_action):
        data = dispatcher.call(publish_action.intent, HttpMethod.POST, publish_action.params)

        assert data == {"message": "Post published to facebook"}
        request = fake_sites.dispatched()[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == publish_action.params

    def test_connection_refused_raises(self, dispatcher, fake_sites, merch_action):
        fake_sites.down.add("creator.test")
        with pytest.raises(DispatchError, match="Connection refused"):
            dispatcher.call(merch_action.intent, HttpMethod.GET, merch_action.params)

    def test_non_json_body_raises(self, dispatcher, fake_sites, merch_action):
        fake_sites.routes[("creator.test", "/api/merch")] = lambda request: httpx.Response(
            502, text="Bad Gateway"
        )
        with pytest.raises(DispatchError, match="Invalid JSON response from creator"):
            dispatcher.call(merch_action.intent, HttpMethod.GET, merch_action.params)

    def test_deeply_nested_body_raises(self, dispatcher, fake_sites, merch_action):
        nested = "[" * 200000 + "]" * 200000
        fake_sites.routes[("creator.test", "/api/merch")] = lambda request: httpx.Response(
            200, text=nested
        )
        with pytest.raises(DispatchError, match="Invalid JSON response from creator"):
            dispatcher.call(merch_action.intent, HttpMethod.GET, merch_action.params)

    def test_unparseable_url_raises(self, dispatcher):
        intent = _intent("get_merch_item", ":abc/x", "creator.test", "creator")
        with pytest.raises(DispatchError):
            dispatcher.call(intent, HttpMethod.GET, {})

    def test_error_status_with_json_body_is_data(self, dispatcher, fake_sites, merch_action):
        """The status code is not inspected; a JSON body is returned as data."""
        fake_sites.routes[("creator.test", "/api/merch")] = lambda request: httpx.Response(
            404, json={"error": "Item not found"}
        )
        data = dispatcher.call(merch_action.intent, HttpMethod.GET, merch_action.params)
        assert data == {"error": "Item not found"}


class TestExecute:
    """Test action execution with trace entries."""

    def test_success_outcome(self, dispatcher, merch_action):
        outcome = dispatcher.execute(merch_action)

        assert outcome.result.status == ActionStatus.SUCCESS
        assert outcome.result.intent_name == "get_merch_item"
        assert outcome.result.site == "creator"
        assert outcome.result.data == {"name": "new t-shirt", "price": "$25"}
        assert outcome.result.error is None
        assert [(e.kind, e.message) for e in outcome.entries] == [
            (TraceKind.ACTION, "Executing: Run get_merch_item for 'new t-shirt'"),
            (TraceKind.SUCCESS, "Merch details fetched: new t-shirt - $25"),
        ]

    def test_failure_outcome(self, dispatcher, fake_sites, publish_action):
        fake_sites.down.add("publisher.test")
        outcome = dispatcher.execute(publish_action)

        assert outcome.result.status == ActionStatus.FAILED
        assert outcome.result.data is None
        assert outcome.result.error == "Connection refused"
        assert [e.kind for e in outcome.entries] == [TraceKind.ACTION, TraceKind.ERROR]
        assert outcome.entries[1].message == "Failed to publish post: Connection refused"

    def test_timeout_is_a_failure(self, dispatcher, fake_sites, merch_action):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fake_sites.routes[("creator.test", "/api/merch")] = slow
        outcome = dispatcher.execute(merch_action)

        assert outcome.result.status == ActionStatus.FAILED
        assert outcome.result.error == "timed out"
