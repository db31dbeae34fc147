"""Pytest configuration and fixtures for SiteAgent tests."""

import json
from datetime import date

import httpx
import pytest

from siteagent.config import OrchestratorConfig, reset_config
from siteagent.orchestrator import Orchestrator

CREATOR_URL = "https://creator.test"
PUBLISHER_URL = "https://publisher.test"
SCHEDULER_URL = "https://scheduler.test"

FIXED_TODAY = date(2026, 3, 14)

CREATOR_MANIFEST = {
    "name": "Creator Demo",
    "intents": [
        {
            "name": "get_latest_youtube_video",
            "description": "Get the creator's latest YouTube video",
            "endpoint": "/api/latest-video",
        },
        {
            "name": "get_merch_item",
            "description": "Get details for a merch item",
            "endpoint": "/api/merch",
            "parameters": {"item_name": "string"},
        },
        {
            "name": "get_availability",
            "description": "Check the creator's availability",
            "endpoint": "/api/availability",
        },
    ],
}

PUBLISHER_MANIFEST = {
    "intents": [
        {
            "name": "publish_post",
            "description": "Publish a post to social media",
            "endpoint": "/api/publish",
        },
    ],
}

SCHEDULER_MANIFEST = {
    "intents": [
        {
            "name": "book_interview",
            "description": "Book an interview slot",
            "endpoint": "/api/book-interview",
        },
    ],
}


def _latest_video(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"title": "Building the AI-First Web", "views": 1200})


def _merch(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"name": request.url.params["item_name"], "price": "$25"})


def _availability(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={
        "date": request.url.params["date"],
        "available_slots": ["10:00 AM", "2:00 PM"],
    })


def _publish(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"message": f"Post published to {body['platform']}"})


def _book(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"message": f"Interview booked for {body['interviewee_name']}"})


class FakeSites:
    """In-process stand-in for the creator/publisher/scheduler sites."""

    def __init__(self):
        self.manifests = {
            "creator.test": CREATOR_MANIFEST,
            "publisher.test": PUBLISHER_MANIFEST,
            "scheduler.test": SCHEDULER_MANIFEST,
        }
        self.routes = {
            ("creator.test", "/api/latest-video"): _latest_video,
            ("creator.test", "/api/merch"): _merch,
            ("creator.test", "/api/availability"): _availability,
            ("publisher.test", "/api/publish"): _publish,
            ("scheduler.test", "/api/book-interview"): _book,
        }
        self.down: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host in self.down:
            raise httpx.ConnectError("Connection refused", request=request)

        if request.url.path == "/agent.json":
            manifest = self.manifests.get(host)
            if manifest is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=manifest)

        route = self.routes.get((host, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    def dispatched(self) -> list[httpx.Request]:
        """Requests other than manifest fetches."""
        return [r for r in self.requests if r.url.path != "/agent.json"]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from the process-wide config and $SITEAGENT_CONFIG."""
    monkeypatch.delenv("SITEAGENT_CONFIG", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_sites() -> FakeSites:
    return FakeSites()


@pytest.fixture
def http_client(fake_sites: FakeSites):
    client = httpx.Client(transport=httpx.MockTransport(fake_sites.handler))
    yield client
    client.close()


@pytest.fixture
def site_config() -> OrchestratorConfig:
    return OrchestratorConfig(sites={
        "creator": CREATOR_URL,
        "publisher": PUBLISHER_URL,
        "scheduler": SCHEDULER_URL,
    })


@pytest.fixture
def orchestrator(site_config, http_client) -> Orchestrator:
    return Orchestrator(site_config, client=http_client, today=lambda: FIXED_TODAY)
