"""Parameter inference from command text using substring heuristics."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

# Merch
TSHIRT_ITEM = "new t-shirt"
DEFAULT_MERCH_ITEM = "creator mug"

# Publishing
DEFAULT_PLATFORM = "twitter"
PLATFORM_PRIORITY = ("facebook", "linkedin")
POST_CONTENT_MAX_CHARS = 80
POST_TEMPLATE = 'AI orchestrated post: "{excerpt}..." - Learn more at the AI-First Web Demo!'
DEMO_MEDIA_URL = "https://example.com/demo-image.jpg"

# Scheduling example payload, not inferred from the command
INTERVIEWEE_NAME = "Jane Doe"
INTERVIEW_DATE = "2025-08-05"
INTERVIEW_TIME_SLOT = "10:00 AM"
INTERVIEW_DURATION_MINUTES = 60


def today_utc() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def no_params(command: str, today: date) -> dict[str, Any]:
    return {}


def infer_merch_params(command: str, today: date) -> dict[str, Any]:
    """Pick the merch item. Anything but a t-shirt falls back to the mug."""
    item_name = TSHIRT_ITEM if "t-shirt" in command.lower() else DEFAULT_MERCH_ITEM
    return {"item_name": item_name}


def infer_availability_params(command: str, today: date) -> dict[str, Any]:
    return {"date": today.isoformat()}


def infer_platform(command: str) -> str:
    """Infer the social platform: facebook, then linkedin, else twitter."""
    lowered = command.lower()
    for platform in PLATFORM_PRIORITY:
        if platform in lowered:
            return platform
    return DEFAULT_PLATFORM


def build_post_content(command: str) -> str:
    """Echo the command, truncated, inside the post template."""
    return POST_TEMPLATE.format(excerpt=command[:POST_CONTENT_MAX_CHARS])


def infer_publish_params(command: str, today: date) -> dict[str, Any]:
    return {
        "platform": infer_platform(command),
        "content": build_post_content(command),
        "media_url": DEMO_MEDIA_URL,
    }


def infer_scheduling_params(command: str, today: date) -> dict[str, Any]:
    return {
        "interviewee_name": INTERVIEWEE_NAME,
        "date": INTERVIEW_DATE,
        "time_slot": INTERVIEW_TIME_SLOT,
        "duration_minutes": INTERVIEW_DURATION_MINUTES,
    }
