"""Capability discovery from site agent.json manifests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from siteagent.concurrency import run_ordered
from siteagent.config import OrchestratorConfig
from siteagent.schemas import Intent, Manifest, Site, TraceEntry, TraceKind
from siteagent.trace import ExecutionTrace

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Raised when a site's manifest cannot be fetched or parsed."""

    pass


@dataclass
class SiteDiscovery:
    """Outcome of discovering a single site."""

    site: Site
    url: str
    intents: list[Intent] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def trace_entries(self) -> list[TraceEntry]:
        """Trace entries describing this discovery, in emission order."""
        entries = [
            TraceEntry(
                kind=TraceKind.INFO,
                message=f"Discovering capabilities from {self.site.name.upper()} Site: {self.url}",
            )
        ]
        if self.ok:
            entries.append(TraceEntry(
                kind=TraceKind.SUCCESS,
                message=f"Discovered {len(self.intents)} intents from {self.site.name}.",
            ))
        else:
            entries.append(TraceEntry(
                kind=TraceKind.ERROR,
                message=f"Error discovering from {self.site.name}: {self.error}",
            ))
        return entries


class IntentPool:
    """Merged intents from all sites, keyed by intent name.

    The first site to publish a name owns it; later duplicates are rejected.
    """

    def __init__(self) -> None:
        self._intents: dict[str, Intent] = {}

    def add(self, intent: Intent) -> Intent | None:
        """Add an intent. Returns the existing owner if the name is taken."""
        existing = self._intents.get(intent.name)
        if existing is not None:
            return existing
        self._intents[intent.name] = intent
        return None

    def get(self, name: str) -> Intent | None:
        return self._intents.get(name)

    def intents(self) -> list[Intent]:
        return list(self._intents.values())

    def __contains__(self, name: object) -> bool:
        return name in self._intents

    def __iter__(self) -> Iterator[Intent]:
        return iter(self._intents.values())

    def __len__(self) -> int:
        return len(self._intents)


class CapabilityRegistry:
    """Fetches every configured site's manifest and builds an IntentPool."""

    def __init__(self, config: OrchestratorConfig, client: httpx.Client):
        """Initialize the registry.

        Args:
            config: Orchestrator configuration (sites, manifest path, concurrency)
            client: HTTP client used for manifest fetches
        """
        self.config = config
        self.client = client

    def manifest_url(self, site: Site) -> str:
        return f"{site.base_url}{self.config.manifest_path}"

    def fetch_manifest(self, site: Site) -> Manifest:
        """Fetch and validate one site's manifest.

        Raises:
            DiscoveryError: On an invalid URL, transport failure, non-2xx status or malformed body
        """
        url = self.manifest_url(site)
        manifest_name = self.config.manifest_path.lstrip("/")

        try:
            response = self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to connect to {site.name} at {url}: {e}")
            raise DiscoveryError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"{site.name} returned {response.status_code} for {url}")
            raise DiscoveryError(
                f"Failed to fetch {manifest_name} from {site.name}: "
                f"{response.status_code} {response.reason_phrase}"
            )

        try:
            payload = response.json()
        except (ValueError, RecursionError) as e:
            raise DiscoveryError(f"Invalid JSON in {manifest_name}: {e}") from e

        try:
            return Manifest.model_validate(payload)
        except ValidationError as e:
            raise DiscoveryError(
                f"Malformed {manifest_name}: {e.error_count()} validation error(s)"
            ) from e

    def discover_site(self, site: Site) -> SiteDiscovery:
        """Discover one site, capturing any DiscoveryError in the outcome."""
        url = self.manifest_url(site)
        try:
            manifest = self.fetch_manifest(site)
        except DiscoveryError as e:
            logger.warning(f"Discovery failed for {site.name}: {e}")
            return SiteDiscovery(site=site, url=url, error=str(e))

        intents = [
            Intent.model_validate(
                {**entry.model_dump(), "base_url": site.base_url, "site": site.name}
            )
            for entry in manifest.intents
        ]
        logger.info(f"Discovered {len(intents)} intents from {site.name}")
        return SiteDiscovery(site=site, url=url, intents=intents)

    def discover(self, trace: ExecutionTrace) -> IntentPool:
        """Discover all configured sites and merge their intents.

        Outcomes are appended to the trace in configured site order, whatever
        the concurrency mode.
        """
        outcomes = run_ordered(
            self.discover_site,
            self.config.site_list(),
            mode=self.config.concurrency,
            max_workers=self.config.max_workers,
        )

        pool = IntentPool()
        for outcome in outcomes:
            trace.extend(outcome.trace_entries())
            for intent in outcome.intents:
                owner = pool.add(intent)
                if owner is not None:
                    logger.warning(
                        f"Duplicate intent {intent.name} from {intent.site}, owned by {owner.site}"
                    )
                    trace.warning(
                        f"Intent '{intent.name}' from {intent.site} ignored: "
                        f"already provided by {owner.site}."
                    )
        return pool
