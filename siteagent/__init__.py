"""SiteAgent Orchestration Prototype.

Discovers the capability manifests (agent.json) published by a fixed set of
sites, matches a free-text command against the discovered intents and
dispatches HTTP calls to execute them, returning an ordered trace.
"""

__version__ = "0.1.0"
