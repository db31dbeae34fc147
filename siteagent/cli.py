"""CLI for SiteAgent - capability discovery and command orchestration."""

from __future__ import annotations

import json
import os

import click
from pydantic import ValidationError

from siteagent.config import CONFIG_ENV_VAR, ConfigError, OrchestratorConfig, load_config
from siteagent.schemas import ActionStatus, RunCommandRequest, TraceKind

# Trace kind -> terminal colour
KIND_COLORS = {
    TraceKind.INFO: "blue",
    TraceKind.ACTION: "cyan",
    TraceKind.SUCCESS: "green",
    TraceKind.ERROR: "red",
    TraceKind.WARNING: "yellow",
}


def _load(ctx: click.Context) -> OrchestratorConfig:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version="0.1.0", prog_name="siteagent")
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help=f"JSON config file (defaults to ${CONFIG_ENV_VAR} or built-in sites)",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None) -> None:
    """SiteAgent - orchestrate commands across AI-actionable sites.

    Discovers agent.json manifests and executes matching intents.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@click.option("--port", default=8000, help="Port to run the server on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, port: int, host: str, reload: bool) -> None:
    """Start the SiteAgent HTTP server."""
    import uvicorn

    config_path = ctx.obj.get("config_path")
    if config_path:
        # The server loads its config on first request, possibly in a reloader child
        os.environ[CONFIG_ENV_VAR] = os.path.abspath(config_path)

    click.echo(f"Starting SiteAgent server on {host}:{port}")
    uvicorn.run(
        "siteagent.server:app",
        host=host,
        port=port,
        reload=reload,
    )


@main.command()
@click.argument("command")
@click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)
@click.pass_context
def run(ctx: click.Context, command: str, raw: bool) -> None:
    """Run a command against the configured sites.

    \b
    Example:
        siteagent run "show me the latest video"
        siteagent run "post the new t-shirt on linkedin and schedule an interview"
    """
    from siteagent.orchestrator import Orchestrator

    try:
        request = RunCommandRequest(command=command)
    except ValidationError as e:
        raise click.BadParameter("command must not be empty", param_hint="COMMAND") from e

    result = Orchestrator(_load(ctx)).run(request.command)

    if raw:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    for entry in result.log:
        click.secho(f"[{entry.kind.value:<7}] {entry.message}", fg=KIND_COLORS[entry.kind])

    if result.results:
        click.echo(f"\n{'=' * 60}")
        click.echo(f"Results ({len(result.results)}):")
        click.echo(f"{'=' * 60}")
        for action in result.results:
            if action.status == ActionStatus.SUCCESS:
                click.echo(f"  {action.intent_name} @ {action.site}: {json.dumps(action.data)}")
            else:
                click.echo(f"  {action.intent_name} @ {action.site}: FAILED ({action.error})")


@main.command()
@click.option(
    "--raw",
    is_flag=True,
    help="Output raw JSON instead of formatted text",
)
@click.pass_context
def discover(ctx: click.Context, raw: bool) -> None:
    """Discover and list the intents published by all sites."""
    from siteagent.orchestrator import Orchestrator

    response = Orchestrator(_load(ctx)).discover()

    if raw:
        click.echo(json.dumps(response.model_dump(mode="json"), indent=2))
        return

    for entry in response.log:
        click.secho(f"[{entry.kind.value:<7}] {entry.message}", fg=KIND_COLORS[entry.kind])

    if response.intents:
        click.echo(f"\nDiscovered {len(response.intents)} intents:\n")
        for intent in response.intents:
            click.echo(f"  - {intent.name} ({intent.site}) {intent.endpoint}")
            if intent.description:
                click.echo(f"      {intent.description}")
    else:
        click.echo("\nNo intents discovered.")


@main.command()
def mcp() -> None:
    """Run the MCP server exposing run_command and list_intents.

    The tools forward to a running `siteagent serve` instance
    (set SITEAGENT_URL to override http://localhost:8000).

    \b
    Configure in .mcp.json:
        {
            "mcpServers": {
                "siteagent": {
                    "command": "siteagent",
                    "args": ["mcp"]
                }
            }
        }
    """
    from mcp_siteagent.server import mcp as mcp_server
    mcp_server.run()


@main.command()
@click.pass_context
def sites(ctx: click.Context) -> None:
    """List configured sites."""
    config = _load(ctx)

    click.echo("Configured sites:")
    for site in config.site_list():
        click.echo(f"  - {site.name}: {site.base_url}{config.manifest_path}")


if __name__ == "__main__":
    main()
