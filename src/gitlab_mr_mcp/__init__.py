"""MCP server exposing GitLab merge request listing and raw changes."""

import asyncio
import logging
import os
import sys

import click
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    # stdout carries the stdio transport; diagnostics go to stderr only.
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="MCP transport type",
)
@click.option("--port", default=8000, help="Port for HTTP transports")
@click.option("--host", default="127.0.0.1", help="Host for HTTP transports")
@click.option("--gitlab-url", envvar="GITLAB_URL", help="GitLab host or instance URL")
@click.option("--gitlab-api-base", envvar="GITLAB_API_BASE", help="Full API root, used verbatim")
@click.option("--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab personal access token")
@click.option("--insecure-tls", is_flag=True, help="Disable TLS certificate verification")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for stderr diagnostics [env: GITLAB_MCP_LOG_LEVEL, default: INFO]",
)
def main(
    transport: str,
    port: int,
    host: str,
    gitlab_url: str | None,
    gitlab_api_base: str | None,
    gitlab_token: str | None,
    insecure_tls: bool,
    log_level: str | None,
) -> None:
    """Run the GitLab merge request MCP server."""
    load_dotenv(find_dotenv(usecwd=True))
    # Read after .env is loaded so a level set there applies.
    _configure_logging(log_level or os.getenv("GITLAB_MCP_LOG_LEVEL", "INFO"))

    if gitlab_url:
        os.environ["GITLAB_URL"] = gitlab_url
    if gitlab_api_base:
        os.environ["GITLAB_API_BASE"] = gitlab_api_base
    if gitlab_token:
        os.environ["GITLAB_TOKEN"] = gitlab_token
    if insecure_tls:
        os.environ["INSECURE_TLS"] = "true"

    from .servers.gitlab import mcp

    run_kwargs: dict = {"transport": transport}
    if transport != "stdio":
        run_kwargs["host"] = host
        run_kwargs["port"] = port

    logger.info("Starting GitLab MR MCP server on %s", transport)
    try:
        asyncio.run(mcp.run_async(show_banner=False, **run_kwargs))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error while running the MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()
