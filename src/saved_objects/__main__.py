"""Entry point for the saved objects server."""

import argparse
import asyncio

import uvicorn

from saved_objects import __version__
from saved_objects.config import setup_logging
from saved_objects.config.settings import Settings
from saved_objects.server import create_server, initialize_services, shutdown_services


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="saved-objects",
        description="Saved Objects - export/import of reference-linked saved objects",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Serve the HTTP API instead of the MCP stdio server",
    )
    return parser.parse_args()


async def main(settings: Settings) -> None:
    """Main entry point for the MCP server."""
    await initialize_services(settings)

    mcp = create_server()

    try:
        # Use run_stdio_async() since we're already in an async context
        await mcp.run_stdio_async()
    finally:
        await shutdown_services()


def serve_http(settings: Settings) -> None:
    """Run the HTTP API under uvicorn."""
    from saved_objects.api.app import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def cli() -> None:
    """CLI entry point."""
    args = parse_args()

    settings = Settings()
    setup_logging(settings)

    if args.http:
        serve_http(settings)
    else:
        asyncio.run(main(settings))


if __name__ == "__main__":
    cli()
