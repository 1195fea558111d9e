"""
Command Line Entry Point
========================

``python -m statuspage_mcp stdio`` runs the MCP server on stdin/stdout.
``python -m statuspage_mcp http [--host HOST] [--port PORT]`` runs the HTTP bridge.
"""

from typing import List, Optional
import argparse
import asyncio

from statuspage_mcp.config.logging import get_logger, setup_logging
from statuspage_mcp.config.settings import get_settings

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="statuspage-mcp", description="Run the StatusPage MCP server"
    )
    subparsers = parser.add_subparsers(dest="transport", required=True)

    subparsers.add_parser("stdio", help="Serve MCP over stdin/stdout")

    http_parser = subparsers.add_parser("http", help="Serve the HTTP JSON-RPC and SSE bridge")
    http_parser.add_argument("--host", default=None, help="HTTP host (default from settings)")
    http_parser.add_argument(
        "--port", type=int, default=None, help="HTTP port (default from settings)"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the StatusPage MCP server."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    if args.transport == "stdio":
        from statuspage_mcp.mcp_server.server import StatusPageMCPServer

        asyncio.run(StatusPageMCPServer(settings=settings).run())
        return

    from statuspage_mcp.api.main import run_http_server

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if overrides:
        settings = settings.model_copy(update=overrides)

    logger.info("Starting HTTP transport", host=settings.host, port=settings.port)
    run_http_server(settings)


if __name__ == "__main__":
    main()
