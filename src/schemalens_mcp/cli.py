"""Command-line entrypoint for the schemalens-mcp FastMCP server."""

from __future__ import annotations

from fastmcp.utilities.logging import get_logger

from schemalens_mcp.server import mcp

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)


def main() -> None:
    """Start the schemalens-mcp FastMCP server via CLI."""
    try:
        mcp.run()
    except KeyboardInterrupt:
        _logger.info("Interrupted by user. Exiting cleanly.")


if __name__ == "__main__":
    main()
