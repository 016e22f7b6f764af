from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from pharmacy_worklist.clients.backend import BackendClient
from pharmacy_worklist.exceptions import WorklistLoadError
from pharmacy_worklist.models.commands import JOIN, MOVE_ITEM
from pharmacy_worklist.services.worklist import PharmacyWorklist
from pharmacy_worklist.tools import worklist as worklist_tools
from pharmacy_worklist.utils.config import get_config
from pharmacy_worklist.utils.logger import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle for the pharmacy worklist."""
    config = get_config()

    # --- Backend ---
    backend = BackendClient(config)

    # --- Worklist ---
    worklist = PharmacyWorklist(config, fetcher=backend.fetch_items)
    worklist.outbound.subscribe(MOVE_ITEM, backend.send_intent)
    worklist.outbound.subscribe(JOIN, backend.send_intent)

    try:
        await worklist.start()
    except WorklistLoadError:
        logger.warning("Starting with an empty worklist; use reload_prescriptions to retry")

    # --- Register MCP tools ---
    worklist_tools.register(server, worklist)

    # --- Register MCP resource ---
    @server.resource("pharmacy://stats")
    async def get_stats() -> str:
        counts = worklist.view.counts
        return (
            "Pharmacy Worklist:\n"
            f"- Pending: {counts.pending}\n"
            f"- Prepared: {counts.prepared}\n"
            f"- Delivered: {counts.delivered}\n"
        )

    logger.info("Pharmacy worklist server ready (%d items)", len(worklist.store))

    try:
        yield
    finally:
        await worklist.stop()
        await backend.close()
        logger.info("Pharmacy worklist server stopped")


def create_server() -> FastMCP:
    """Build and return the configured FastMCP server."""
    config = get_config()
    setup_logging(config.log_level)

    server = FastMCP("PharmacyWorklist", lifespan=lifespan)
    return server


# Module-level instance used by the CLI and ``python -m``
mcp = create_server()

if __name__ == "__main__":
    mcp.run()
