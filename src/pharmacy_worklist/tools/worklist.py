from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from pharmacy_worklist.exceptions import WorklistLoadError
from pharmacy_worklist.models.commands import ITEM_CHANGED, STAGE_ITEM_UPDATED
from pharmacy_worklist.models.view import WorklistView
from pharmacy_worklist.services.worklist import PharmacyWorklist


def _view_summary(view: WorklistView) -> dict:
    return {
        "search": view.search,
        "items": [item.to_payload() for item in view.items],
        "counts": view.counts.model_dump(),
    }


def register(mcp: FastMCP, worklist: PharmacyWorklist) -> None:
    """Register pharmacy worklist MCP tools."""

    @mcp.tool()
    async def list_prescriptions(search: str = "") -> dict:
        """List prescriptions on the pharmacy worklist.

        Args:
            search: Case-insensitive part of a patient name to filter by.
                Counts always cover the whole worklist.
        """
        return _view_summary(worklist.set_search(search))

    @mcp.tool()
    async def mark_prepared(item_id: int) -> dict:
        """Mark a prescription as prepared.

        The worklist updates immediately; the backend is told in the
        background and is not waited on.
        """
        worklist.prepare(item_id)
        return _view_summary(worklist.view)

    @mcp.tool()
    async def mark_delivered(item_id: int) -> dict:
        """Mark a prescription as delivered and the visit as completed."""
        worklist.deliver(item_id)
        return _view_summary(worklist.view)

    @mcp.tool()
    async def reload_prescriptions() -> dict:
        """Reload the whole worklist from the backend."""
        try:
            loaded = await worklist.reload()
        except WorklistLoadError as exc:
            return {"success": False, "error": str(exc)}
        return {"success": True, "loaded": loaded}

    @mcp.tool()
    async def relay_push_event(event: str, payload: dict[str, Any] | None = None) -> dict:
        """Feed a push notification from the backend into the worklist.

        Args:
            event: "worklist-item-changed" or "stage-item-updated"
            payload: The event body as sent by the backend
        """
        if event not in (ITEM_CHANGED, STAGE_ITEM_UPDATED):
            return {"success": False, "error": f"Unknown event {event!r}"}
        errors = await worklist.push(event, payload)
        return {"success": not errors, "errors": [str(e) for e in errors]}
