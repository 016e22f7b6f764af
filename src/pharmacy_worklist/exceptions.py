from __future__ import annotations


class WorklistError(Exception):
    """Base class for pharmacy worklist errors."""


class WorklistLoadError(WorklistError):
    """A bulk load of the worklist failed; the previous contents are kept."""


class MalformedEventError(WorklistError):
    """An inbound payload could not be turned into a work item."""

    def __init__(self, message: str, payload: object = None):
        super().__init__(message)
        self.payload = payload
