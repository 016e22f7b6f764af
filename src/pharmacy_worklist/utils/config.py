from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Central configuration loaded from environment variables."""

    # Backend
    api_base: str = field(
        default_factory=lambda: os.environ.get(
            "PHARMACY_WORKLIST_API_BASE", "http://localhost:3000"
        ).rstrip("/")
    )
    command_url: str | None = field(
        default_factory=lambda: os.environ.get("PHARMACY_WORKLIST_COMMAND_URL") or None
    )
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PHARMACY_WORKLIST_FETCH_TIMEOUT", "10"))
    )

    # Client identity announced on join
    role: str = field(default_factory=lambda: os.environ.get("PHARMACY_WORKLIST_ROLE", "pharmacy"))
    hospital_id: str | None = field(
        default_factory=lambda: os.environ.get("PHARMACY_WORKLIST_HOSPITAL_ID") or None
    )

    # Worklist behaviour
    stage_status: str = field(
        default_factory=lambda: os.environ.get("PHARMACY_WORKLIST_STAGE_STATUS", "pharmacy")
    )
    revert_on_send_failure: bool = field(
        default_factory=lambda: _env_flag("PHARMACY_WORKLIST_REVERT_ON_SEND_FAILURE")
    )

    # Logging
    log_level: str = field(
        default_factory=lambda: os.environ.get("PHARMACY_WORKLIST_LOG_LEVEL", "INFO")
    )


def get_config() -> Config:
    """Return a Config instance built from the current environment."""
    return Config()
