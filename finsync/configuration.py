"""Mini README: Centralised configuration for Finsync.

Structure:
    * SalaryPolicy - how the derived salary is picked from a loaded batch.
    * FinsyncSettings - Pydantic settings model read from ``FINSYNC_*`` vars.
    * get_settings - cached accessor shared by the CLI and web interface.

Usage:
    ``get_settings()`` validates the environment once per process. Set
    ``FINSYNC_STORE_BACKEND=firestore`` together with the Firebase options to
    talk to a real project; the default ``memory`` backend keeps everything in
    process for demos and tests.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class SalaryPolicy(str, Enum):
    """Strategies for deriving the salary scalar from a batch of records."""

    LAST_IN_BATCH = "last_in_batch"
    MOST_RECENT = "most_recent"
    SUM = "sum"


class FinsyncSettings(BaseSettings):
    """Runtime configuration for the Finsync dashboard."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field("INFO", description="Root logging level name.")
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the dashboard service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the dashboard service exposes.",
        ge=1,
        le=65535,
    )
    store_backend: str = Field(
        "memory",
        description="Remote store provider name registered with the store registry.",
    )
    firebase_credentials: Optional[Path] = Field(
        None,
        description=(
            "Path to a Firebase service account JSON file. Leave unset to use"
            " application default credentials."
        ),
    )
    firebase_project_id: Optional[str] = Field(
        None, description="Firebase project identifier override."
    )
    salary_policy: SalaryPolicy = Field(
        SalaryPolicy.LAST_IN_BATCH,
        description="How the derived salary is chosen when a batch holds several incomes.",
    )
    notification_history: int = Field(
        20,
        description="Number of user notifications retained for the dashboard.",
        ge=1,
    )
    max_sessions: int = Field(
        256,
        description="Signed-in dashboard sessions kept in memory; the least recently used is dropped.",
        ge=1,
    )

    class Config:
        env_prefix = "FINSYNC_"
        env_file = ".env"
        case_sensitive = False

    @validator("firebase_credentials", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        """Expand user directories in the credentials path when provided."""

        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()

    @validator("store_backend", pre=True)
    def _normalise_backend(cls, value: str) -> str:
        """Store backend names are matched case-insensitively."""

        return str(value).strip().lower()


@lru_cache()
def get_settings() -> FinsyncSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FinsyncSettings()
