"""
Pydantic models for the exporter.

Shared data models across the watcher, the scheduler and the CLI.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from icowatch.utils.helpers import now_utc


# =====================================================
# Event Models
# =====================================================

class TouchKind(str, Enum):
    """Filesystem notification kinds that trigger an export."""
    CREATED = "created"
    MODIFIED = "modified"
    RENAMED_TO = "renamed_to"


class TouchEvent(BaseModel):
    """A source file was created, modified or renamed into place."""
    path: str
    kind: TouchKind
    seen_at: datetime = Field(default_factory=now_utc)


# =====================================================
# Job Models
# =====================================================

class JobOutcome(str, Enum):
    """Terminal state of a conversion job."""
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"  # superseded by a newer event
    STALE = "stale"  # source vanished before conversion
    FAILED = "failed"
    EXHAUSTED = "exhausted"


class JobReport(BaseModel):
    """Summary of a finished conversion job."""
    path: str
    outcome: JobOutcome
    attempts: int = 0
    output_path: Optional[str] = None
    detail: Optional[str] = None
    finished_at: datetime = Field(default_factory=now_utc)
