"""Activity log data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class ActivityLog(BaseModel):
    """Single entry for a save, load, export or reset."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    action: str  # "save" | "load" | "export" | "reset"
    document_id: str | None = None
    template_id: str | None = None
    export_format: str | None = None
    elapsed_seconds: float = 0.0
    bytes_written: int = 0
    success: bool = True
    error_message: str | None = None
