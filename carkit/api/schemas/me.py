from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class MeResponse(BaseModel):
    id: str
    provider: str
    email: str | None
    created_at: datetime
