"""Pydantic model for a saved HTTP URL template."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from risa_chain.models.camel_model import CamelModel


class HttpTemplate(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    base_url: str
    path_template: str = ""
    query_template: str = ""  # JSON array of query keys
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: Optional[datetime] = None
