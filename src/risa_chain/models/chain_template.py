"""Pydantic model for a saved chain template."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from risa_chain.models.camel_model import CamelModel
from risa_chain.models.chain_step import ChainStep


class ChainTemplate(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    steps: list[ChainStep] = Field(default_factory=list)
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: Optional[datetime] = None
    tags: list[str] = Field(default_factory=list)
