"""Pydantic model for the outcome of a chain run."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from risa_chain.models.camel_model import CamelModel
from risa_chain.models.step_result import StepResult


class ChainExecutionResult(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    template_id: Optional[str] = None
    template_name: Optional[str] = None
    success: bool
    steps: list[StepResult] = Field(default_factory=list)
    final_output: str
    total_duration: float = 0.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    input_text: str

    @property
    def failed_step(self) -> Optional[StepResult]:
        for step in self.steps:
            if not step.success:
                return step
        return None
