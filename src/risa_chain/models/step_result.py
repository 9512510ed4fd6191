"""Pydantic model for the outcome of a single step."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict

from risa_chain.models.camel_model import CamelModel


class StepResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    step_id: str
    step_type: str
    input: str
    output: str  # equals input when the step failed
    success: bool
    error: Optional[str] = None
    duration: float = 0.0  # milliseconds
    warnings: tuple[str, ...] = ()
