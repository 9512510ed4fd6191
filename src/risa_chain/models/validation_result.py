"""Pydantic model for chain validation output."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
