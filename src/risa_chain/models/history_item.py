"""Pydantic models for operation history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from risa_chain.models.camel_model import CamelModel
from risa_chain.models.chain_execution_result import ChainExecutionResult


class HistoryItem(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: str  # "chain" or a step type
    input_text: str
    output_text: str
    success: bool
    error_message: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    chain_id: Optional[str] = None
    template_name: Optional[str] = None

    @classmethod
    def from_chain_result(cls, result: ChainExecutionResult) -> "HistoryItem":
        failed = result.failed_step
        return cls(
            type="chain",
            input_text=result.input_text,
            output_text=result.final_output,
            success=result.success,
            error_message=failed.error if failed is not None else None,
            timestamp=result.timestamp,
            chain_id=result.template_id,
            template_name=result.template_name,
        )


class HistoryFilter(CamelModel):
    type: Optional[str] = None
    success: Optional[bool] = None
    chain_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    def matches(self, item: HistoryItem) -> bool:
        if self.type is not None and item.type != self.type:
            return False
        if self.success is not None and item.success != self.success:
            return False
        if self.chain_id is not None and item.chain_id != self.chain_id:
            return False
        if self.date_from is not None and item.timestamp < self.date_from:
            return False
        if self.date_to is not None and item.timestamp > self.date_to:
            return False
        return True
