"""Pydantic model for application settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from risa_chain.models.chain_step import RsaAlgorithm


class AppSettings(BaseModel):
    default_algorithm: RsaAlgorithm = "RSA-OAEP"
    rsa_key_size: Literal[1024, 2048, 4096] = 2048
    record_history: bool = True
    history_retention_days: int = Field(default=30, ge=0)  # 0 keeps history forever
