"""Pydantic model describing an available step module."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from risa_chain.models.camel_model import CamelModel


class ModuleInfo(CamelModel):
    name: str
    description: str
    category: Literal["encoding", "crypto", "http"]
    required_params: list[str] = Field(default_factory=list)
