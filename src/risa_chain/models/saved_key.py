"""Pydantic model for a stored RSA key pair."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import Field

from risa_chain.models.camel_model import CamelModel
from risa_chain.models.chain_step import RsaAlgorithm


class SavedKey(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    public_key: str  # SPKI PEM
    private_key: str  # PKCS#8 PEM
    key_size: int
    preferred_algorithm: RsaAlgorithm = "RSA-OAEP"
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
