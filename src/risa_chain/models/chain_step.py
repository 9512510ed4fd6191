"""Pydantic models for chain steps, one variant per step type."""

from __future__ import annotations

import uuid
from typing import Annotated, Any, Iterable, Literal, Optional, Union, get_args

from pydantic import Field, TypeAdapter

from risa_chain.models.camel_model import CamelModel

StepType = Literal[
    "url-encode",
    "url-decode",
    "base64-encode",
    "base64-decode",
    "rsa-encrypt",
    "rsa-decrypt",
    "http-parse",
    "http-build",
]
STEP_TYPES: tuple[str, ...] = get_args(StepType)

RsaAlgorithm = Literal["RSA-OAEP", "RSA-PKCS1"]
MappingSource = Literal["auto", "field", "fixed"]
ParseOutputType = Literal["full", "field", "param"]


class NoParams(CamelModel):
    pass


class RsaParams(CamelModel):
    key_id: Optional[str] = None
    algorithm: Optional[RsaAlgorithm] = None


class HttpParseParams(CamelModel):
    path_template: str = ""
    query_template: str = ""  # JSON array of expected query keys
    output_type: ParseOutputType = "full"
    output_field: Optional[str] = None
    output_param: Optional[str] = None


class ParamMapping(CamelModel):
    source: MappingSource = "auto"
    value: str = ""  # JSON path for "field", literal for "fixed"


class HttpBuildParams(CamelModel):
    base_url: str = ""
    path_template: str = ""
    query_template: str = ""
    param_mappings: dict[str, ParamMapping] = Field(default_factory=dict)
    query_mappings: dict[str, ParamMapping] = Field(default_factory=dict)


class BaseStep(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    type: str
    enabled: bool = True
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.type


class EncodingStep(BaseStep):
    type: Literal["url-encode", "url-decode", "base64-encode", "base64-decode"]
    params: NoParams = Field(default_factory=NoParams)


class RsaStep(BaseStep):
    type: Literal["rsa-encrypt", "rsa-decrypt"]
    params: RsaParams = Field(default_factory=RsaParams)


class HttpParseStep(BaseStep):
    type: Literal["http-parse"]
    params: HttpParseParams = Field(default_factory=HttpParseParams)


class HttpBuildStep(BaseStep):
    type: Literal["http-build"]
    params: HttpBuildParams = Field(default_factory=HttpBuildParams)


ChainStep = Annotated[
    Union[EncodingStep, RsaStep, HttpParseStep, HttpBuildStep],
    Field(discriminator="type"),
]

_STEP_LIST_ADAPTER: TypeAdapter[list[ChainStep]] = TypeAdapter(list[ChainStep])


def parse_steps(data: Any) -> list[ChainStep]:
    """Validate a list of raw step records (camelCase or snake_case keys)."""
    return _STEP_LIST_ADAPTER.validate_python(data)


def parse_steps_json(text: str) -> list[ChainStep]:
    return _STEP_LIST_ADAPTER.validate_json(text)


def enabled_steps(steps: Iterable[ChainStep]) -> list[ChainStep]:
    return [step for step in steps if step.enabled]
