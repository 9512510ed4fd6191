"""Rendering of chain results for the command line."""

from __future__ import annotations

import json
from typing import Literal

import yaml

from risa_chain.models.chain_execution_result import ChainExecutionResult

ReportFormat = Literal["yaml", "json", "text"]


def describe_failure(result: ChainExecutionResult) -> str | None:
    for position, step in enumerate(result.steps, start=1):
        if not step.success:
            return f"Step {position} ({step.step_type}) failed: {step.error}"
    return None


def render_result(result: ChainExecutionResult, fmt: ReportFormat = "yaml") -> str:
    if fmt == "text":
        failure = describe_failure(result)
        return (failure if failure is not None else result.final_output) + "\n"
    payload = result.model_dump(mode="json", by_alias=True)
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(payload, allow_unicode=True, default_flow_style=False, sort_keys=False)
