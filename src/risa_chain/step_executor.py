"""Execution of a single chain step."""

from __future__ import annotations

import logging
import time
from typing import Mapping

from risa_chain.models.chain_step import ChainStep
from risa_chain.models.step_result import StepResult
from risa_chain.transforms import TRANSFORMS, StepContext, Transform, get_transform

logger = logging.getLogger(__name__)


class StepExecutor:
    def __init__(self, transforms: Mapping[str, Transform] | None = None) -> None:
        self._transforms: Mapping[str, Transform] = TRANSFORMS if transforms is None else transforms

    async def execute(self, step: ChainStep, input_text: str, context: StepContext) -> StepResult:
        """
        Run one step. Failures are captured in the result, whose output then
        passes the input through unchanged.
        """
        started = time.perf_counter()
        try:
            transform = get_transform(step.type, self._transforms)
            output = await transform(input_text, step.params, context)
        except Exception as exc:
            duration = (time.perf_counter() - started) * 1000
            logger.debug("Step %s (%s) failed after %.2f ms: %s", step.id, step.type, duration, exc)
            return StepResult(
                step_id=step.id,
                step_type=step.type,
                input=input_text,
                output=input_text,
                success=False,
                error=str(exc) or type(exc).__name__,
                duration=duration,
                warnings=tuple(context.warnings),
            )
        duration = (time.perf_counter() - started) * 1000
        logger.debug("Step %s (%s) succeeded in %.2f ms", step.id, step.type, duration)
        return StepResult(
            step_id=step.id,
            step_type=step.type,
            input=input_text,
            output=output,
            success=True,
            duration=duration,
            warnings=tuple(context.warnings),
        )
