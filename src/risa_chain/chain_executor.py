"""Sequential execution of chain steps."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from risa_chain.crypto import CryptoProvider
from risa_chain.keys import KeyResolver
from risa_chain.models.chain_execution_result import ChainExecutionResult
from risa_chain.models.chain_step import ChainStep, enabled_steps
from risa_chain.models.saved_key import SavedKey
from risa_chain.models.step_result import StepResult
from risa_chain.step_executor import StepExecutor
from risa_chain.transforms import StepContext


class ChainExecutor:
    def __init__(self, crypto: CryptoProvider, step_executor: StepExecutor | None = None) -> None:
        self._crypto: CryptoProvider = crypto
        self._step_executor: StepExecutor = step_executor or StepExecutor()

    async def execute_chain(
        self,
        steps: Sequence[ChainStep],
        input_text: str,
        *,
        keys: Iterable[SavedKey] = (),
        template_id: Optional[str] = None,
        template_name: Optional[str] = None,
    ) -> ChainExecutionResult:
        resolver = KeyResolver(keys)
        results: list[StepResult] = []
        current = input_text

        for step in enabled_steps(steps):
            context = StepContext(keys=resolver, crypto=self._crypto)
            result = await self._step_executor.execute(step, current, context)
            results.append(result)
            if not result.success:
                break
            current = result.output

        success = all(result.success for result in results)
        return ChainExecutionResult(
            template_id=template_id,
            template_name=template_name,
            success=success,
            steps=results,
            final_output=current if success else input_text,
            total_duration=sum(result.duration for result in results),
            input_text=input_text,
        )
