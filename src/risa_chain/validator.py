"""Static checks over a step list before execution."""

from __future__ import annotations

from typing import Iterable, Sequence

from risa_chain.keys import KeyResolver
from risa_chain.models.chain_step import ChainStep, RsaStep
from risa_chain.models.saved_key import SavedKey
from risa_chain.models.validation_result import ValidationResult


def validate_chain(steps: Sequence[ChainStep], keys: Iterable[SavedKey] | KeyResolver = ()) -> ValidationResult:
    if not any(step.enabled for step in steps):
        return ValidationResult(valid=False, errors=["At least one step must be enabled."])

    resolver = keys if isinstance(keys, KeyResolver) else KeyResolver(keys)
    errors: list[str] = []
    for position, step in enumerate(steps, start=1):
        if not step.enabled or not isinstance(step, RsaStep):
            continue
        key_id = step.params.key_id
        if not key_id:
            errors.append(f'Step {position} "{step.label}" requires a key to be selected.')
        elif key_id not in resolver:
            errors.append(f'Step {position} "{step.label}" references a key that no longer exists.')

    return ValidationResult(valid=not errors, errors=errors)
