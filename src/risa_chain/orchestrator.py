"""Helper wiring stores, crypto and the chain executor together."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence

from risa_chain.chain_executor import ChainExecutor
from risa_chain.crypto import CryptographyProvider, CryptoProvider
from risa_chain.http_templates import build_url
from risa_chain.models.app_settings import AppSettings
from risa_chain.models.chain_execution_result import ChainExecutionResult
from risa_chain.models.chain_step import ChainStep, RsaAlgorithm
from risa_chain.models.history_item import HistoryFilter, HistoryItem
from risa_chain.models.http_template import HttpTemplate
from risa_chain.models.saved_key import SavedKey
from risa_chain.models.validation_result import ValidationResult
from risa_chain.settings import load_settings
from risa_chain.storage import JsonCollection
from risa_chain.template_registry import TemplateRegistry
from risa_chain.validator import validate_chain


class Orchestrator:
    def __init__(
        self,
        data_dir: Path,
        template_roots: list[Path] | None = None,
        crypto: CryptoProvider | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self.data_dir: Path = data_dir
        self.settings: AppSettings = settings or load_settings(data_dir)
        self.keys: JsonCollection[SavedKey] = JsonCollection(data_dir / "keys.json", SavedKey)
        self.history: JsonCollection[HistoryItem] = JsonCollection(
            data_dir / "history.json", HistoryItem, newest_first=True
        )
        self.http_templates: JsonCollection[HttpTemplate] = JsonCollection(
            data_dir / "http_templates.json", HttpTemplate
        )
        self.templates: TemplateRegistry = TemplateRegistry([data_dir / "templates", *(template_roots or [])])
        self.crypto: CryptoProvider = crypto or CryptographyProvider()
        self.executor: ChainExecutor = ChainExecutor(self.crypto)

    async def run(
        self,
        steps: Sequence[ChainStep],
        input_text: str,
        template_id: Optional[str] = None,
        template_name: Optional[str] = None,
    ) -> ChainExecutionResult:
        # One snapshot of the key collection per run.
        keys = self.keys.list()
        result = await self.executor.execute_chain(
            steps,
            input_text,
            keys=keys,
            template_id=template_id,
            template_name=template_name,
        )
        if self.settings.record_history:
            self.history.save(HistoryItem.from_chain_result(result))
            self.prune_history()
        return result

    async def run_template(self, template_ref: str, input_text: str) -> ChainExecutionResult:
        template = self.templates.get(template_ref)
        result = await self.run(template.steps, input_text, template_id=template.id, template_name=template.name)
        self.templates.touch(template.id)
        return result

    def validate(self, steps: Sequence[ChainStep]) -> ValidationResult:
        return validate_chain(steps, self.keys.list())

    async def generate_key(
        self,
        name: str,
        key_size: int | None = None,
        preferred_algorithm: RsaAlgorithm | None = None,
    ) -> SavedKey:
        pair = await self.crypto.generate_key_pair(key_size or self.settings.rsa_key_size)
        key = SavedKey(
            name=name,
            public_key=pair.public_key,
            private_key=pair.private_key,
            key_size=pair.key_size,
            preferred_algorithm=preferred_algorithm or self.settings.default_algorithm,
            created=pair.created,
        )
        self.keys.save(key)
        return key

    def history_items(self, history_filter: HistoryFilter | None = None) -> list[HistoryItem]:
        items = self.history.list()
        if history_filter is None:
            return items
        return [item for item in items if history_filter.matches(item)]

    def prune_history(self) -> int:
        retention_days = self.settings.history_retention_days
        if not retention_days:
            return 0
        cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
        return self.history.retain(lambda item: item.timestamp >= cutoff)

    def get_http_template(self, template_ref: str) -> HttpTemplate:
        """Look an HTTP template up by id, then by case-insensitive name."""
        templates = self.http_templates.list()
        for template in templates:
            if template.id == template_ref:
                return template
        for template in templates:
            if template.name.lower() == template_ref.lower():
                return template
        raise LookupError(f"HTTP template not found: {template_ref}")

    def add_http_template(self, template: HttpTemplate) -> None:
        if self.http_templates.get(template.id) is not None:
            raise ValueError(f"An HTTP template with id {template.id!r} already exists.")
        self.http_templates.save(template)

    def update_http_template(self, template: HttpTemplate) -> None:
        if self.http_templates.get(template.id) is None:
            raise LookupError(f"HTTP template not found: {template.id}")
        self.http_templates.save(template)

    def use_http_template(
        self,
        template_ref: str,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
    ) -> str:
        template = self.get_http_template(template_ref)
        url = build_url(
            template.base_url,
            template.path_template,
            path_params,
            query_params,
            template.query_template,
        )
        self.http_templates.save(template.model_copy(update={"last_used": datetime.now(timezone.utc)}))
        return url
