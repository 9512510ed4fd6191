"""Chain template registry backed by Markdown files with YAML front matter."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import frontmatter
import yaml
from pydantic import ValidationError

from risa_chain.models.chain_template import ChainTemplate

logger = logging.getLogger(__name__)


def load_template_file(path: Path) -> ChainTemplate:
    """
    Front matter holds the template fields (camelCase); the Markdown body is
    the description. The file stem is used as the id when none is given.
    """
    post = frontmatter.load(str(path))
    data = dict(post.metadata)
    data.setdefault("id", path.stem)
    data["description"] = post.content.strip()
    return ChainTemplate.model_validate(data)


def dump_template(template: ChainTemplate) -> str:
    metadata = template.model_dump(mode="json", by_alias=True, exclude={"description"}, exclude_none=True)
    post = frontmatter.Post(template.description)
    post.metadata.update(metadata)
    return frontmatter.dumps(post) + "\n"


class TemplateRegistry:
    def __init__(self, template_roots: list[Path]):
        # New and updated templates are written to the first root.
        self.template_roots = template_roots
        self._index: dict[str, Path] | None = None

    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for root in self.template_roots:
            if not root.exists():
                continue
            for path in sorted(root.rglob("*.md")):
                try:
                    template = load_template_file(path)
                except (ValidationError, yaml.YAMLError) as exc:
                    logger.warning("Skipped invalid chain template %s: %s", path, exc)
                    continue
                if template.id in index:
                    continue
                index[template.id] = path
        return index

    def _get_index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def list_templates(self) -> list[ChainTemplate]:
        return [load_template_file(path) for path in self._get_index().values()]

    def get(self, template_ref: str) -> ChainTemplate:
        """Look a template up by id, then by case-insensitive name."""
        index = self._get_index()
        path = index.get(template_ref)
        if path is not None:
            return load_template_file(path)
        for template in self.list_templates():
            if template.name.lower() == template_ref.lower():
                return template
        raise FileNotFoundError(f"Chain template not found: {template_ref} (searched: {self.template_roots})")

    def save(self, template: ChainTemplate) -> Path:
        if not self.template_roots:
            raise ValueError("No template directory configured.")
        index = self._get_index()
        path = index.get(template.id)
        if path is None or not path.is_relative_to(self.template_roots[0]):
            path = self.template_roots[0] / f"{template.id}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_template(template), encoding="utf-8")
        self._index = None
        return path

    def remove(self, template_id: str) -> bool:
        path = self._get_index().get(template_id)
        if path is None:
            return False
        path.unlink()
        self._index = None
        return True

    def touch(self, template_id: str) -> ChainTemplate:
        template = self.get(template_id)
        updated = template.model_copy(update={"last_used": datetime.now(timezone.utc)})
        path = self.save(updated)
        logger.debug("Recorded use of template %s in %s", template_id, path)
        return updated
