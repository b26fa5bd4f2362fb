from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from .errors import CatalogError
from .schemas import CATEGORIES, Part

logger = logging.getLogger(__name__)


class PartsRepository:
    """
    Parts Repository

    Holds the static parts catalog loaded from a JSON file shaped as
    ``{category: [part, ...]}``. Catalog order is preserved per category.
    """

    def __init__(self, data_path: Path):
        """
        Parameters:
            data_path: path of the catalog JSON file
        """
        self.data_path = data_path
        self._parts: Dict[str, List[Part]] = {}
        self.reload()

    def reload(self) -> None:
        """
        Reload the catalog from disk.

        Each entry is tagged with the category it is listed under, so the
        file does not need to repeat it. Categories outside the builder slots
        are ignored.
        """
        if not self.data_path.exists():
            raise CatalogError(f"catalog file missing: {self.data_path}")
        try:
            with self.data_path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise CatalogError(f"catalog file is not valid JSON: {exc}") from exc

        parts: Dict[str, List[Part]] = {category: [] for category in CATEGORIES}
        try:
            for category, items in raw.items():
                if category not in parts:
                    logger.warning("skipping unknown catalog category %r", category)
                    continue
                parts[category] = [
                    Part.model_validate({**item, "category": category}) for item in items
                ]
        except ValidationError as exc:
            raise CatalogError(f"catalog entry is malformed: {exc}") from exc

        self._parts = parts
        logger.info(
            "catalog loaded from %s: %d parts",
            self.data_path,
            sum(len(items) for items in parts.values()),
        )

    def all_parts(self) -> List[Part]:
        return [part for category in CATEGORIES for part in self._parts.get(category, [])]

    def by_category(self, category: str) -> List[Part]:
        return list(self._parts.get(category, []))

    def find_by_id(self, category: str, part_id: str) -> Part | None:
        for part in self._parts.get(category, []):
            if part.id == part_id:
                return part
        return None

    def brands(self, category: str) -> List[str]:
        return sorted({part.brand for part in self._parts.get(category, [])})
