"""Persistent (shop id, UBO number) -> shareholder code mappings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from src.ubo.errors import MappingConflictError
from src.ubo.schema import ShareholderMapping

logger = logging.getLogger(__name__)


class ShareholderMappingStore:
    """Store interface. Entries are created once and never overwritten.

    ``find`` followed by ``save`` is not atomic; callers running extraction
    concurrently must serialize per shop id.
    """

    def find(self, shop_id: str, ubo_number: int) -> Optional[str]:
        raise NotImplementedError

    def save(self, shop_id: str, ubo_number: int, shareholder_code: str) -> None:
        raise NotImplementedError

    def all(self) -> List[ShareholderMapping]:
        raise NotImplementedError


class InMemoryShareholderMappingStore(ShareholderMappingStore):
    def __init__(self, mappings: Optional[List[ShareholderMapping]] = None) -> None:
        self._mappings: Dict[Tuple[str, int], ShareholderMapping] = {}
        for mapping in mappings or []:
            self._mappings[(mapping.shop_id, mapping.ubo_number)] = mapping

    def find(self, shop_id: str, ubo_number: int) -> Optional[str]:
        mapping = self._mappings.get((str(shop_id), ubo_number))
        return mapping.shareholder_code if mapping else None

    def save(self, shop_id: str, ubo_number: int, shareholder_code: str) -> None:
        key = (str(shop_id), ubo_number)
        existing = self._mappings.get(key)
        if existing is not None:
            if existing.shareholder_code == shareholder_code:
                return
            raise MappingConflictError(
                f"shop {shop_id} ubo {ubo_number} already mapped to {existing.shareholder_code}, "
                f"refusing {shareholder_code}"
            )
        self._mappings[key] = ShareholderMapping(
            shop_id=str(shop_id), ubo_number=ubo_number, shareholder_code=shareholder_code
        )
        logger.info("shareholder mapping saved shop=%s ubo=%s code=%s", shop_id, ubo_number, shareholder_code)

    def all(self) -> List[ShareholderMapping]:
        return sorted(self._mappings.values(), key=lambda m: (m.shop_id, m.ubo_number))


class JsonShareholderMappingStore(InMemoryShareholderMappingStore):
    """Mappings kept in a JSON file ({"mappings": [...]}), rewritten on every save."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> List[ShareholderMapping]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        entries = data.get("mappings", []) if isinstance(data, dict) else data
        return [ShareholderMapping(**entry) for entry in entries if isinstance(entry, dict)]

    def save(self, shop_id: str, ubo_number: int, shareholder_code: str) -> None:
        if self.find(shop_id, ubo_number) == shareholder_code:
            return
        super().save(shop_id, ubo_number, shareholder_code)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = {"mappings": [m.model_dump() for m in self.all()]}
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            # memory must match the file
            del self._mappings[(str(shop_id), ubo_number)]
            raise
