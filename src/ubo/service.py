"""UBO service: configured entry point for shareholder and document extraction."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from src.marketplace import mirakl_api
from src.marketplace.schemas import MarketplaceShop, ShopDocument
from src.ubo.config import load_config, validate_config
from src.ubo.documents import ShopLookup, classify_ubo_documents
from src.ubo.errors import UboConfigurationError
from src.ubo.extractor import extract_shop_ubos
from src.ubo.keys import generate_ubo_keys
from src.ubo.mapping_store import JsonShareholderMappingStore, ShareholderMappingStore
from src.ubo.schema import AccountHolderSnapshot, ShareholderContact

logger = logging.getLogger(__name__)


class UboService:
    """Extract UBO shareholders and photo-id documents for marketplace shops."""

    def __init__(
        self,
        max_ubos: Optional[int] = None,
        mapping_store: Optional[ShareholderMappingStore] = None,
        shop_lookup: Optional[ShopLookup] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        if max_ubos is not None:
            self.config = {**self.config, "max_ubos": max_ubos}
        validate_config(self.config)
        self.max_ubos = int(self.config["max_ubos"])
        self.mapping_store = mapping_store or JsonShareholderMappingStore(self.config["mapping_store_path"])
        self.shop_lookup = shop_lookup or self._marketplace_lookup

    def _marketplace_lookup(self, shop_id: str) -> Optional[MarketplaceShop]:
        return mirakl_api.get_shop(
            shop_id,
            base_url=self.config.get("mirakl_api_url"),
            timeout=self.config.get("request_timeout_s"),
        )

    def set_max_ubos(self, max_ubos: int) -> None:
        if max_ubos is None or max_ubos < 1:
            raise UboConfigurationError(f"UBOs must exist, number found: {max_ubos}")
        self.max_ubos = max_ubos

    def generate_ubo_keys(self) -> Dict[int, Dict[str, str]]:
        return generate_ubo_keys(self.max_ubos)

    def extract_ubos(
        self,
        shop: MarketplaceShop,
        existing_account_holder: Optional[AccountHolderSnapshot] = None,
    ) -> List[ShareholderContact]:
        """Shareholder contacts for the shop, reusing known shareholder codes."""
        return extract_shop_ubos(shop, self.generate_ubo_keys(), self.mapping_store, existing_account_holder)

    def extract_ubo_documents(self, documents: Sequence[ShopDocument]) -> Dict[ShopDocument, str]:
        return classify_ubo_documents(documents, self.max_ubos, self.shop_lookup)
