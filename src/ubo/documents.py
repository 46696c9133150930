"""Classify uploaded UBO photo-id documents by slot and document type."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from src.marketplace.schemas import MarketplaceShop, ShopDocument
from src.ubo.keys import photo_id_codes, photo_id_type_code
from src.ubo.schema import DOCUMENT_TYPES

logger = logging.getLogger(__name__)

ShopLookup = Callable[[str], Optional[MarketplaceShop]]


def document_type_from_shop(shop: Optional[MarketplaceShop], ubo_number: int) -> Optional[str]:
    """Read the UBO's photo-id type from the shop's value-list fields."""
    if shop is None:
        return None
    field = shop.value_list_field(photo_id_type_code(ubo_number))
    if field is None or field.value in (None, ""):
        return None
    value = str(field.value)
    if value not in DOCUMENT_TYPES:
        logger.warning("Unknown photo id type %s for shop %s ubo %s", value, shop.shop_id, ubo_number)
        return None
    return value


def classify_ubo_documents(
    documents: Iterable[ShopDocument],
    max_ubos: int,
    shop_lookup: ShopLookup,
) -> Dict[ShopDocument, str]:
    """
    Map each UBO photo-id upload (front or rear) to its document type.

    The type lives on the shop, so it is looked up once per (shop id, UBO
    number) for the duration of this call. Documents that are not UBO photo
    ids, or whose type cannot be resolved, are left out of the result.
    """
    memo: Dict[Tuple[str, int], Optional[str]] = {}
    classified: Dict[ShopDocument, str] = {}
    for document in documents:
        type_code = (document.type_code or "").lower()
        for ubo_number in range(1, max_ubos + 1):
            front, rear = photo_id_codes(ubo_number)
            if type_code not in (front.lower(), rear.lower()):
                continue
            key = (document.shop_id, ubo_number)
            if key not in memo:
                memo[key] = document_type_from_shop(shop_lookup(document.shop_id), ubo_number)
            if memo[key] is not None:
                classified[document] = memo[key]
    logger.info("classify_ubo_documents lookups=%d classified=%d", len(memo), len(classified))
    return classified
