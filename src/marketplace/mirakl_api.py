"""Mirakl marketplace client for shop and shop-document lookups."""

import logging
import os
from typing import Dict, Iterable, List, Optional

import requests
from dotenv import load_dotenv

from src.marketplace.schemas import MarketplaceShop, ShopDocument

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10


def _get_base_url(base_url: Optional[str] = None) -> str:
    base_url = base_url or os.getenv("MIRAKL_API_URL")
    if not base_url:
        raise ValueError(
            "MIRAKL_API_URL not found in environment variables. "
            "Please set it in your .env file."
        )
    return base_url.rstrip("/")


def _get_api_key() -> str:
    """Get operator API key from environment variables."""
    api_key = os.getenv("MIRAKL_API_KEY")
    if not api_key:
        raise ValueError(
            "MIRAKL_API_KEY not found in environment variables. "
            "Please set it in your .env file."
        )
    return api_key


def _get_headers() -> Dict[str, str]:
    return {"Authorization": _get_api_key(), "Accept": "application/json"}


def _timeout() -> int:
    return int(os.getenv("MIRAKL_REQUEST_TIMEOUT_S", DEFAULT_TIMEOUT_S))


def _get(path: str, params: Dict[str, str], base_url: Optional[str] = None, timeout: Optional[int] = None) -> dict:
    url = f"{_get_base_url(base_url)}{path}"
    response = requests.get(url, headers=_get_headers(), params=params, timeout=timeout or _timeout())
    if response.status_code != 200:
        error_msg = f"API returned status {response.status_code}"
        try:
            error_data = response.json()
            if "message" in error_data:
                error_msg = error_data["message"]
            elif "error" in error_data:
                error_msg = error_data["error"]
        except ValueError:
            error_msg = response.text or error_msg
        raise requests.exceptions.RequestException(f"Mirakl request {path} failed: {error_msg}")
    return response.json()


def get_shops(shop_ids: Iterable[str], base_url: Optional[str] = None, timeout: Optional[int] = None) -> List[MarketplaceShop]:
    """Fetch shops by id (single page)."""
    ids = [str(s) for s in shop_ids]
    if not ids:
        return []
    data = _get("/api/shops", {"shop_ids": ",".join(ids)}, base_url=base_url, timeout=timeout)
    shops = data.get("shops", []) if isinstance(data, dict) else []
    logger.info("mirakl get_shops requested=%d returned=%d", len(ids), len(shops))
    return [MarketplaceShop(**shop) for shop in shops if isinstance(shop, dict)]


def get_shop(shop_id: str, base_url: Optional[str] = None, timeout: Optional[int] = None) -> Optional[MarketplaceShop]:
    """Fetch a single shop, or None if the marketplace returns no match."""
    shops = get_shops([shop_id], base_url=base_url, timeout=timeout)
    return shops[0] if shops else None


def get_shop_documents(
    shop_ids: Iterable[str], base_url: Optional[str] = None, timeout: Optional[int] = None
) -> List[ShopDocument]:
    """List uploaded documents for the given shops (first page only)."""
    ids = [str(s) for s in shop_ids]
    if not ids:
        return []
    data = _get("/api/shops/documents", {"shop_ids": ",".join(ids)}, base_url=base_url, timeout=timeout)
    documents = data.get("shop_documents", []) if isinstance(data, dict) else []
    logger.info("mirakl get_shop_documents requested=%d returned=%d", len(ids), len(documents))
    return [ShopDocument(**doc) for doc in documents if isinstance(doc, dict)]
