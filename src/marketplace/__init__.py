from src.marketplace.mirakl_api import get_shop, get_shop_documents, get_shops
from src.marketplace.schemas import AdditionalFieldValue, MarketplaceShop, ShopDocument

__all__ = [
    "AdditionalFieldValue",
    "MarketplaceShop",
    "ShopDocument",
    "get_shop",
    "get_shops",
    "get_shop_documents",
]
