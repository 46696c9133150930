from src.ubo.documents import classify_ubo_documents
from src.ubo.errors import MappingConflictError, UboConfigurationError, UboError, UboValidationError
from src.ubo.extractor import extract_shop_ubos, extract_ubos, field_bag_from_shop
from src.ubo.keys import generate_ubo_keys, parse_ubo_key
from src.ubo.mapping_store import (
    InMemoryShareholderMappingStore,
    JsonShareholderMappingStore,
    ShareholderMappingStore,
)
from src.ubo.schema import AccountHolderSnapshot, ShareholderContact, ShareholderMapping
from src.ubo.service import UboService

__all__ = [
    "AccountHolderSnapshot",
    "ShareholderContact",
    "ShareholderMapping",
    "ShareholderMappingStore",
    "InMemoryShareholderMappingStore",
    "JsonShareholderMappingStore",
    "UboService",
    "UboError",
    "UboConfigurationError",
    "UboValidationError",
    "MappingConflictError",
    "generate_ubo_keys",
    "parse_ubo_key",
    "extract_ubos",
    "extract_shop_ubos",
    "field_bag_from_shop",
    "classify_ubo_documents",
]
