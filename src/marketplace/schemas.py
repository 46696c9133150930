"""Pydantic schemas for marketplace shop payloads."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MULTIPLE_VALUES_LIST = "MULTIPLE_VALUES_LIST"
VALUE_LIST = "LIST"


def _as_str(v: Any) -> Any:
    return str(v).strip() if isinstance(v, (int, str)) and not isinstance(v, bool) else v


class AdditionalFieldValue(BaseModel):
    """One custom field on a shop record."""

    code: str
    type: str = "STRING"
    value: Any = None

    @field_validator("type", mode="before")
    @classmethod
    def _upper_trim(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @property
    def is_single_value(self) -> bool:
        return self.type != MULTIPLE_VALUES_LIST and not isinstance(self.value, list)

    @property
    def is_value_list(self) -> bool:
        return self.type == VALUE_LIST


class MarketplaceShop(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shop_id: str
    shop_name: Optional[str] = None
    additional_fields: List[AdditionalFieldValue] = Field(default_factory=list, alias="shop_additional_fields")

    @field_validator("shop_id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _as_str(v)

    def value_list_field(self, code: str) -> Optional[AdditionalFieldValue]:
        """First value-list field whose code matches, ignoring case."""
        wanted = code.lower()
        for field in self.additional_fields:
            if field.is_value_list and field.code.lower() == wanted:
                return field
        return None


class ShopDocument(BaseModel):
    """Uploaded shop document descriptor. Hashable so it can key a mapping."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    shop_id: str
    type_code: str = Field(..., alias="type")
    file_name: Optional[str] = None
    date_uploaded: Optional[str] = None

    @field_validator("id", "shop_id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _as_str(v)
