"""Schemas for shareholder contacts, account holder snapshots and mappings."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MALE = "MALE"
FEMALE = "FEMALE"
UNKNOWN = "UNKNOWN"
GENDERS = frozenset({MALE, FEMALE, UNKNOWN})

CIVILITY_TO_GENDER = MappingProxyType({"Mr": MALE, "Mrs": FEMALE, "Miss": FEMALE})

PHONE_TYPES = frozenset({"LANDLINE", "MOBILE", "SIP", "FAX"})

DOCUMENT_TYPES = frozenset(
    {
        "PASSPORT",
        "ID_CARD",
        "ID_CARD_FRONT",
        "ID_CARD_BACK",
        "DRIVING_LICENCE",
        "DRIVING_LICENCE_FRONT",
        "DRIVING_LICENCE_BACK",
        "BANK_STATEMENT",
        "COMPANY_REGISTRATION_SCREENING",
        "SUPPORTING_DOCUMENTS",
    }
)


def gender_for_civility(civility: Optional[str]) -> str:
    """Exact-match civility lookup; anything unrecognised is UNKNOWN."""
    return CIVILITY_TO_GENDER.get(civility, UNKNOWN) if civility is not None else UNKNOWN


class PaymentPlatformModel(BaseModel):
    """Base for models exchanged with the payment platform (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Name(PaymentPlatformModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: str = UNKNOWN

    @field_validator("gender")
    @classmethod
    def _known_gender(cls, v: str) -> str:
        if v not in GENDERS:
            raise ValueError(f"unknown gender {v}")
        return v


class PersonalData(PaymentPlatformModel):
    date_of_birth: Optional[str] = None
    nationality: Optional[str] = None
    id_number: Optional[str] = None


class Address(PaymentPlatformModel):
    house_number_or_name: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class PhoneNumber(PaymentPlatformModel):
    phone_country_code: Optional[str] = None
    phone_type: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("phone_type")
    @classmethod
    def _known_phone_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in PHONE_TYPES:
            raise ValueError(f"phone type must be one of {sorted(PHONE_TYPES)}, got {v}")
        return v


class ShareholderContact(PaymentPlatformModel):
    """A beneficial owner as sent to the payment platform."""

    shareholder_code: Optional[str] = None
    name: Optional[Name] = None
    email: Optional[str] = None
    personal_data: Optional[PersonalData] = None
    address: Optional[Address] = None
    phone_number: Optional[PhoneNumber] = None


class ExistingShareholder(PaymentPlatformModel):
    """Shareholder entry read back from the platform; other fields are ignored."""

    shareholder_code: Optional[str] = None


class BusinessDetails(PaymentPlatformModel):
    shareholders: List[ExistingShareholder] = Field(default_factory=list)


class AccountHolderDetails(PaymentPlatformModel):
    business_details: Optional[BusinessDetails] = None


class AccountHolderSnapshot(PaymentPlatformModel):
    """Previously read account holder; only its shareholder list is used here."""

    account_holder_code: Optional[str] = None
    account_holder_details: Optional[AccountHolderDetails] = None

    @property
    def shareholders(self) -> List[ExistingShareholder]:
        details = self.account_holder_details
        if details is None or details.business_details is None:
            return []
        return details.business_details.shareholders


class ShareholderMapping(BaseModel):
    """Durable link between a shop's UBO slot and the platform's shareholder code."""

    shop_id: str
    ubo_number: int = Field(ge=1)
    shareholder_code: str
