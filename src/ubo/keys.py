"""Marketplace field-code naming for UBO slots.

Every UBO field on a shop is stored under ``adyen-ubo<slot>-<suffix>``. The
generator and the parser below are the two directions of that convention.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from src.ubo.errors import UboConfigurationError

ADYEN_UBO = "adyen-ubo"

CIVILITY = "civility"
FIRSTNAME = "firstname"
LASTNAME = "lastname"
EMAIL = "email"
DATE_OF_BIRTH = "dob"
NATIONALITY = "nationality"
ID_NUMBER = "idnumber"
HOUSE_NUMBER_OR_NAME = "housenumber"
STREET = "streetname"
CITY = "city"
POSTAL_CODE = "zip"
COUNTRY = "country"
PHONE_COUNTRY_CODE = "phonecountry"
PHONE_TYPE = "phonetype"
PHONE_NUMBER = "phonenumber"

# logical field name -> field code suffix
FIELD_SUFFIXES: Dict[str, str] = {
    CIVILITY: "civility",
    FIRSTNAME: "firstname",
    LASTNAME: "lastname",
    EMAIL: "email",
    DATE_OF_BIRTH: "dob",
    NATIONALITY: "nationality",
    ID_NUMBER: "idnumber",
    HOUSE_NUMBER_OR_NAME: "housenumber",
    STREET: "streetname",
    CITY: "city",
    POSTAL_CODE: "zip",
    COUNTRY: "country",
    PHONE_COUNTRY_CODE: "phonecountry",
    PHONE_TYPE: "phonetype",
    PHONE_NUMBER: "phonenumber",
}
_SUFFIX_TO_FIELD = {suffix: name for name, suffix in FIELD_SUFFIXES.items()}
_KEY_PATTERN = re.compile(rf"{ADYEN_UBO}([1-9][0-9]*)-([a-z]+)")

PHOTO_ID = "photoid"
PHOTO_ID_REAR = "photoid-rear"
PHOTO_ID_TYPE = "photoidtype"


def ubo_field_code(ubo_number: int, suffix: str) -> str:
    return f"{ADYEN_UBO}{ubo_number}-{suffix}"


def generate_ubo_keys(max_ubos: int) -> Dict[int, Dict[str, str]]:
    """Map each UBO number (1..max_ubos) to its logical field names and marketplace codes."""
    if max_ubos is None or max_ubos < 1:
        raise UboConfigurationError(f"UBOs must exist, number found: {max_ubos}")
    return {
        ubo_number: {name: ubo_field_code(ubo_number, suffix) for name, suffix in FIELD_SUFFIXES.items()}
        for ubo_number in range(1, max_ubos + 1)
    }


def parse_ubo_key(code: str) -> Optional[Tuple[int, str]]:
    """Return (ubo_number, logical field name) for a generated code, or None."""
    if not isinstance(code, str):
        return None
    match = _KEY_PATTERN.fullmatch(code)
    if not match:
        return None
    field = _SUFFIX_TO_FIELD.get(match.group(2))
    if field is None:
        return None
    return int(match.group(1)), field


def photo_id_codes(ubo_number: int) -> Tuple[str, str]:
    """Front and rear document type codes for a UBO's photo id."""
    return ubo_field_code(ubo_number, PHOTO_ID), ubo_field_code(ubo_number, PHOTO_ID_REAR)


def photo_id_type_code(ubo_number: int) -> str:
    return ubo_field_code(ubo_number, PHOTO_ID_TYPE)
