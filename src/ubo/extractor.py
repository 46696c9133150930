"""Build shareholder contacts from a shop's UBO fields."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from pydantic import ValidationError

from src.marketplace.schemas import MarketplaceShop
from src.ubo import keys
from src.ubo.errors import UboValidationError
from src.ubo.mapping_store import ShareholderMappingStore
from src.ubo.schema import (
    AccountHolderSnapshot,
    Address,
    Name,
    PersonalData,
    PhoneNumber,
    ShareholderContact,
    gender_for_civility,
)

logger = logging.getLogger(__name__)

MANDATORY_FIELDS = (keys.CIVILITY, keys.FIRSTNAME, keys.LASTNAME, keys.EMAIL)


def field_bag_from_shop(shop: MarketplaceShop) -> Dict[str, str]:
    """Code -> value for the shop's single-value additional fields."""
    return {f.code: str(f.value) for f in shop.additional_fields if f.is_single_value and f.value is not None}


def shareholder_at_position(
    existing_account_holder: Optional[AccountHolderSnapshot], ubo_number: int
) -> Optional[str]:
    """Shareholder code the platform holds at the slot's list position.

    Pairs UBO n with the (n-1)th shareholder of the snapshot. This is purely
    positional: a reordered remote list maps codes to the wrong slots.
    """
    if existing_account_holder is None:
        return None
    shareholders = existing_account_holder.shareholders
    if ubo_number - 1 < len(shareholders):
        return shareholders[ubo_number - 1].shareholder_code
    return None


def resolve_shareholder_code(
    shop_id: str,
    ubo_number: int,
    existing_account_holder: Optional[AccountHolderSnapshot],
    mapping_store: ShareholderMappingStore,
) -> Optional[str]:
    code = mapping_store.find(shop_id, ubo_number)
    if code is not None:
        return code
    code = shareholder_at_position(existing_account_holder, ubo_number)
    if code is None:
        return None
    mapping_store.save(shop_id, ubo_number, code)
    return code


def _personal_data(ubo_number: int, fields: Mapping[str, Optional[str]]) -> Optional[PersonalData]:
    dob, nationality, id_number = fields[keys.DATE_OF_BIRTH], fields[keys.NATIONALITY], fields[keys.ID_NUMBER]
    if dob is None and nationality is None and id_number is None:
        logger.warning("Unable to populate any personal data for share holder %s", ubo_number)
        return None
    return PersonalData(date_of_birth=dob, nationality=nationality, id_number=id_number)


def _address(ubo_number: int, fields: Mapping[str, Optional[str]]) -> Optional[Address]:
    values = [fields[k] for k in (keys.HOUSE_NUMBER_OR_NAME, keys.STREET, keys.CITY, keys.POSTAL_CODE, keys.COUNTRY)]
    if all(v is None for v in values):
        logger.warning("Unable to populate any address data for share holder %s", ubo_number)
        return None
    return Address(
        house_number_or_name=fields[keys.HOUSE_NUMBER_OR_NAME],
        street=fields[keys.STREET],
        city=fields[keys.CITY],
        postal_code=fields[keys.POSTAL_CODE],
        country=fields[keys.COUNTRY],
    )


def _phone_number(ubo_number: int, fields: Mapping[str, Optional[str]]) -> Optional[PhoneNumber]:
    country_code, phone_type, number = (
        fields[keys.PHONE_COUNTRY_CODE],
        fields[keys.PHONE_TYPE],
        fields[keys.PHONE_NUMBER],
    )
    if country_code is None and phone_type is None and number is None:
        logger.warning("Unable to populate any phone data for share holder %s", ubo_number)
        return None
    try:
        return PhoneNumber(phone_country_code=country_code, phone_type=phone_type, phone_number=number)
    except ValidationError as exc:
        raise UboValidationError(
            f"Invalid phone type {phone_type!r} for share holder {ubo_number}",
            ubo_number=ubo_number,
            field=keys.PHONE_TYPE,
        ) from exc


def extract_ubos(
    shop_id: str,
    field_bag: Mapping[str, str],
    ubo_keys: Mapping[int, Mapping[str, str]],
    existing_account_holder: Optional[AccountHolderSnapshot],
    mapping_store: ShareholderMappingStore,
) -> List[ShareholderContact]:
    """
    Assemble one ShareholderContact per UBO slot that has all mandatory fields.

    Slots are visited in ascending order. A slot missing civility, first name,
    last name or email yields nothing and does not touch the mapping store.
    The shareholder code comes from the mapping store, or failing that from the
    existing account holder's shareholder at the same position (persisted to
    the store before use).

    Raises:
        UboValidationError: a phone type outside the recognised set. The whole
            call is aborted; mappings saved for earlier slots are kept.
    """
    contacts: List[ShareholderContact] = []
    for ubo_number in sorted(ubo_keys):
        codes = ubo_keys[ubo_number]
        fields = {name: field_bag.get(codes[name]) if name in codes else None for name in keys.FIELD_SUFFIXES}
        if any(fields[name] is None for name in MANDATORY_FIELDS):
            continue

        shareholder_code = resolve_shareholder_code(shop_id, ubo_number, existing_account_holder, mapping_store)
        contact = ShareholderContact(
            shareholder_code=shareholder_code,
            name=Name(
                first_name=fields[keys.FIRSTNAME],
                last_name=fields[keys.LASTNAME],
                gender=gender_for_civility(fields[keys.CIVILITY]),
            ),
            email=fields[keys.EMAIL],
            personal_data=_personal_data(ubo_number, fields),
            address=_address(ubo_number, fields),
            phone_number=_phone_number(ubo_number, fields),
        )
        contacts.append(contact)
    logger.info("extract_ubos shop=%s slots=%d extracted=%d", shop_id, len(ubo_keys), len(contacts))
    return contacts


def extract_shop_ubos(
    shop: MarketplaceShop,
    ubo_keys: Mapping[int, Mapping[str, str]],
    mapping_store: ShareholderMappingStore,
    existing_account_holder: Optional[AccountHolderSnapshot] = None,
) -> List[ShareholderContact]:
    """extract_ubos over a marketplace shop's own additional fields."""
    return extract_ubos(shop.shop_id, field_bag_from_shop(shop), ubo_keys, existing_account_holder, mapping_store)
