import logging

import pytest

from src.marketplace.schemas import MarketplaceShop, ShopDocument
from src.ubo.documents import classify_ubo_documents, document_type_from_shop


def _doc(doc_id: str, type_code: str, shop_id: str = "2000") -> ShopDocument:
    return ShopDocument(id=doc_id, shop_id=shop_id, type=type_code, file_name=f"{doc_id}.jpg")


def _shop(shop_id: str = "2000", **photo_types) -> MarketplaceShop:
    fields = [
        {"code": f"adyen-ubo{n}-photoidtype", "type": "LIST", "value": value}
        for n, value in ((int(k.lstrip("ubo")), v) for k, v in photo_types.items())
    ]
    return MarketplaceShop(shop_id=shop_id, shop_additional_fields=fields)


class CountingLookup:
    def __init__(self, shops) -> None:
        self.shops = {s.shop_id: s for s in shops}
        self.calls = []

    def __call__(self, shop_id):
        self.calls.append(shop_id)
        return self.shops.get(shop_id)


def test_front_and_rear_share_one_lookup():
    lookup = CountingLookup([_shop(ubo2="ID_CARD")])
    front, rear = _doc("1", "adyen-ubo2-photoid"), _doc("2", "adyen-ubo2-photoid-rear")
    result = classify_ubo_documents([front, rear], 4, lookup)
    assert result == {front: "ID_CARD", rear: "ID_CARD"}
    assert lookup.calls == ["2000"]


def test_one_lookup_per_shop_and_ubo():
    lookup = CountingLookup([_shop("2000", ubo1="PASSPORT", ubo3="DRIVING_LICENCE"), _shop("3000", ubo1="ID_CARD")])
    docs = [
        _doc("1", "adyen-ubo1-photoid"),
        _doc("2", "ADYEN-UBO3-PHOTOID"),
        _doc("3", "adyen-ubo1-photoid", shop_id="3000"),
        _doc("4", "adyen-ubo3-photoid-rear"),
    ]
    result = classify_ubo_documents(docs, 4, lookup)
    assert [result[d] for d in docs] == ["PASSPORT", "DRIVING_LICENCE", "ID_CARD", "DRIVING_LICENCE"]
    assert sorted(lookup.calls) == ["2000", "2000", "3000"]


@pytest.mark.parametrize("type_code", ["adyen-ubo1-bankstatement", "adyen-ubo5-photoid", "photoid", "adyen-ubo1-photoidtype"])
def test_non_photo_id_documents_are_ignored(type_code):
    lookup = CountingLookup([_shop(ubo1="PASSPORT", ubo5="PASSPORT")])
    assert classify_ubo_documents([_doc("1", type_code)], 4, lookup) == {}
    assert lookup.calls == []


def test_unresolvable_types_are_omitted(caplog):
    lookup = CountingLookup([_shop(ubo1="", ubo2="SELFIE")])
    docs = [
        _doc("1", "adyen-ubo1-photoid"),
        _doc("2", "adyen-ubo2-photoid"),
        _doc("3", "adyen-ubo2-photoid-rear"),
        _doc("4", "adyen-ubo3-photoid"),
        _doc("5", "adyen-ubo1-photoid", shop_id="missing"),
    ]
    with caplog.at_level(logging.WARNING):
        assert classify_ubo_documents(docs, 4, lookup) == {}
    assert any("SELFIE" in r.getMessage() for r in caplog.records)
    # misses are remembered for the call too
    assert len(lookup.calls) == 4


def test_memo_does_not_leak_between_calls():
    lookup = CountingLookup([_shop(ubo1="PASSPORT")])
    doc = _doc("1", "adyen-ubo1-photoid")
    classify_ubo_documents([doc], 4, lookup)
    classify_ubo_documents([doc], 4, lookup)
    assert lookup.calls == ["2000", "2000"]


def test_lookup_failures_propagate():
    def boom(shop_id):
        raise ConnectionError("marketplace down")

    with pytest.raises(ConnectionError):
        classify_ubo_documents([_doc("1", "adyen-ubo1-photoid")], 4, boom)


def test_document_type_ignores_non_value_list_fields():
    shop = MarketplaceShop(
        shop_id="2000",
        shop_additional_fields=[{"code": "adyen-ubo1-photoidtype", "type": "STRING", "value": "PASSPORT"}],
    )
    assert document_type_from_shop(shop, 1) is None
    assert document_type_from_shop(_shop(ubo1="PASSPORT"), 1) == "PASSPORT"
    assert document_type_from_shop(None, 1) is None
