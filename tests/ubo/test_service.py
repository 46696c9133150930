import pytest

from src.marketplace.schemas import MarketplaceShop, ShopDocument
from src.ubo.config import load_config, validate_config
from src.ubo.errors import UboConfigurationError
from src.ubo.mapping_store import InMemoryShareholderMappingStore, JsonShareholderMappingStore
from src.ubo.schema import AccountHolderSnapshot
from src.ubo.service import UboService


def _shop_with_ubos(*numbers: int) -> MarketplaceShop:
    fields = []
    for n in numbers:
        fields.extend(
            [
                {"code": f"adyen-ubo{n}-civility", "type": "LIST", "value": "Mr"},
                {"code": f"adyen-ubo{n}-firstname", "type": "STRING", "value": f"firstname{n}"},
                {"code": f"adyen-ubo{n}-lastname", "type": "STRING", "value": f"lastname{n}"},
                {"code": f"adyen-ubo{n}-email", "type": "STRING", "value": f"email{n}"},
            ]
        )
    fields.append({"code": "adyen-ubo1-photoidtype", "type": "LIST", "value": "PASSPORT"})
    return MarketplaceShop(shop_id="2000", shop_additional_fields=fields)


def test_load_config_defaults_and_env(monkeypatch, tmp_path):
    monkeypatch.delenv("UBO_MAX_UBOS", raising=False)
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg["max_ubos"] == 4
    monkeypatch.setenv("UBO_MAX_UBOS", "6")
    assert load_config(str(tmp_path / "missing.yaml"))["max_ubos"] == 6


def test_load_config_yaml(monkeypatch, tmp_path):
    monkeypatch.delenv("UBO_MAX_UBOS", raising=False)
    monkeypatch.delenv("UBO_MAPPING_STORE_PATH", raising=False)
    path = tmp_path / "ubo.yaml"
    path.write_text("max_ubos: 2\nmapping_store_path: /tmp/x.json\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["max_ubos"] == 2
    assert cfg["mapping_store_path"] == "/tmp/x.json"


def test_load_config_rejects_non_integer_max_ubos(monkeypatch, tmp_path):
    monkeypatch.setenv("UBO_MAX_UBOS", "four")
    with pytest.raises(UboConfigurationError, match="max_ubos must be an integer"):
        load_config(str(tmp_path / "missing.yaml"))

    monkeypatch.delenv("UBO_MAX_UBOS")
    path = tmp_path / "ubo.yaml"
    path.write_text("max_ubos: many\n", encoding="utf-8")
    with pytest.raises(UboConfigurationError, match="many"):
        load_config(str(path))


def test_validate_config_rejects_zero():
    with pytest.raises(UboConfigurationError):
        validate_config({"max_ubos": 0})
    with pytest.raises(UboConfigurationError):
        UboService(max_ubos=0, mapping_store=InMemoryShareholderMappingStore())


def test_service_extracts_all_configured_ubos():
    service = UboService(max_ubos=4, mapping_store=InMemoryShareholderMappingStore(), shop_lookup=lambda s: None)
    contacts = service.extract_ubos(_shop_with_ubos(1, 2, 3, 4))
    assert {c.name.first_name for c in contacts} == {"firstname1", "firstname2", "firstname3", "firstname4"}
    assert {c.email for c in contacts} == {"email1", "email2", "email3", "email4"}
    assert {c.name.gender for c in contacts} == {"MALE"}


def test_set_max_ubos_limits_extraction():
    service = UboService(max_ubos=4, mapping_store=InMemoryShareholderMappingStore(), shop_lookup=lambda s: None)
    service.set_max_ubos(2)
    assert len(service.generate_ubo_keys()) == 2
    assert len(service.extract_ubos(_shop_with_ubos(1, 2, 3))) == 2
    with pytest.raises(UboConfigurationError):
        service.set_max_ubos(0)


def test_service_persists_codes_to_json_store(tmp_path):
    path = tmp_path / "mappings.json"
    snapshot = AccountHolderSnapshot(
        **{"accountHolderDetails": {"businessDetails": {"shareholders": [{"shareholderCode": "SH1"}]}}}
    )
    service = UboService(config={"max_ubos": 4, "mapping_store_path": str(path)}, shop_lookup=lambda s: None)
    assert service.extract_ubos(_shop_with_ubos(1), snapshot)[0].shareholder_code == "SH1"

    fresh = UboService(config={"max_ubos": 4, "mapping_store_path": str(path)}, shop_lookup=lambda s: None)
    assert isinstance(fresh.mapping_store, JsonShareholderMappingStore)
    assert fresh.extract_ubos(_shop_with_ubos(1))[0].shareholder_code == "SH1"


def test_service_classifies_documents_with_its_lookup():
    shop = _shop_with_ubos(1)
    calls = []

    def lookup(shop_id):
        calls.append(shop_id)
        return shop

    service = UboService(max_ubos=4, mapping_store=InMemoryShareholderMappingStore(), shop_lookup=lookup)
    docs = [
        ShopDocument(id="1", shop_id="2000", type="adyen-ubo1-photoid"),
        ShopDocument(id="2", shop_id="2000", type="adyen-ubo1-photoid-rear"),
    ]
    assert set(service.extract_ubo_documents(docs).values()) == {"PASSPORT"}
    assert calls == ["2000"]


def test_default_lookup_uses_marketplace_client(monkeypatch):
    seen = {}

    def fake_get_shop(shop_id, base_url=None, timeout=None):
        seen.update(shop_id=shop_id, base_url=base_url, timeout=timeout)
        return None

    monkeypatch.setattr("src.ubo.service.mirakl_api.get_shop", fake_get_shop)
    service = UboService(
        config={"max_ubos": 1, "mapping_store_path": "unused.json", "mirakl_api_url": "https://m.example", "request_timeout_s": 5},
        mapping_store=InMemoryShareholderMappingStore(),
    )
    docs = [ShopDocument(id="1", shop_id="2000", type="adyen-ubo1-photoid")]
    assert service.extract_ubo_documents(docs) == {}
    assert seen == {"shop_id": "2000", "base_url": "https://m.example", "timeout": 5}
