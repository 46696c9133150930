"""CLI for UBO key generation, shareholder extraction and document classification."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.marketplace.schemas import MarketplaceShop, ShopDocument
from src.ubo.config import load_config
from src.ubo.errors import UboError
from src.ubo.logger import setup_logger
from src.ubo.mapping_store import InMemoryShareholderMappingStore, JsonShareholderMappingStore
from src.ubo.schema import AccountHolderSnapshot
from src.ubo.service import UboService


def _read_json(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"file not found: {file_path}")
    return json.loads(file_path.read_text(encoding="utf-8"))


def _load_shops(paths: List[str]) -> Dict[str, MarketplaceShop]:
    shops: Dict[str, MarketplaceShop] = {}
    for path in paths:
        data = _read_json(path)
        entries = data.get("shops", [data]) if isinstance(data, dict) else data
        for entry in entries:
            shop = MarketplaceShop(**entry)
            shops[shop.shop_id] = shop
    return shops


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UBO shareholder extraction")
    parser.add_argument("--config", help="Path to YAML config (default config/ubo.yaml)")
    parser.add_argument("--max-ubos", type=int, help="Override the maximum number of UBOs")
    # accepted after the sub-command too; SUPPRESS keeps a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--max-ubos", type=int, default=argparse.SUPPRESS, help="Override the maximum number of UBOs"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("keys", parents=[common], help="Print the marketplace field codes for every UBO")

    extract = sub.add_parser(
        "extract", parents=[common], help="Extract shareholder contacts from a shop JSON file"
    )
    extract.add_argument("--shop-file", required=True, help="Shop JSON as returned by the marketplace")
    extract.add_argument("--account-holder-file", help="Existing account holder JSON")
    extract.add_argument("--store", help="Shareholder mapping JSON file (default from config)")
    extract.add_argument("--dry-run", action="store_true", help="Do not persist new shareholder mappings")

    classify = sub.add_parser("classify", parents=[common], help="Classify UBO photo-id documents")
    classify.add_argument("--documents-file", required=True, help="JSON list of shop documents")
    classify.add_argument(
        "--shop-file",
        action="append",
        default=[],
        help="Shop JSON used instead of the marketplace API (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    try:
        cfg = load_config(args.config)
        setup_logger(cfg.get("log_level", "INFO"))
        if args.command == "keys":
            service = UboService(max_ubos=args.max_ubos, mapping_store=InMemoryShareholderMappingStore(), config=cfg)
            print(json.dumps(service.generate_ubo_keys(), indent=2))
            return 0

        if args.command == "extract":
            if args.dry_run:
                store = InMemoryShareholderMappingStore(
                    JsonShareholderMappingStore(args.store or cfg["mapping_store_path"]).all()
                )
            else:
                store = JsonShareholderMappingStore(args.store or cfg["mapping_store_path"])
            service = UboService(max_ubos=args.max_ubos, mapping_store=store, config=cfg)
            shop = next(iter(_load_shops([args.shop_file]).values()), None)
            if shop is None:
                print(f"no shop in {args.shop_file}", file=sys.stderr)
                return 1
            existing: Optional[AccountHolderSnapshot] = None
            if args.account_holder_file:
                existing = AccountHolderSnapshot(**_read_json(args.account_holder_file))
            contacts = service.extract_ubos(shop, existing)
            print(json.dumps([c.to_payload() for c in contacts], indent=2))
            return 0

        if args.command == "classify":
            raw = _read_json(args.documents_file)
            entries = raw.get("shop_documents", []) if isinstance(raw, dict) else raw
            documents = [ShopDocument(**entry) for entry in entries]
            shop_lookup = None
            if args.shop_file:
                shops = _load_shops(args.shop_file)
                shop_lookup = shops.get
            service = UboService(
                max_ubos=args.max_ubos,
                mapping_store=InMemoryShareholderMappingStore(),
                shop_lookup=shop_lookup,
                config=cfg,
            )
            classified = service.extract_ubo_documents(documents)
            output = [
                {"id": doc.id, "shop_id": doc.shop_id, "type": doc.type_code, "document_type": doc_type}
                for doc, doc_type in classified.items()
            ]
            print(json.dumps(output, indent=2))
            return 0
    except (UboError, ValidationError, FileNotFoundError, json.JSONDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
