"""Register a seller so their contact can be used when approving drafts."""

from __future__ import annotations

import argparse
import sys

from slotmarket.config import load_config
from slotmarket.exceptions import AppError
from slotmarket.sellers.seller_directory import SqlAlchemySellerDirectory


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a marketplace seller.")
    parser.add_argument("display_name")
    parser.add_argument("contact", help="WhatsApp/phone contact, e.g. +237600000000")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    directory = SqlAlchemySellerDirectory(load_config().session_factory)
    try:
        seller_id = directory.register(display_name=args.display_name, contact=args.contact)
    except AppError as exc:
        print(f"registration failed: {exc}", file=sys.stderr)
        return 2
    print(f"seller registered, id={seller_id}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
