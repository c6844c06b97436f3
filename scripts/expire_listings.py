"""Cron entry point retiring live listings whose end_time has passed."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from datetime import datetime

from slotmarket.config import load_config
from slotmarket.db.db_models import utcnow
from slotmarket.dependencies import build_slot_service
from slotmarket.logging import configure_logging
from slotmarket.slots.slots_repository import SlotRepository


@dataclass(slots=True)
class ExpirySummary:
    expired: list[int] = field(default_factory=list)
    dry_run: bool = False


def perform_expiry(*, dry_run: bool, reference_time: datetime | None = None) -> ExpirySummary:
    """Retire (or, with ``dry_run``, only list) expired listings."""
    config = load_config()
    now = reference_time or utcnow()

    if dry_run:
        candidates = SlotRepository(config.session_factory).list_expired_live(now)
        return ExpirySummary(expired=[slot.id for slot in candidates], dry_run=True)

    result = build_slot_service(config).expire_listings(now=now)
    if result.error is not None:
        raise RuntimeError(f"{result.error.kind.value}: {result.error.detail}")
    return ExpirySummary(expired=list(result.value or []), dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Retire listings past their end time.")
    parser.add_argument("--dry-run", action="store_true", help="Only report which slots would expire.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    configure_logging()
    try:
        summary = perform_expiry(dry_run=args.dry_run)
    except Exception as exc:
        print(f"expiry failed: {exc}", file=sys.stderr)
        return 2

    slots = ",".join(str(slot_id) for slot_id in summary.expired) or "-"
    if summary.dry_run:
        print(f"expiry dry-run, expired={len(summary.expired)}, slots={slots}", file=sys.stdout)
    else:
        print(f"expiry done, retired={len(summary.expired)}, slots={slots}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
