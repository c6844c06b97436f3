"""Initial database schema: slot pool, sellers, audit log."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261016_01"
down_revision = None
branch_labels = None
depends_on = None

SLOT_COUNT = 25
LISTING_COLUMNS = (
    ("name_en", sa.Text()),
    ("name_fr", sa.Text()),
    ("description_en", sa.Text()),
    ("description_fr", sa.Text()),
    ("price", sa.Numeric(12, 2)),
    ("currency", sa.String(length=3)),
    ("categories", sa.JSON()),
    ("delivery_options", sa.JSON()),
    ("tags", sa.JSON()),
    ("image_urls", sa.JSON()),
)


def _listing(prefix: str) -> list[sa.Column]:
    return [sa.Column(f"{prefix}_{name}", type_) for name, type_ in LISTING_COLUMNS]


def upgrade() -> None:
    slot_table = op.create_table(
        "auction_slot",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("slot_status", sa.String(length=16), nullable=False, server_default="empty"),
        sa.Column("live_seller_id", sa.String(length=64)),
        *_listing("live"),
        sa.Column("start_time", sa.DateTime()),
        sa.Column("end_time", sa.DateTime()),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "draft_status", sa.String(length=24), nullable=False, server_default="empty"
        ),
        sa.Column("draft_seller_contact", sa.String(length=64)),
        *_listing("draft"),
        sa.Column("draft_updated_at", sa.DateTime()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint("id BETWEEN 1 AND 25", name="ck_auction_slot_id_range"),
        sa.CheckConstraint(
            "slot_status IN ('empty', 'live', 'maintenance')",
            name="ck_auction_slot_status",
        ),
        sa.CheckConstraint(
            "draft_status IN ('empty', 'drafting', 'ready_to_publish')",
            name="ck_auction_slot_draft_status",
        ),
        sa.CheckConstraint(
            "live_currency IN ('XAF', 'USD', 'EUR')", name="ck_auction_slot_live_currency"
        ),
        sa.CheckConstraint(
            "draft_currency IN ('XAF', 'USD', 'EUR')", name="ck_auction_slot_draft_currency"
        ),
    )
    op.create_index("ix_auction_slot_slot_status", "auction_slot", ["slot_status"])
    op.create_index("ix_auction_slot_draft_status", "auction_slot", ["draft_status"])
    op.create_index("ix_auction_slot_live_seller_id", "auction_slot", ["live_seller_id"])

    op.create_table(
        "seller",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("display_name", sa.String(length=128), nullable=False),
        sa.Column("contact", sa.String(length=32), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )

    op.create_table(
        "admin_audit_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("actor_id", sa.String(length=64)),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("resource", sa.String(length=32), nullable=False, server_default="slot"),
        sa.Column("resource_id", sa.String(length=64)),
        sa.Column("metadata_json", sa.Text()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_admin_audit_log_resource_id", "admin_audit_log", ["resource_id"])

    op.bulk_insert(
        slot_table,
        [
            {
                "id": slot_id,
                "version": 1,
                "slot_status": "empty",
                "draft_status": "empty",
                "featured": False,
                "view_count": 0,
            }
            for slot_id in range(1, SLOT_COUNT + 1)
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_admin_audit_log_resource_id", table_name="admin_audit_log")
    op.drop_table("admin_audit_log")
    op.drop_table("seller")
    op.drop_index("ix_auction_slot_live_seller_id", table_name="auction_slot")
    op.drop_index("ix_auction_slot_draft_status", table_name="auction_slot")
    op.drop_index("ix_auction_slot_slot_status", table_name="auction_slot")
    op.drop_table("auction_slot")
