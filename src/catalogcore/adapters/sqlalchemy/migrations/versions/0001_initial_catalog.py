"""initial catalog schema

Revision ID: 0001_initial_catalog
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_catalog"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

PRODUCT_STATUSES = ("DRAFT", "PENDING", "PUBLISHED", "LIVE", "REJECTED")
OFFER_SCOPES = ("BASE_OFFER", "VARIANT_OFFER")
CHANGE_REQUEST_STATUSES = ("PENDING", "APPROVED", "REJECTED", "CANCELED", "EXPIRED")


def _money() -> sa.Numeric:
    return sa.Numeric(14, 2, asdecimal=True)


def _offer_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("seller_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("price", _money(), nullable=False),
        sa.Column("available_qty", sa.Integer(), nullable=False),
        sa.Column("lead_days", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("in_stock", sa.Boolean(), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "product",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PRODUCT_STATUSES, name="productstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("seller_id", sa.Uuid(), nullable=True),
        sa.Column("base_price", _money(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
    )

    op.create_table(
        "variant",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("sku", sa.String(), nullable=False),
        sa.Column("in_stock", sa.Boolean(), nullable=False),
        sa.Column("available_qty", sa.Integer(), nullable=False),
        sa.Column("price", _money(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_variant_variant_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_variant")),
        sa.UniqueConstraint("sku", name=op.f("uq_variant_variant_sku")),
    )
    op.create_index("ix_variant_product", "variant", ["product_id"], unique=False)

    op.create_table(
        "variant_option",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("variant_id", sa.Uuid(), nullable=False),
        sa.Column("attribute_id", sa.String(), nullable=False),
        sa.Column("value_id", sa.String(), nullable=False),
        sa.Column("price_bump", _money(), nullable=True),
        sa.ForeignKeyConstraint(
            ["variant_id"],
            ["variant.id"],
            name=op.f("fk_variant_option_variant_option_variant_id_variant"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_variant_option")),
        sa.UniqueConstraint("variant_id", "attribute_id", name="uq_variant_option_attribute"),
    )

    op.create_table(
        "base_offer",
        *_offer_columns(),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_base_offer_base_offer_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_base_offer")),
        sa.UniqueConstraint("seller_id", "product_id", name="uq_base_offer_seller_product"),
    )

    op.create_table(
        "variant_offer",
        *_offer_columns(),
        sa.Column("variant_id", sa.Uuid(), nullable=False),
        sa.Column("base_offer_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_variant_offer_variant_offer_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["variant_id"],
            ["variant.id"],
            name=op.f("fk_variant_offer_variant_offer_variant_id_variant"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["base_offer_id"],
            ["base_offer.id"],
            name=op.f("fk_variant_offer_variant_offer_base_offer_id_base_offer"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_variant_offer")),
        sa.UniqueConstraint("seller_id", "variant_id", name="uq_variant_offer_seller_variant"),
    )
    op.create_index("ix_variant_offer_variant", "variant_offer", ["variant_id"], unique=False)

    op.create_table(
        "offer_change_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("seller_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column(
            "scope",
            sa.Enum(*OFFER_SCOPES, name="offerscope", native_enum=False),
            nullable=False,
        ),
        sa.Column("offer_id", sa.Uuid(), nullable=False),
        sa.Column("patch", sa.Text(), nullable=False),
        sa.Column("snapshot", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*CHANGE_REQUEST_STATUSES, name="changerequeststatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("requested_by", sa.Uuid(), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_offer_change_request")),
    )
    op.create_index(
        "ix_offer_change_request_status",
        "offer_change_request",
        ["status", "requested_at"],
        unique=False,
    )
    op.create_index(
        "uq_offer_change_request_pending",
        "offer_change_request",
        ["seller_id", "scope", "offer_id"],
        unique=True,
        sqlite_where=sa.text("status = 'PENDING'"),
        postgresql_where=sa.text("status = 'PENDING'"),
    )


def downgrade() -> None:
    op.drop_index("uq_offer_change_request_pending", table_name="offer_change_request")
    op.drop_index("ix_offer_change_request_status", table_name="offer_change_request")
    op.drop_table("offer_change_request")
    op.drop_index("ix_variant_offer_variant", table_name="variant_offer")
    op.drop_table("variant_offer")
    op.drop_table("base_offer")
    op.drop_table("variant_option")
    op.drop_index("ix_variant_product", table_name="variant")
    op.drop_table("variant")
    op.drop_table("product")
