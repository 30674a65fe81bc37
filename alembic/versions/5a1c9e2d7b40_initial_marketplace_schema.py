"""initial marketplace schema

Revision ID: 5a1c9e2d7b40
Revises:
Create Date: 2026-10-18 10:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5a1c9e2d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="buyer"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('buyer', 'seller')", name="ck_user_role"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "book",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("seller_name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("price > 0", name="ck_book_price_positive"),
        sa.CheckConstraint("stock >= 0", name="ck_book_stock_non_negative"),
    )
    op.create_index("ix_book_seller_id", "book", ["seller_id"])

    op.create_table(
        "order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("buyer_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'shipped', 'delivered', 'cancelled')",
            name="ck_order_status",
        ),
    )
    op.create_index("ix_order_buyer_id", "order", ["buyer_id"])
    op.create_index("ix_order_seller_id", "order", ["seller_id"])

    op.create_table(
        "orderitem",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("order.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("book.id", ondelete="SET NULL"), nullable=True),
        sa.Column("book_title", sa.String(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_orderitem_quantity_positive"),
    )
    op.create_index("ix_orderitem_order_id", "orderitem", ["order_id"])

    op.create_table(
        "wishlist",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("book_id", sa.Integer(), sa.ForeignKey("book.id", ondelete="CASCADE"), nullable=False),
        sa.Column("price_when_added", sa.Numeric(10, 2), nullable=False),
        sa.Column("notify_on_price_drop", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.Column("last_notified_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("user_id", "book_id"),
    )
    op.create_index("ix_wishlist_user_id", "wishlist", ["user_id"])
    op.create_index("ix_wishlist_book_id", "wishlist", ["book_id"])

    op.create_table(
        "wishlistshare",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("share_code", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_wishlistshare_share_code", "wishlistshare", ["share_code"], unique=True)
    op.create_index("ix_wishlistshare_user_id", "wishlistshare", ["user_id"])


def downgrade():
    op.drop_index("ix_wishlistshare_user_id", table_name="wishlistshare")
    op.drop_index("ix_wishlistshare_share_code", table_name="wishlistshare")
    op.drop_table("wishlistshare")
    op.drop_index("ix_wishlist_book_id", table_name="wishlist")
    op.drop_index("ix_wishlist_user_id", table_name="wishlist")
    op.drop_table("wishlist")
    op.drop_index("ix_orderitem_order_id", table_name="orderitem")
    op.drop_table("orderitem")
    op.drop_index("ix_order_seller_id", table_name="order")
    op.drop_index("ix_order_buyer_id", table_name="order")
    op.drop_table("order")
    op.drop_index("ix_book_seller_id", table_name="book")
    op.drop_table("book")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
