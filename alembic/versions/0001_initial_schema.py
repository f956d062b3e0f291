"""initial schema: admins, customers, feeds, bills, payments

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

usertype = sa.Enum("BMC", "DABHADI", "CUSTOMER", name="usertype")
userstatus = sa.Enum("ACTIVE", "INACTIVE", name="userstatus")
feedstatus = sa.Enum("ACTIVE", "INACTIVE", name="feedstatus")
billstatus = sa.Enum("PENDING", "PARTIAL", "PAID", name="billstatus")
billrecordstatus = sa.Enum("ACTIVE", "VOID", name="billrecordstatus")


def upgrade() -> None:
    op.create_table(
        "admin",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("mobile_no", sa.String(15), nullable=False),
        sa.Column("name", sa.String(120)),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_admin_mobile_no", "admin", ["mobile_no"], unique=True)

    op.create_table(
        "customer",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("mobile_no", sa.String(15), nullable=False, unique=True),
        sa.Column("address", sa.Text()),
        sa.Column("email", sa.String(255)),
        sa.Column("user_type", usertype, nullable=False),
        sa.Column("status", userstatus, nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_customer_user_code", "customer", ["user_code"], unique=True)

    op.create_table(
        "feed",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("brand", sa.String(120)),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        sa.Column("default_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("shop_stock", sa.Numeric(18, 3), nullable=False),
        sa.Column("godown_stock", sa.Numeric(18, 3), nullable=False),
        sa.Column("stock", sa.Numeric(18, 3), nullable=False),
        sa.Column("status", feedstatus, nullable=False),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "bill",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("bill_number", sa.String(20), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("customer.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("total_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("pending_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("status", billstatus, nullable=False),
        sa.Column("bill_status", billrecordstatus, nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_bill_bill_number", "bill", ["bill_number"], unique=True)
    op.create_index("ix_bill_created_at", "bill", ["created_at"])

    op.create_table(
        "bill_item",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "bill_id",
            sa.Integer(),
            sa.ForeignKey("bill.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("feed_id", sa.Integer(), sa.ForeignKey("feed.id"), nullable=False),
        sa.Column("quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("storage_location", sa.String(60), nullable=False),
        sa.Column("stock_source", sa.String(10), nullable=False),
    )

    op.create_table(
        "payment_transaction",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("customer.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "bill_id",
            sa.Integer(),
            sa.ForeignKey("bill.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
    )


def downgrade() -> None:
    op.drop_table("payment_transaction")
    op.drop_table("bill_item")
    op.drop_index("ix_bill_created_at", table_name="bill")
    op.drop_index("ix_bill_bill_number", table_name="bill")
    op.drop_table("bill")
    op.drop_table("feed")
    op.drop_index("ix_customer_user_code", table_name="customer")
    op.drop_table("customer")
    op.drop_index("ix_admin_mobile_no", table_name="admin")
    op.drop_table("admin")
    for enum in (billrecordstatus, billstatus, feedstatus, userstatus, usertype):
        enum.drop(op.get_bind(), checkfirst=True)
