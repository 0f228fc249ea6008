"""Initial Portal schema: contas, memoriais, conteúdo e comércio

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

As tabelas podem já existir via SQLModel create_all (SQLite dev mode);
cada tabela só é criada quando ausente.
"""

from alembic import op
import sqlalchemy as sa

revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(table_name: str) -> bool:
    """Check if table already exists in the database."""
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    return table_name in inspector.get_table_names()


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return columns


def upgrade() -> None:
    # ===== Contas =====
    if not _table_exists("funeral_homes"):
        op.create_table(
            "funeral_homes",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("phone", sa.String(20), nullable=True),
            sa.Column("address", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_funeral_homes_email", "funeral_homes", ["email"], unique=True)

    if not _table_exists("family_users"):
        op.create_table(
            "family_users",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=True),
            sa.Column("phone", sa.String(20), nullable=True),
            sa.Column("invitation_token", sa.String(255), nullable=True),
            sa.Column("invitation_expiry", sa.DateTime(timezone=True), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(),
        )
        op.create_index("ix_family_users_email", "family_users", ["email"], unique=True)
        op.create_index(
            "ix_family_users_invitation_token", "family_users", ["invitation_token"], unique=True
        )

    if not _table_exists("admin_users"):
        op.create_table(
            "admin_users",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    # ===== Memoriais =====
    if not _table_exists("memorials"):
        op.create_table(
            "memorials",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("slug", sa.String(255), nullable=False),
            sa.Column("full_name", sa.String(255), nullable=False),
            sa.Column("birth_date", sa.String(10), nullable=True),
            sa.Column("death_date", sa.String(10), nullable=True),
            sa.Column("birthplace", sa.String(255), nullable=True),
            sa.Column("filiation", sa.Text(), nullable=True),
            sa.Column("biography", sa.Text(), nullable=True),
            sa.Column("main_photo", sa.Text(), nullable=True),
            sa.Column("visibility", sa.String(10), nullable=False, server_default="public"),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending_data"),
            sa.Column("is_historical", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("category", sa.String(100), nullable=True),
            sa.Column("grave_location", sa.Text(), nullable=True),
            sa.Column(
                "funeral_home_id", sa.Integer(), sa.ForeignKey("funeral_homes.id"), nullable=True
            ),
            sa.Column(
                "family_user_id", sa.Integer(), sa.ForeignKey("family_users.id"), nullable=True
            ),
            *_timestamps(),
        )
        op.create_index("ix_memorials_slug", "memorials", ["slug"], unique=True)
        op.create_index("ix_memorials_status", "memorials", ["status"])
        op.create_index("ix_memorials_funeral_home_id", "memorials", ["funeral_home_id"])
        op.create_index("ix_memorials_family_user_id", "memorials", ["family_user_id"])

    if not _table_exists("descendants"):
        op.create_table(
            "descendants",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("memorial_id", sa.Integer(), sa.ForeignKey("memorials.id"), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("relationship", sa.String(100), nullable=False),
            *_timestamps(updated=False),
        )
        op.create_index("ix_descendants_memorial_id", "descendants", ["memorial_id"])

    if not _table_exists("photos"):
        op.create_table(
            "photos",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("memorial_id", sa.Integer(), sa.ForeignKey("memorials.id"), nullable=False),
            sa.Column("file_url", sa.Text(), nullable=False),
            sa.Column("caption", sa.Text(), nullable=True),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(updated=False),
        )
        op.create_index("ix_photos_memorial_id", "photos", ["memorial_id"])

    if not _table_exists("dedications"):
        op.create_table(
            "dedications",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("memorial_id", sa.Integer(), sa.ForeignKey("memorials.id"), nullable=False),
            sa.Column("author_name", sa.String(255), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            *_timestamps(updated=False),
        )
        op.create_index("ix_dedications_memorial_id", "dedications", ["memorial_id"])
        op.create_index("ix_dedications_created_at", "dedications", ["created_at"])

    # ===== Comercial =====
    if not _table_exists("leads"):
        op.create_table(
            "leads",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False),
            sa.Column("phone", sa.String(20), nullable=True),
            sa.Column("accept_emails", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_leads_email", "leads", ["email"])
        op.create_index("ix_leads_status", "leads", ["status"])

    if not _table_exists("payments"):
        op.create_table(
            "payments",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("provider", sa.String(20), nullable=False, server_default="mock"),
            sa.Column("provider_payment_id", sa.String(255), nullable=False),
            sa.Column("plan_id", sa.String(32), nullable=False),
            sa.Column("method", sa.String(10), nullable=False),
            sa.Column("amount", sa.Integer(), nullable=False),
            sa.Column("currency", sa.String(3), nullable=False, server_default="brl"),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
            sa.Column("client_secret", sa.String(255), nullable=True),
            sa.Column("account_type", sa.String(20), nullable=False),
            sa.Column("account_id", sa.Integer(), nullable=False),
            sa.Column("memorial_id", sa.Integer(), sa.ForeignKey("memorials.id"), nullable=True),
            sa.Column("pix_code", sa.Text(), nullable=True),
            sa.Column("boleto_url", sa.Text(), nullable=True),
            sa.Column("boleto_barcode", sa.String(255), nullable=True),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("failure_code", sa.String(64), nullable=True),
            sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("raw_payload", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index(
            "ix_payments_provider_payment_id", "payments", ["provider_payment_id"], unique=True
        )
        op.create_index("ix_payments_provider", "payments", ["provider"])
        op.create_index("ix_payments_status", "payments", ["status"])
        op.create_index("ix_payments_account_id", "payments", ["account_id"])

    if not _table_exists("orders"):
        op.create_table(
            "orders",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("memorial_id", sa.Integer(), sa.ForeignKey("memorials.id"), nullable=False),
            sa.Column(
                "funeral_home_id", sa.Integer(), sa.ForeignKey("funeral_homes.id"), nullable=True
            ),
            sa.Column(
                "family_user_id", sa.Integer(), sa.ForeignKey("family_users.id"), nullable=True
            ),
            sa.Column(
                "payment_id", sa.Integer(), sa.ForeignKey("payments.id"), nullable=True, unique=True
            ),
            sa.Column("production_status", sa.String(20), nullable=False, server_default="new"),
            sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("internal_notes", sa.Text(), nullable=True),
            sa.Column("estimated_delivery", sa.DateTime(timezone=True), nullable=True),
            sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("assigned_to", sa.String(255), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_orders_memorial_id", "orders", ["memorial_id"])
        op.create_index("ix_orders_funeral_home_id", "orders", ["funeral_home_id"])
        op.create_index("ix_orders_production_status", "orders", ["production_status"])

    if not _table_exists("order_history"):
        op.create_table(
            "order_history",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
            sa.Column("previous_status", sa.String(20), nullable=True),
            sa.Column("new_status", sa.String(20), nullable=False),
            sa.Column("changed_by", sa.String(255), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(updated=False),
        )
        op.create_index("ix_order_history_order_id", "order_history", ["order_id"])


def downgrade() -> None:
    for table_name in (
        "order_history",
        "orders",
        "payments",
        "leads",
        "dedications",
        "photos",
        "descendants",
        "memorials",
        "admin_users",
        "family_users",
        "funeral_homes",
    ):
        if _table_exists(table_name):
            op.drop_table(table_name)
