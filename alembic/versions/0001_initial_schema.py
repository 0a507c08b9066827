"""Initial schema: employees, access flags, customers, orders, billings, collections

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17

Enum types store the member values (e.g. '발주처', 'new'), matching app.models.base.pg_enum.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None

ENUM_TYPES = (
    "user_role", "employment_status", "customer_type", "customer_status",
    "contract_type", "contract_status", "business_type", "pricing_type", "pricing_unit", "export_type",
    "billing_type", "invoice_status", "collection_method", "receivable_classification",
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _audit():
    return [
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("updated_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
    ]


def _id():
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def upgrade() -> None:
    # Users & access
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("department", sa.String(100)),
        sa.Column("position", sa.String(100)),
        sa.Column("hire_date", sa.Date()),
        sa.Column("role", sa.Enum("admin", "manager", "user", name="user_role"), nullable=False),
        sa.Column("employment_status", sa.Enum("active", "inactive", name="employment_status"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_employment_status", "users", ["employment_status"])
    op.create_index("ix_users_is_active", "users", ["is_active"])

    op.create_table(
        "modules",
        _id(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("icon", sa.String(50)),
        sa.Column("href", sa.String(255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_modules_id", "modules", ["id"])
    op.create_index("ix_modules_code", "modules", ["code"], unique=True)

    op.create_table(
        "module_pages",
        _id(),
        sa.Column("module_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("modules.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("href", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(50)),
        sa.Column("parent_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("module_pages.id", ondelete="SET NULL")),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("module_id", "code", name="uq_module_pages_module_code"),
    )
    op.create_index("ix_module_pages_id", "module_pages", ["id"])
    op.create_index("ix_module_pages_module_id", "module_pages", ["module_id"])

    op.create_table(
        "user_module_access",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("module_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("modules.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "module_id", name="uq_user_module_access"),
    )
    op.create_index("ix_user_module_access_id", "user_module_access", ["id"])
    op.create_index("ix_user_module_access_user_id", "user_module_access", ["user_id"])

    op.create_table(
        "user_page_access",
        _id(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("page_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("module_pages.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "page_id", name="uq_user_page_access"),
    )
    op.create_index("ix_user_page_access_id", "user_page_access", ["id"])
    op.create_index("ix_user_page_access_user_id", "user_page_access", ["user_id"])

    # Companies & customers
    op.create_table(
        "companies",
        _id(),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("business_number", sa.String(12)),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_companies_id", "companies", ["id"])

    op.create_table(
        "bank_accounts",
        _id(),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("bank_name", sa.String(100), nullable=False),
        sa.Column("account_number", sa.String(50), nullable=False),
        sa.Column("initial_balance", sa.Numeric(15, 2), nullable=False),
        sa.Column("current_balance", sa.Numeric(15, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("initial_balance >= 0", name="ck_bank_accounts_initial_nonneg"),
        sa.CheckConstraint("current_balance >= 0", name="ck_bank_accounts_current_nonneg"),
    )
    op.create_index("ix_bank_accounts_id", "bank_accounts", ["id"])
    op.create_index("ix_bank_accounts_company_id", "bank_accounts", ["company_id"])

    op.create_table(
        "customers",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("customer_type", sa.Enum("발주처", "검증업체", name="customer_type"), nullable=False),
        sa.Column("status", sa.Enum("거래중", "중단", name="customer_status"), nullable=False),
        sa.Column("business_number", sa.String(12)),
        sa.Column("representative_name", sa.String(100)),
        sa.Column("manager_name", sa.String(100)),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("notes", sa.Text()),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_customers_id", "customers", ["id"])
    op.create_index("ix_customers_name", "customers", ["name"])
    op.create_index("ix_customers_customer_type", "customers", ["customer_type"])

    # Orders
    op.create_table(
        "pollutants",
        _id(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("category", sa.String(50)),
        sa.Column("unit", sa.String(20)),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_pollutants_id", "pollutants", ["id"])

    op.create_table(
        "methods",
        _id(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_methods_id", "methods", ["id"])

    op.create_table(
        "orders",
        _id(),
        sa.Column("order_number", sa.String(20), nullable=False),
        sa.Column("contract_type", sa.Enum("new", "change", name="contract_type"), nullable=False),
        sa.Column(
            "contract_status",
            sa.Enum("quotation", "contract", "in_progress", "completed", name="contract_status"),
            nullable=False,
        ),
        sa.Column("business_type", sa.Enum("civilian", "government", name="business_type"), nullable=False),
        sa.Column("pricing_type", sa.Enum("total", "unit_price", name="pricing_type"), nullable=False),
        sa.Column("contract_unit", sa.Enum("Ton", "대", "㎥", name="pricing_unit")),
        sa.Column("contract_name", sa.String(500), nullable=False),
        sa.Column("contract_date", sa.Date(), nullable=False),
        sa.Column("contract_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "verification_company_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("customers.id", ondelete="SET NULL")
        ),
        sa.Column("manager_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("parent_order_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="RESTRICT")),
        sa.Column("export_type", sa.Enum("on_site", "export", "new_business", name="export_type"), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("attachments", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        *_audit(),
        *_timestamps(),
        sa.CheckConstraint("contract_amount >= 0", name="ck_orders_contract_amount_nonneg"),
        sa.CheckConstraint("parent_order_id IS NULL OR parent_order_id <> id", name="ck_orders_not_own_parent"),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_contract_type", "orders", ["contract_type"])
    op.create_index("ix_orders_contract_status", "orders", ["contract_status"])
    op.create_index("ix_orders_contract_date", "orders", ["contract_date"])
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])
    op.create_index("ix_orders_parent_order_id", "orders", ["parent_order_id"])

    op.create_table(
        "order_pollutants",
        _id(),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pollutant_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("pollutants.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("concentration", sa.Numeric(14, 4), nullable=False),
        sa.Column("group_name", sa.String(100)),
        *_timestamps(),
    )
    op.create_index("ix_order_pollutants_id", "order_pollutants", ["id"])
    op.create_index("ix_order_pollutants_order_id", "order_pollutants", ["order_id"])

    op.create_table(
        "order_methods",
        _id(),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("method_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("methods.id", ondelete="RESTRICT"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_order_methods_id", "order_methods", ["id"])
    op.create_index("ix_order_methods_order_id", "order_methods", ["order_id"])

    # Finance
    op.create_table(
        "billings",
        _id(),
        sa.Column("billing_number", sa.String(20), nullable=False),
        sa.Column("billing_date", sa.Date(), nullable=False),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("billing_type", sa.Enum("contract", "interim", "final", name="billing_type"), nullable=False),
        sa.Column("billing_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("expected_payment_date", sa.Date(), nullable=False),
        sa.Column("invoice_status", sa.Enum("issued", "not_issued", name="invoice_status"), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column(
            "receivable_classification",
            sa.Enum("normal", "overdue_long", "bad_debt", "written_off", name="receivable_classification"),
        ),
        sa.Column("receivable_notes", sa.Text()),
        *_audit(),
        *_timestamps(),
        sa.CheckConstraint("billing_amount > 0", name="ck_billings_amount_positive"),
    )
    op.create_index("ix_billings_id", "billings", ["id"])
    op.create_index("ix_billings_billing_number", "billings", ["billing_number"], unique=True)
    op.create_index("ix_billings_billing_date", "billings", ["billing_date"])
    op.create_index("ix_billings_order_id", "billings", ["order_id"])
    op.create_index("ix_billings_customer_id", "billings", ["customer_id"])

    op.create_table(
        "collections",
        _id(),
        sa.Column("billing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("billings.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("collection_date", sa.Date(), nullable=False),
        sa.Column("collection_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("collection_method", sa.Enum("bank_transfer", "other", name="collection_method"), nullable=False),
        sa.Column("bank_account_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bank_accounts.id", ondelete="SET NULL")),
        sa.Column("bank_name", sa.String(100)),
        sa.Column("account_number", sa.String(50)),
        sa.Column("depositor", sa.String(100)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint("collection_amount > 0", name="ck_collections_amount_positive"),
    )
    op.create_index("ix_collections_id", "collections", ["id"])
    op.create_index("ix_collections_billing_id", "collections", ["billing_id"])
    op.create_index("ix_collections_collection_date", "collections", ["collection_date"])

    op.create_table(
        "receivable_activities",
        _id(),
        sa.Column("billing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("billings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("activity_content", sa.Text(), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_receivable_activities_id", "receivable_activities", ["id"])
    op.create_index("ix_receivable_activities_billing_id", "receivable_activities", ["billing_id"])


def downgrade() -> None:
    for table in (
        "receivable_activities", "collections", "billings",
        "order_methods", "order_pollutants", "orders", "methods", "pollutants",
        "customers", "bank_accounts", "companies",
        "user_page_access", "user_module_access", "module_pages", "modules", "users",
    ):
        op.drop_table(table)
    for enum_name in ENUM_TYPES:
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
