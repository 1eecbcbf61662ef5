"""Holiday location and company scopes.

Revision ID: 0001
Revises:
Create Date: 2025-11-03
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _missing(inspector: sa.Inspector, table: str) -> bool:
    return not inspector.has_table(table)


def upgrade() -> None:
    # Tables may already exist: hr_holiday usually belongs to the host schema,
    # and `python -m holiday_scope.migrate` creates the rest with checkfirst.
    inspector = sa.inspect(op.get_bind())

    if _missing(inspector, "hr_holiday"):
        op.create_table(
            "hr_holiday",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("start", sa.Date(), nullable=False),
            sa.Column("end", sa.Date(), nullable=False),
            sa.Column("description", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_holiday_date_range", "hr_holiday", ["start", "end"])
    elif "ix_holiday_date_range" not in {index["name"] for index in inspector.get_indexes("hr_holiday")}:
        op.create_index("ix_holiday_date_range", "hr_holiday", ["start", "end"])

    if _missing(inspector, "hr_holiday_locations"):
        op.create_table(
            "hr_holiday_locations",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "holiday_id", sa.Integer(), sa.ForeignKey("hr_holiday.id", ondelete="CASCADE"), nullable=False
            ),
            sa.Column("country", sa.String(length=2), nullable=True),
            sa.Column("state", sa.String(length=100), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )
        op.create_index("ix_hr_holiday_locations_holiday_id", "hr_holiday_locations", ["holiday_id"])
        op.create_index("ix_holiday_locations_country_state", "hr_holiday_locations", ["country", "state"])

    if _missing(inspector, "hr_holiday_companies"):
        op.create_table(
            "hr_holiday_companies",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "holiday_id", sa.Integer(), sa.ForeignKey("hr_holiday.id", ondelete="CASCADE"), nullable=False
            ),
            sa.Column("company_id", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.UniqueConstraint("holiday_id", "company_id", name="uq_holiday_company"),
        )
        op.create_index("ix_hr_holiday_companies_holiday_id", "hr_holiday_companies", ["holiday_id"])
        op.create_index("ix_hr_holiday_companies_company_id", "hr_holiday_companies", ["company_id"])

    if _missing(inspector, "hr_employee_work_location"):
        op.create_table(
            "hr_employee_work_location",
            sa.Column("employee_id", sa.Integer(), primary_key=True, autoincrement=False),
            sa.Column("value", sa.String(length=32), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )

    if _missing(inspector, "app_option"):
        op.create_table(
            "app_option",
            sa.Column("name", sa.String(length=191), primary_key=True),
            sa.Column("value", sa.String(length=255), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        )


def downgrade() -> None:
    op.drop_table("app_option")
    op.drop_table("hr_employee_work_location")
    op.drop_index("ix_hr_holiday_companies_company_id", table_name="hr_holiday_companies")
    op.drop_index("ix_hr_holiday_companies_holiday_id", table_name="hr_holiday_companies")
    op.drop_table("hr_holiday_companies")
    op.drop_index("ix_holiday_locations_country_state", table_name="hr_holiday_locations")
    op.drop_index("ix_hr_holiday_locations_holiday_id", table_name="hr_holiday_locations")
    op.drop_table("hr_holiday_locations")
    # hr_holiday is left in place; it may predate this revision.
    op.drop_index("ix_holiday_date_range", table_name="hr_holiday")
