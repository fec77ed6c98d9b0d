"""create demand shift tables

Revision ID: 3b9a1c7e2d41
Revises:
Create Date: 2025-09-20 09:12:44.108215

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3b9a1c7e2d41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)


def upgrade() -> None:
    op.create_table(
        "electricity_prices",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("hour_range", sa.String(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("period_type", sa.String(), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    for table, date_column in (("electricity_demands", "demand_date"), ("demand_requests", "request_date")):
        extra = [sa.Column("cost", sa.Float())] if table == "electricity_demands" else [
            sa.Column("company_name", sa.String()),
            sa.Column("company_code", sa.String()),
        ]
        op.create_table(
            table,
            sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
            sa.Column("company_id", sa.String(), nullable=False, index=True),
            sa.Column("user_id", sa.String(), nullable=False, index=True),
            sa.Column("hour_slot", sa.String(), nullable=False),
            sa.Column("demand_kwh", sa.Float(), nullable=False),
            sa.Column(date_column, sa.Date()),
            sa.Column("status", sa.String(), server_default="pending"),
            sa.Column("notes", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
            *extra,
        )
    op.create_table(
        "demand_shift_recommendations",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("company_id", sa.String(), nullable=False, index=True),
        sa.Column("user_id", sa.String(), nullable=False, index=True),
        sa.Column("original_hour", sa.String(), nullable=False),
        sa.Column("recommended_hour", sa.String(), nullable=False),
        sa.Column("original_load_kwh", sa.Float(), nullable=False),
        sa.Column("potential_savings", sa.Float(), nullable=False, server_default="0"),
        sa.Column("co2_reduction_kg", sa.Float(), nullable=False, server_default="0"),
        sa.Column("reason", sa.String()),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("recommendation_date", sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("implemented_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            "company_id", "user_id", "original_hour", "recommended_hour",
            "original_load_kwh", "recommendation_date",
            name="uq_recommendation_per_day",
        ),
    )
    op.create_table(
        "approval_workflow",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("recommendation_id", UUID, sa.ForeignKey("demand_shift_recommendations.id"), nullable=False, index=True),
        sa.Column("requested_by", sa.String(), nullable=False),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approval_status", sa.String(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "user_green_points",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.String(), nullable=False, unique=True),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity_date", sa.Date(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_table(
        "green_points_history",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.String(), nullable=False, index=True),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("action_type", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("green_points_history")
    op.drop_table("user_green_points")
    op.drop_table("approval_workflow")
    op.drop_table("demand_shift_recommendations")
    op.drop_table("demand_requests")
    op.drop_table("electricity_demands")
    op.drop_table("electricity_prices")
