"""create math_problem_sessions and math_problem_submissions

Revision ID: base_0001
Revises:
Create Date: 2026-10-18 10:12:41.502318

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "base_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "math_problem_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("problem_text", sa.Text(), nullable=False),
        sa.Column("correct_answer", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_math_problem_sessions")),
    )
    op.create_index(
        op.f("ix_math_problem_sessions_created_at"),
        "math_problem_sessions",
        ["created_at"],
    )

    op.create_table(
        "math_problem_submissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("user_answer", sa.Float(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("feedback_text", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["math_problem_sessions.id"],
            name=op.f("fk_math_problem_submissions_session_id_math_problem_sessions"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_math_problem_submissions")),
    )
    op.create_index(
        op.f("ix_math_problem_submissions_session_id"),
        "math_problem_submissions",
        ["session_id"],
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_math_problem_submissions_session_id"), table_name="math_problem_submissions"
    )
    op.drop_table("math_problem_submissions")
    op.drop_index(op.f("ix_math_problem_sessions_created_at"), table_name="math_problem_sessions")
    op.drop_table("math_problem_sessions")
