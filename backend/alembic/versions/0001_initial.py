from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "match",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("code", sa.String(length=11), nullable=False, unique=True),
        sa.Column("court_number", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(), nullable=False, server_default="tennis"),
        sa.Column("format", sa.String(), nullable=False, server_default="singles"),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column("history", sa.JSON(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_match_court_active", "match", ["court_number", "is_completed"])
    op.create_index("ix_match_created_at", "match", ["created_at"])


def downgrade():
    op.drop_index("ix_match_created_at", table_name="match")
    op.drop_index("ix_match_court_active", table_name="match")
    op.drop_table("match")
