"""Add tweet_embed_html

Revision ID: 003
Revises: 002
Create Date: 2024-05-21 00:00:00.000000+00:00

What:  Stores the oEmbed snippet fetched when a status-post URL is submitted,
       so listings never call the provider.
How:   Nullable column; existing rows simply have no embed.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "entries",
        sa.Column(
            "tweet_embed_html",
            sa.Text(),
            nullable=True,
            comment="Embed HTML fetched once at creation",
        ),
    )


def downgrade() -> None:
    with op.batch_alter_table("entries") as batch_op:
        batch_op.drop_column("tweet_embed_html")
