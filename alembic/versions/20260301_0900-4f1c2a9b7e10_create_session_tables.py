"""Create product, review, keyword and recommendation tables

Revision ID: 4f1c2a9b7e10
Revises: 
Create Date: 2026-03-01 09:00:12.418305

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '4f1c2a9b7e10'
down_revision = None
branch_labels = None
depends_on = None


ENUMS = {
    'platform': ('shopee', 'tiktok_shop', 'tokopedia'),
    'sentiment': ('positive', 'neutral', 'negative'),
    'priority': ('high', 'medium', 'low'),
}


def enum_type(name: str) -> sa.types.TypeEngine:
    """Enum column type; on PostgreSQL the named type is created once up front"""
    values = ENUMS[name]
    return sa.Enum(*values, name=name).with_variant(
        postgresql.ENUM(*values, name=name, create_type=False), 'postgresql'
    )


def upgrade() -> None:
    """Create session-scoped tables"""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name, values in ENUMS.items():
            postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('platform', enum_type('platform'), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('average_rating', sa.Numeric(3, 2), nullable=True),
        sa.Column('total_reviews', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('scraped_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_session_id', 'products', ['session_id'])

    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('text', sa.String(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sentiment', enum_type('sentiment'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], )
    )
    op.create_index('ix_reviews_product_id', 'reviews', ['product_id'])

    op.create_table('keywords',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.Column('keyword', sa.String(), nullable=False),
        sa.Column('frequency', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('sentiment', enum_type('sentiment'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_keywords_session_id', 'keywords', ['session_id'])

    op.create_table('recommendations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('priority', enum_type('priority'), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_recommendations_session_id', 'recommendations', ['session_id'])


def downgrade() -> None:
    """Drop session-scoped tables"""
    op.drop_index('ix_recommendations_session_id', table_name='recommendations')
    op.drop_table('recommendations')
    op.drop_index('ix_keywords_session_id', table_name='keywords')
    op.drop_table('keywords')
    op.drop_index('ix_reviews_product_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_index('ix_products_session_id', table_name='products')
    op.drop_table('products')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in ENUMS:
            postgresql.ENUM(name=name).drop(bind, checkfirst=True)
