"""create user, game_template and game tables

Revision ID: 1a7c3e9d2f40
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a7c3e9d2f40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('role', sa.Enum('USER', 'ADMIN', 'SUPER_ADMIN', name='role'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('user') as batch_op:
        batch_op.create_index(batch_op.f('ix_user_username'), ['username'], unique=True)

    op.create_table(
        'game_template',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_template') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_template_slug'), ['slug'], unique=True)

    op.create_table(
        'game',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('creator_id', sa.Integer(), nullable=False),
        sa.Column('game_template_id', sa.Integer(), nullable=False),
        sa.Column('thumbnail_image', sa.String(length=512), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('game_json', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['creator_id'], ['user.id']),
        sa.ForeignKeyConstraint(['game_template_id'], ['game_template.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_name'), ['name'], unique=True)
        batch_op.create_index(batch_op.f('ix_game_creator_id'), ['creator_id'], unique=False)


def downgrade():
    with op.batch_alter_table('game') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_creator_id'))
        batch_op.drop_index(batch_op.f('ix_game_name'))
    op.drop_table('game')

    with op.batch_alter_table('game_template') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_template_slug'))
    op.drop_table('game_template')

    with op.batch_alter_table('user') as batch_op:
        batch_op.drop_index(batch_op.f('ix_user_username'))
    op.drop_table('user')
    sa.Enum(name='role').drop(op.get_bind(), checkfirst=True)
