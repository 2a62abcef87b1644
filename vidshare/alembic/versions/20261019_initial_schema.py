"""initial schema: users, videos, comments, tweets, likes, subscriptions

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list:
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('sa_orm_sentinel', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        *_audit_columns(),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('avatar', sa.String(length=1024), nullable=True),
        sa.Column('cover_image', sa.String(length=1024), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'videos',
        *_audit_columns(),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('video_file', sa.String(length=1024), nullable=False),
        sa.Column('video_file_key', sa.String(length=512), nullable=True),
        sa.Column('thumbnail', sa.String(length=1024), nullable=False),
        sa.Column('thumbnail_key', sa.String(length=512), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_videos_owner_id', 'videos', ['owner_id'])
    op.create_index('ix_videos_is_published', 'videos', ['is_published'])

    op.create_table(
        'comments',
        *_audit_columns(),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_video_id', 'comments', ['video_id'])
    op.create_index('ix_comments_owner_id', 'comments', ['owner_id'])

    op.create_table(
        'tweets',
        *_audit_columns(),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tweets_owner_id', 'tweets', ['owner_id'])

    op.create_table(
        'likes',
        *_audit_columns(),
        sa.Column('liked_by_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        sa.Column('tweet_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['liked_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tweet_id'], ['tweets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('liked_by_id', 'video_id', name='uq_likes_user_video'),
        sa.UniqueConstraint('liked_by_id', 'comment_id', name='uq_likes_user_comment'),
        sa.UniqueConstraint('liked_by_id', 'tweet_id', name='uq_likes_user_tweet'),
        sa.CheckConstraint(
            '(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END'
            ' + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END'
            ' + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1',
            name='ck_likes_single_target',
        ),
    )
    op.create_index('ix_likes_liked_by_id', 'likes', ['liked_by_id'])
    op.create_index('ix_likes_video_id', 'likes', ['video_id'])
    op.create_index('ix_likes_comment_id', 'likes', ['comment_id'])
    op.create_index('ix_likes_tweet_id', 'likes', ['tweet_id'])

    op.create_table(
        'subscriptions',
        *_audit_columns(),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.Column('channel_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['channel_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_subscriber_channel'),
        sa.CheckConstraint('subscriber_id <> channel_id', name='ck_subscriptions_not_self'),
    )
    op.create_index('ix_subscriptions_subscriber_id', 'subscriptions', ['subscriber_id'])
    op.create_index('ix_subscriptions_channel_id', 'subscriptions', ['channel_id'])


def downgrade() -> None:
    op.drop_index('ix_subscriptions_channel_id', table_name='subscriptions')
    op.drop_index('ix_subscriptions_subscriber_id', table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index('ix_likes_tweet_id', table_name='likes')
    op.drop_index('ix_likes_comment_id', table_name='likes')
    op.drop_index('ix_likes_video_id', table_name='likes')
    op.drop_index('ix_likes_liked_by_id', table_name='likes')
    op.drop_table('likes')

    op.drop_index('ix_tweets_owner_id', table_name='tweets')
    op.drop_table('tweets')

    op.drop_index('ix_comments_owner_id', table_name='comments')
    op.drop_index('ix_comments_video_id', table_name='comments')
    op.drop_table('comments')

    op.drop_index('ix_videos_is_published', table_name='videos')
    op.drop_index('ix_videos_owner_id', table_name='videos')
    op.drop_table('videos')

    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
