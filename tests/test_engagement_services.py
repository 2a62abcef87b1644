"""Tests for like and subscription toggles with a mocked session."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from vidshare.db.models import Like, Subscription
from vidshare.db.services import dashboard_service, like_service, subscription_service
from vidshare.lib.hooks import AFTER_LIKE_TOGGLE, AFTER_SUBSCRIPTION_TOGGLE, hooks


def _existing(mock_db_session):
    mock_db_session.execute.return_value.first.return_value = (uuid4(),)


class TestToggleLike:
    @pytest.mark.asyncio
    async def test_creates_like_when_absent(self, mock_db_session):
        user_id, video_id = uuid4(), uuid4()

        liked = await like_service.toggle_like(mock_db_session, user_id, "video", video_id)

        assert liked is True
        added = mock_db_session.add.call_args.args[0]
        assert isinstance(added, Like)
        assert added.liked_by_id == user_id
        assert added.video_id == video_id
        assert added.comment_id is None
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_removes_like_when_present(self, mock_db_session):
        _existing(mock_db_session)

        liked = await like_service.toggle_like(mock_db_session, uuid4(), "comment", uuid4())

        assert liked is False
        mock_db_session.add.assert_not_called()
        # select + delete
        assert mock_db_session.execute.await_count == 2
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_reports_liked(self, mock_db_session):
        mock_db_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

        liked = await like_service.toggle_like(mock_db_session, uuid4(), "tweet", uuid4())

        assert liked is True
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fires_hook(self, mock_db_session, clean_hooks):
        seen = []
        hooks.add_action(AFTER_LIKE_TOGGLE, lambda *args: seen.append(args))
        user_id, video_id = uuid4(), uuid4()

        await like_service.toggle_like(mock_db_session, user_id, "video", video_id)

        assert seen == [(user_id, "video", video_id, True)]

    @pytest.mark.asyncio
    async def test_unknown_target_kind(self, mock_db_session):
        with pytest.raises(ValueError):
            await like_service.toggle_like(mock_db_session, uuid4(), "playlist", uuid4())

    @pytest.mark.asyncio
    async def test_target_exists(self, mock_db_session):
        assert await like_service.target_exists(mock_db_session, "video", uuid4()) is False
        _existing(mock_db_session)
        assert await like_service.target_exists(mock_db_session, "video", uuid4()) is True


class TestLikeQueries:
    def test_liked_videos_query_filters_visibility(self):
        sql = str(like_service.liked_videos_query(uuid4()).statement())

        assert "JOIN likes" in sql
        assert "videos.is_published" in sql
        assert "videos.owner_id" in sql

    @pytest.mark.asyncio
    async def test_tweet_like_counts_empty_input(self, mock_db_session):
        assert await like_service.get_tweet_like_counts(mock_db_session, []) == {}
        mock_db_session.execute.assert_not_called()


class TestToggleSubscription:
    @pytest.mark.asyncio
    async def test_self_subscription_rejected_before_db(self, mock_db_session):
        user_id = uuid4()
        with pytest.raises(ValueError):
            await subscription_service.toggle_subscription(mock_db_session, user_id, user_id)
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribes_when_absent(self, mock_db_session):
        subscriber_id, channel_id = uuid4(), uuid4()

        subscribed = await subscription_service.toggle_subscription(mock_db_session, subscriber_id, channel_id)

        assert subscribed is True
        added = mock_db_session.add.call_args.args[0]
        assert isinstance(added, Subscription)
        assert (added.subscriber_id, added.channel_id) == (subscriber_id, channel_id)

    @pytest.mark.asyncio
    async def test_unsubscribes_when_present(self, mock_db_session, clean_hooks):
        _existing(mock_db_session)
        seen = []
        hooks.add_action(AFTER_SUBSCRIPTION_TOGGLE, lambda *args: seen.append(args[-1]))

        subscribed = await subscription_service.toggle_subscription(mock_db_session, uuid4(), uuid4())

        assert subscribed is False
        assert seen == [False]

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_reports_subscribed(self, mock_db_session):
        mock_db_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

        subscribed = await subscription_service.toggle_subscription(mock_db_session, uuid4(), uuid4())

        assert subscribed is True
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_counts_default_to_zero(self, mock_db_session):
        mock_db_session.execute.return_value.scalar.return_value = None
        assert await subscription_service.count_subscribers(mock_db_session, uuid4()) == 0


class TestDashboardStats:
    @pytest.mark.asyncio
    async def test_combines_totals(self):
        session = MagicMock()
        channel_id = uuid4()
        with patch.object(
            dashboard_service.video_service, "get_channel_video_totals", AsyncMock(return_value=(3, 120))
        ), patch.object(
            dashboard_service.subscription_service, "count_subscribers", AsyncMock(return_value=7)
        ), patch.object(
            dashboard_service.like_service, "count_channel_video_likes", AsyncMock(return_value=11)
        ):
            stats = await dashboard_service.get_channel_stats(session, channel_id)

        assert stats == dashboard_service.ChannelStats(
            total_videos=3, total_views=120, total_subscribers=7, total_likes=11
        )
