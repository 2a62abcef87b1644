"""End-to-end tests for subscriptions, channel profiles and the dashboard."""

from uuid import uuid4

import pytest

API = "/api/v1"


class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_toggle_subscription(self, client, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")

        first = await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(bob))
        second = await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(bob))

        assert (first.status_code, first.json()["data"]) == (201, {"subscribed": True})
        assert (second.status_code, second.json()["data"]) == (200, {"subscribed": False})

    @pytest.mark.asyncio
    async def test_cannot_subscribe_to_self(self, client, make_user, auth_headers):
        alice = await make_user("alice")

        response = await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["message"] == "You cannot subscribe to your own channel"

    @pytest.mark.asyncio
    async def test_unknown_channel(self, client, make_user, auth_headers):
        alice = await make_user("alice")

        response = await client.post(f"{API}/subscriptions/c/{uuid4()}", headers=auth_headers(alice))

        assert response.status_code == 404
        assert response.json()["message"] == "Channel not found"

    @pytest.mark.asyncio
    async def test_subscriber_and_channel_lists(self, client, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")
        carol = await make_user("carol")
        await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(bob))
        await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(carol))
        await client.post(f"{API}/subscriptions/c/{carol.id}", headers=auth_headers(bob))

        subscribers = await client.get(f"{API}/subscriptions/c/{alice.id}")
        channels = await client.get(f"{API}/subscriptions/u/{bob.id}")

        assert {doc["username"] for doc in subscribers.json()["data"]["docs"]} == {"bob", "carol"}
        assert {doc["username"] for doc in channels.json()["data"]["docs"]} == {"alice", "carol"}
        assert "subscribedAt" in channels.json()["data"]["docs"][0]

    @pytest.mark.asyncio
    async def test_unknown_subscriber(self, client):
        response = await client.get(f"{API}/subscriptions/u/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"] == "Subscriber not found"


class TestChannelProfile:
    @pytest.mark.asyncio
    async def test_profile_counts_and_viewer_flag(self, client, make_user, auth_headers):
        alice = await make_user("alice", full_name="Alice Example")
        bob = await make_user("bob")
        await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(bob))

        as_bob = await client.get(f"{API}/users/c/Alice", headers=auth_headers(bob))
        anonymous = await client.get(f"{API}/users/c/alice")

        profile = as_bob.json()["data"]
        assert as_bob.status_code == 200
        assert profile["fullName"] == "Alice Example"
        assert profile["subscribersCount"] == 1
        assert profile["channelsSubscribedToCount"] == 0
        assert profile["isSubscribed"] is True
        assert anonymous.json()["data"]["isSubscribed"] is False
        assert "password" not in profile
        assert "passwordHash" not in profile

    @pytest.mark.asyncio
    async def test_unknown_channel(self, client):
        response = await client.get(f"{API}/users/c/nobody")

        assert response.status_code == 404
        assert response.json()["message"] == "Channel does not exist"


class TestDashboard:
    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        assert (await client.get(f"{API}/dashboard/stats")).status_code == 401

    @pytest.mark.asyncio
    async def test_stats_and_videos(self, client, make_user, make_video, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")
        video = await make_video(alice, "Published")
        await make_video(alice, "Draft", is_published=False)
        await client.get(f"{API}/videos/{video.id}")
        await client.get(f"{API}/videos/{video.id}")
        await client.post(f"{API}/likes/toggle/v/{video.id}", headers=auth_headers(bob))
        await client.post(f"{API}/subscriptions/c/{alice.id}", headers=auth_headers(bob))

        stats = await client.get(f"{API}/dashboard/stats", headers=auth_headers(alice))
        videos = await client.get(f"{API}/dashboard/videos", headers=auth_headers(alice))

        assert stats.json()["data"] == {
            "totalVideos": 2,
            "totalViews": 2,
            "totalSubscribers": 1,
            "totalLikes": 1,
        }
        assert {doc["title"] for doc in videos.json()["data"]} == {"Published", "Draft"}
