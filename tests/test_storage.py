"""Tests for media storage backends and upload handling."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from litestar.exceptions import ValidationException

from vidshare.config import StorageConfig, StoreConfig
from vidshare.lib.storage import LocalStorageBackend, StorageManager, discard, store_upload
from vidshare.lib.storage.manager import create_storage_backend
from vidshare.lib.storage.uploads import build_media_key


def _upload(data: bytes, content_type: str, filename: str = "clip.mp4"):
    upload = MagicMock()
    upload.content_type = content_type
    upload.filename = filename
    upload.read = AsyncMock(return_value=data)
    return upload


@pytest.fixture
def backend(tmp_path):
    return LocalStorageBackend(base_path=tmp_path, url_prefix="/media/")


class TestLocalStorageBackend:
    @pytest.mark.asyncio
    async def test_put_get_delete(self, backend, tmp_path):
        stored = await backend.put("videos/ab/file.mp4", b"data", "video/mp4")

        assert stored.url == "/media/videos/ab/file.mp4"
        assert stored.size == 4
        assert (tmp_path / "videos" / "ab" / "file.mp4").read_bytes() == b"data"
        assert await backend.get("videos/ab/file.mp4") == b"data"

        await backend.delete("videos/ab/file.mp4")
        assert not await backend.exists("videos/ab/file.mp4")

    @pytest.mark.asyncio
    async def test_delete_missing_is_ok(self, backend):
        await backend.delete("videos/none.mp4")

    @pytest.mark.asyncio
    async def test_key_cannot_escape_root(self, backend):
        with pytest.raises(ValueError):
            await backend.put("../outside.txt", b"x", "text/plain")


class TestMediaKeys:
    def test_key_layout(self):
        key = build_media_key("videos", b"payload", "Clip.MP4")
        kind, prefix, name = key.split("/")

        assert kind == "videos"
        assert len(prefix) == 2
        assert name.endswith(".mp4")

    def test_same_content_gets_distinct_keys(self):
        assert build_media_key("videos", b"x", "a.mp4") != build_media_key("videos", b"x", "a.mp4")

    def test_odd_suffix_dropped(self):
        key = build_media_key("thumbnails", b"x", "image.p/ng")
        assert "." not in key.rsplit("/", 1)[1]


class TestStoreUpload:
    @pytest.mark.asyncio
    async def test_stores_video(self, backend):
        stored = await store_upload(backend, _upload(b"video-bytes", "video/mp4"), "videos")

        assert stored.key.startswith("videos/")
        assert await backend.get(stored.key) == b"video-bytes"

    @pytest.mark.asyncio
    async def test_rejects_wrong_content_type(self, backend):
        with pytest.raises(ValidationException):
            await store_upload(backend, _upload(b"x", "text/plain", "notes.txt"), "thumbnails")

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self, backend):
        with pytest.raises(ValidationException):
            await store_upload(backend, _upload(b"", "video/mp4"), "videos")


class TestDiscard:
    @pytest.mark.asyncio
    async def test_skips_empty_keys(self):
        storage = AsyncMock()
        await discard(storage, None, "", "videos/a.mp4")
        storage.delete.assert_awaited_once_with("videos/a.mp4")

    @pytest.mark.asyncio
    async def test_failures_are_logged_not_raised(self, caplog):
        storage = AsyncMock()
        storage.delete.side_effect = OSError("disk gone")

        await discard(storage, "videos/a.mp4", "thumbnails/b.png")

        assert storage.delete.await_count == 2
        assert "Could not remove stored object" in caplog.text


class TestStorageManager:
    @pytest.mark.asyncio
    async def test_builds_default_store_once(self, tmp_path):
        manager = StorageManager(StorageConfig(stores={"default": StoreConfig(local_path=str(tmp_path))}))

        first = await manager.get()
        second = await manager.get("default")

        assert first is second
        assert isinstance(first, LocalStorageBackend)

    @pytest.mark.asyncio
    async def test_unknown_store(self):
        manager = StorageManager(StorageConfig())
        with pytest.raises(KeyError):
            await manager.get("archive")

    def test_local_mounts(self, tmp_path):
        manager = StorageManager(
            StorageConfig(stores={"default": StoreConfig(local_path=str(tmp_path), url_prefix="/files")})
        )
        assert manager.local_mounts() == {"/files": tmp_path}

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError):
            create_storage_backend(StoreConfig(backend="ftp"))


def _mock_s3_session():
    s3 = AsyncMock()
    client_cm = MagicMock()
    client_cm.__aenter__ = AsyncMock(return_value=s3)
    client_cm.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.client.return_value = client_cm
    return session, s3


class TestS3StorageBackend:
    @pytest.fixture
    def s3_backend(self):
        from vidshare.config import S3Config
        from vidshare.lib.storage.s3 import S3StorageBackend

        session, s3 = _mock_s3_session()
        config = S3Config(bucket="media", prefix="/uploads/", public_url="https://cdn.example/", cache_max_age=600)
        return S3StorageBackend(config, session=session), s3

    @pytest.mark.asyncio
    async def test_put_video_sets_media_headers(self, s3_backend):
        backend, s3 = s3_backend

        stored = await backend.put("videos/ab/clip.mp4", b"video-bytes", "video/mp4")

        params = s3.put_object.await_args.kwargs
        assert params["Bucket"] == "media"
        assert params["Key"] == "uploads/videos/ab/clip.mp4"
        assert params["ContentType"] == "video/mp4"
        assert params["CacheControl"] == "public, max-age=600, immutable"
        assert params["ContentDisposition"] == "inline"
        assert params["Metadata"]["sha256"] == stored.content_hash
        assert "ACL" not in params
        assert stored.url == "https://cdn.example/uploads/videos/ab/clip.mp4"
        assert stored.size == len(b"video-bytes")

    @pytest.mark.asyncio
    async def test_non_media_keys_are_revalidated(self, s3_backend):
        backend, s3 = s3_backend

        await backend.put("exports/report.json", b"{}", "application/json")

        assert s3.put_object.await_args.kwargs["CacheControl"] == "no-cache"

    @pytest.mark.asyncio
    async def test_delete_uses_prefixed_key(self, s3_backend):
        backend, s3 = s3_backend

        await backend.delete("thumbnails/cd/thumb.png")

        s3.delete_object.assert_awaited_once_with(Bucket="media", Key="uploads/thumbnails/cd/thumb.png")

    @pytest.mark.asyncio
    async def test_exists_maps_404_to_false(self, s3_backend):
        from botocore.exceptions import ClientError

        backend, s3 = s3_backend
        s3.head_object.side_effect = ClientError({"Error": {"Code": "404"}}, "HeadObject")

        assert await backend.exists("videos/none.mp4") is False

    @pytest.mark.asyncio
    async def test_exists_propagates_other_errors(self, s3_backend):
        from botocore.exceptions import ClientError

        backend, s3 = s3_backend
        s3.head_object.side_effect = ClientError({"Error": {"Code": "403"}}, "HeadObject")

        with pytest.raises(ClientError):
            await backend.exists("videos/secret.mp4")

    @pytest.mark.asyncio
    async def test_bucket_address_without_public_url(self):
        from vidshare.config import S3Config
        from vidshare.lib.storage.s3 import S3StorageBackend

        session, _ = _mock_s3_session()
        backend = S3StorageBackend(S3Config(bucket="media", region="eu-west-1"), session=session)

        assert await backend.get_url("videos/a.mp4") == "https://media.s3.eu-west-1.amazonaws.com/videos/a.mp4"

    def test_bucket_required(self):
        from vidshare.config import S3Config
        from vidshare.lib.storage.s3 import S3StorageBackend

        with pytest.raises(ValueError):
            S3StorageBackend(S3Config(), session=MagicMock())
