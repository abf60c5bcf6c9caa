"""Tests for ShareableUriResolver."""

from unittest.mock import AsyncMock

from gudang_backup.storage.share import ShareableUriResolver

SCOPED_URI = "content://com.android.externalstorage.documents/document/primary%3ADownload%2Fb.json"


class TestDirectCandidates:
    """Directly readable files are shared as-is."""

    async def test_file_uri(self, tmp_path):
        resolver = ShareableUriResolver(tmp_path)
        assert await resolver.resolve("b.json", "file:///data/b.json") == "file:///data/b.json"

    async def test_absolute_path(self, tmp_path):
        path = tmp_path / "b.json"
        resolver = ShareableUriResolver(tmp_path / "cache")
        assert await resolver.resolve("b.json", str(path)) == path.as_uri()

    async def test_direct_wins_over_scoped(self, tmp_path):
        scoped = AsyncMock()
        resolver = ShareableUriResolver(tmp_path / "cache", scoped)

        uri = await resolver.resolve("b.json", SCOPED_URI, "file:///data/b.json")

        assert uri == "file:///data/b.json"
        scoped.read_bytes.assert_not_awaited()
        assert not (tmp_path / "cache").exists()

    async def test_blank_candidates_skipped(self, tmp_path):
        resolver = ShareableUriResolver(tmp_path)
        assert await resolver.resolve("b.json", None, "", "/x/b.json") == "file:///x/b.json"


class TestScopedCandidates:
    """Scoped URIs are copied into the cache directory."""

    async def test_copied_into_cache(self, tmp_path):
        scoped = AsyncMock()
        scoped.read_bytes.return_value = b'{"version": 1}'
        cache = tmp_path / "cache"
        resolver = ShareableUriResolver(cache, scoped)

        uri = await resolver.resolve("b.json", SCOPED_URI)

        assert uri == (cache / "b.json").resolve().as_uri()
        assert (cache / "b.json").read_bytes() == b'{"version": 1}'
        scoped.read_bytes.assert_awaited_once_with(SCOPED_URI)

    async def test_overwrites_previous_copy(self, tmp_path):
        scoped = AsyncMock()
        scoped.read_bytes.return_value = b"new"
        cache = tmp_path / "cache"
        cache.mkdir()
        (cache / "b.json").write_bytes(b"old")

        await ShareableUriResolver(cache, scoped).resolve("b.json", SCOPED_URI)

        assert (cache / "b.json").read_bytes() == b"new"

    async def test_next_candidate_after_failure(self, tmp_path):
        scoped = AsyncMock()
        scoped.read_bytes.side_effect = [PermissionError("revoked"), b"ok"]
        resolver = ShareableUriResolver(tmp_path, scoped)

        uri = await resolver.resolve("b.json", "content://a", "content://b")

        assert uri == (tmp_path / "b.json").resolve().as_uri()
        assert scoped.read_bytes.await_count == 2

    async def test_fallback_dir(self, tmp_path):
        scoped = AsyncMock()
        scoped.read_bytes.return_value = b"x"
        resolver = ShareableUriResolver(None, scoped, fallback_dir=tmp_path / "docs")

        uri = await resolver.resolve("b.json", SCOPED_URI)

        assert uri == (tmp_path / "docs" / "b.json").resolve().as_uri()


class TestUnavailable:
    """``None`` signals that sharing is unavailable."""

    async def test_no_candidates(self, tmp_path):
        assert await ShareableUriResolver(tmp_path, AsyncMock()).resolve("b.json") is None

    async def test_scoped_without_reader(self, tmp_path):
        assert await ShareableUriResolver(tmp_path).resolve("b.json", SCOPED_URI) is None

    async def test_no_cache_dir(self):
        assert await ShareableUriResolver(None, AsyncMock()).resolve("b.json", SCOPED_URI) is None

    async def test_every_read_fails(self, tmp_path):
        scoped = AsyncMock()
        scoped.read_bytes.side_effect = OSError("gone")
        assert await ShareableUriResolver(tmp_path, scoped).resolve("b.json", SCOPED_URI) is None
