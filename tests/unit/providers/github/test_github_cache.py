"""Tests for the GitHub Actions cache provider."""

from __future__ import annotations

import hashlib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from qodana_ci.core.errors import CacheServiceError, ProviderError
from qodana_ci.providers.github.cache import (
    GHES_UNSUPPORTED_MESSAGE,
    GitHubCacheProvider,
    create_archive,
    extract_archive,
    get_cache_version,
    is_ghes,
)


class TestIsGhes:
    def test_github_com(self) -> None:
        assert not is_ghes("https://github.com")

    def test_enterprise_server(self) -> None:
        assert is_ghes("https://github.example.com")

    def test_unset_defaults_to_github_com(self) -> None:
        assert not is_ghes("")


class TestGetCacheVersion:
    def test_linux(self) -> None:
        expected = hashlib.sha256(b"/cache|gzip|1.0").hexdigest()
        assert get_cache_version(["/cache"], platform="linux") == expected

    def test_windows_is_scoped(self) -> None:
        expected = hashlib.sha256(b"C:\\cache|gzip|windows-only|1.0").hexdigest()
        assert get_cache_version(["C:\\cache"], platform="win32") == expected


class TestArchive:
    def test_restores_directory_contents(self, tmp_path: Path) -> None:
        source = tmp_path / "cache"
        (source / "nested").mkdir(parents=True)
        (source / "nested" / "index.bin").write_bytes(b"data")
        archive = tmp_path / "cache.tgz"

        assert create_archive([str(source)], archive) > 0

        target = tmp_path / "restored"
        extract_archive(archive, [str(target)], tmp_path / "scratch")
        assert (target / "nested" / "index.bin").read_bytes() == b"data"


class TestGitHubCacheProvider:
    @pytest.fixture
    def client(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def provider(self, client: MagicMock, tmp_path: Path) -> GitHubCacheProvider:
        return GitHubCacheProvider("https://github.com", lambda: client, tmp_path / "temp")

    def test_ghes_unsupported(self, tmp_path: Path) -> None:
        provider = GitHubCacheProvider("https://ghe.example.com", MagicMock(), tmp_path)
        assert not provider.is_supported()
        assert provider.unsupported_reason() == GHES_UNSUPPORTED_MESSAGE

    def test_save(self, provider: GitHubCacheProvider, client: MagicMock, tmp_path: Path) -> None:
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        (cache_dir / "f").write_text("x")
        client.call.side_effect = [
            {"ok": True, "signed_upload_url": "https://blob.example.com/up"},
            {"ok": True, "entry_id": "1"},
        ]

        with patch("qodana_ci.providers.github.cache.upload_blob") as mock_upload:
            provider.save([str(cache_dir)], "key-1")

        assert mock_upload.call_args[0][0] == "https://blob.example.com/up"
        create_call, finalize_call = client.call.call_args_list
        assert create_call[0][:2] == ("CacheService", "CreateCacheEntry")
        assert create_call[0][2]["key"] == "key-1"
        assert finalize_call[0][1] == "FinalizeCacheEntryUpload"
        assert isinstance(finalize_call[0][2]["size_bytes"], str)

    def test_save_reservation_rejected(
        self, provider: GitHubCacheProvider, client: MagicMock, tmp_path: Path
    ) -> None:
        client.call.return_value = {"ok": False}
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        with pytest.raises(CacheServiceError, match="Unable to reserve cache"):
            provider.save([str(cache_dir)], "key-1")

    def test_restore_miss(self, provider: GitHubCacheProvider, client: MagicMock) -> None:
        client.call.return_value = {"ok": False}
        assert provider.restore(["/cache"], "key-1", ["key"]) is None
        payload = client.call.call_args[0][2]
        assert payload["key"] == "key-1"
        assert payload["restore_keys"] == ["key"]

    def test_restore_hit(
        self, provider: GitHubCacheProvider, client: MagicMock, tmp_path: Path
    ) -> None:
        source = tmp_path / "source"
        source.mkdir()
        (source / "f").write_text("cached")
        prepared = tmp_path / "prepared.tgz"
        create_archive([str(source)], prepared)
        client.call.return_value = {
            "ok": True,
            "signed_download_url": "https://blob.example.com/down",
            "matched_key": "key",
        }

        def fake_download(url: str, dest: Path) -> None:
            dest.write_bytes(prepared.read_bytes())

        target = tmp_path / "cache"
        with patch("qodana_ci.providers.github.cache.download_blob", side_effect=fake_download):
            matched = provider.restore([str(target)], "key-1", ["key"])

        assert matched == "key"
        assert (target / "f").read_text() == "cached"

    def test_restore_service_error(self, provider: GitHubCacheProvider, client: MagicMock) -> None:
        client.call.side_effect = ProviderError("boom")
        with pytest.raises(CacheServiceError, match="boom"):
            provider.restore(["/cache"], "key-1", [])
