from __future__ import annotations

import json
import logging
from pathlib import Path

from markdown_downloader.config import ConfigStore, DownloaderConfig


class TestLoad:
    """Tests for ConfigStore.load and load_result."""

    def test_first_load_creates_file_and_default_directory(self, store: ConfigStore) -> None:
        result = store.load_result()

        assert result.status == "created"
        assert result.error is None
        assert result.config.download_directory == str(store.default_download_dir)
        assert store.config_file.exists()
        assert store.default_download_dir.is_dir()

        payload = json.loads(store.config_file.read_text(encoding="utf-8"))
        assert payload == {"downloadDirectory": str(store.default_download_dir)}

    def test_second_load_returns_same_record_without_rewriting(self, store: ConfigStore) -> None:
        first = store.load()
        before = store.config_file.read_bytes()
        mtime = store.config_file.stat().st_mtime_ns

        result = store.load_result()

        assert result.status == "loaded"
        assert result.config == first
        assert store.config_file.read_bytes() == before
        assert store.config_file.stat().st_mtime_ns == mtime

    def test_reads_file_written_by_earlier_versions(self, store: ConfigStore, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere"
        store.config_dir.mkdir(parents=True)
        store.config_file.write_text(json.dumps({"downloadDirectory": str(target)}), encoding="utf-8")

        config = store.load()

        assert config.download_directory == str(target)
        assert target.is_dir()

    def test_malformed_json_falls_back_to_default(self, store: ConfigStore, caplog) -> None:
        store.config_dir.mkdir(parents=True)
        store.config_file.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="markdown_downloader.config"):
            result = store.load_result()

        assert result.status == "defaulted"
        assert result.error
        assert result.config == store.default_config()
        assert store.default_download_dir.is_dir()
        assert "Error reading config" in caplog.text
        # The broken file is left for the user to inspect
        assert store.config_file.read_text(encoding="utf-8") == "{not json"

    def test_wrong_shape_falls_back_to_default(self, store: ConfigStore) -> None:
        store.config_dir.mkdir(parents=True)
        store.config_file.write_text(json.dumps({"downloadDirectory": 42}), encoding="utf-8")

        result = store.load_result()

        assert result.status == "defaulted"
        assert "downloadDirectory" in result.error

    def test_relative_directory_falls_back_to_default(self, store: ConfigStore, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        store.config_dir.mkdir(parents=True)
        store.config_file.write_text(json.dumps({"downloadDirectory": "relative/dir"}), encoding="utf-8")

        result = store.load_result()

        assert result.status == "defaulted"
        assert "absolute" in result.error
        assert result.config == store.default_config()
        assert not (tmp_path / "relative").exists()

    def test_unusable_config_dir_falls_back_to_default(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = ConfigStore(config_dir=blocker, default_download_dir=tmp_path / "downloads")

        result = store.load_result()

        assert result.status == "defaulted"
        assert result.config.download_directory == str(tmp_path / "downloads")

    def test_load_never_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = ConfigStore(config_dir=blocker / "nested", default_download_dir=tmp_path / "d")

        assert store.load() == DownloaderConfig(download_directory=str(tmp_path / "d"))


class TestSave:
    """Tests for ConfigStore.save."""

    def test_save_then_load_round_trips(self, store: ConfigStore, tmp_path: Path) -> None:
        target = tmp_path / "new-root"

        store.save(DownloaderConfig(download_directory=str(target)))

        assert target.is_dir()
        assert store.load().download_directory == str(target)

    def test_save_leaves_no_temp_file(self, store: ConfigStore, tmp_path: Path) -> None:
        store.save(DownloaderConfig(download_directory=str(tmp_path / "root")))

        assert sorted(p.name for p in store.config_dir.iterdir()) == ["config.json"]

    def test_save_failure_is_logged_not_raised(self, tmp_path: Path, caplog) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = ConfigStore(config_dir=blocker, default_download_dir=tmp_path / "d")

        with caplog.at_level(logging.ERROR, logger="markdown_downloader.config"):
            store.save(DownloaderConfig(download_directory=str(tmp_path / "x")))

        assert "Error saving config" in caplog.text


def test_from_environment_uses_platform_locations(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    monkeypatch.setattr("sys.platform", "linux")

    store = ConfigStore.from_environment()

    assert store.config_file == tmp_path / ".config" / "markdown-downloader" / "config.json"
    assert store.default_download_dir == tmp_path / ".markdown-downloads"
