from unittest.mock import patch

import pytest

from src import config
from src.config import PersistenceSettings, SentinelSettings, load_settings

ENV_KEYS = [
    "SENTINEL_INTERVAL_MS",
    "SENTINEL_TARGET_SELECTORS",
    "SENTINEL_HISTORY_SIZE",
    "PERSISTENCE_MOUNT_POINT",
    "PERSISTENCE_MOUNT_ROOT",
]


@pytest.fixture
def clean_env(monkeypatch):
    """.env.local を読まず、関連する環境変数を消す"""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    with patch.object(config, "load_local_env"):
        yield monkeypatch


class TestSentinelSettings:
    def test_defaults(self):
        settings = SentinelSettings()

        assert settings.interval_ms == 60000
        assert settings.target_selectors == [
            "colab-toolbar-button#connect",
            "colab-connect-button",
        ]
        assert settings.history_size == 100

    @pytest.mark.parametrize("interval_ms", [0, -60000])
    def test_interval_must_be_positive(self, interval_ms):
        with pytest.raises(ValueError):
            SentinelSettings(interval_ms=interval_ms)

    @pytest.mark.parametrize("selectors", [[], ["#ok", " "]])
    def test_selectors_must_not_be_blank(self, selectors):
        with pytest.raises(ValueError):
            SentinelSettings(target_selectors=selectors)

    def test_selectors_are_stripped(self):
        settings = SentinelSettings(target_selectors=[" #a ", "#b"])

        assert settings.target_selectors == ["#a", "#b"]


class TestLoadSettings:
    def test_defaults_without_env(self, clean_env):
        sentinel_settings, persistence_settings = load_settings()

        assert sentinel_settings == SentinelSettings()
        assert persistence_settings == PersistenceSettings()

    def test_reads_environment(self, clean_env):
        clean_env.setenv("SENTINEL_INTERVAL_MS", "30000")
        clean_env.setenv("SENTINEL_TARGET_SELECTORS", "#connect, colab-connect-button,")
        clean_env.setenv("PERSISTENCE_MOUNT_ROOT", "/mnt/drive/MyDrive")

        sentinel_settings, persistence_settings = load_settings()

        assert sentinel_settings.interval_ms == 30000
        assert sentinel_settings.target_selectors == ["#connect", "colab-connect-button"]
        assert persistence_settings.mount_root == "/mnt/drive/MyDrive"
        assert persistence_settings.mount_point == "/content/drive"

    def test_invalid_environment(self, clean_env):
        clean_env.setenv("SENTINEL_INTERVAL_MS", "-5")

        with pytest.raises(ValueError):
            load_settings()


def test_persistence_settings_ignore_sentinel_env(clean_env):
    """Sentinelの不正値はドライブ設定の読込に影響しない"""
    clean_env.setenv("SENTINEL_INTERVAL_MS", "abc")
    clean_env.setenv("PERSISTENCE_MOUNT_POINT", "/mnt/drive")

    settings = config.load_persistence_settings()

    assert settings.mount_point == "/mnt/drive"
