"""Settings for the Sentinel loop and the persistence helper.

Values come from ``.env.local`` at the repository root and from the process
environment.  Anything missing falls back to the defaults below.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

REPO_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_INTERVAL_MS = 60000
DEFAULT_TARGET_SELECTORS = ["colab-toolbar-button#connect", "colab-connect-button"]
DEFAULT_MOUNT_POINT = "/content/drive"
DEFAULT_MOUNT_ROOT = "/content/drive/MyDrive"


class SentinelSettings(BaseModel):
    """Sentinelループの設定."""

    interval_ms: int = DEFAULT_INTERVAL_MS
    target_selectors: list[str] = list(DEFAULT_TARGET_SELECTORS)
    history_size: int = 100

    @field_validator("interval_ms")
    @classmethod
    def interval_must_be_positive(cls, v: int) -> int:
        """間隔は正の値であること"""
        if v <= 0:
            msg = "interval_ms must be positive"
            raise ValueError(msg)
        return v

    @field_validator("target_selectors")
    @classmethod
    def selectors_must_not_be_empty(cls, v: list[str]) -> list[str]:
        """セレクタが1つ以上あり、空文字を含まないこと"""
        if not v:
            msg = "target_selectors must not be empty"
            raise ValueError(msg)
        if any(not s or not s.strip() for s in v):
            msg = "target_selectors must not contain blank entries"
            raise ValueError(msg)
        return [s.strip() for s in v]

    @field_validator("history_size")
    @classmethod
    def history_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            msg = "history_size must be positive"
            raise ValueError(msg)
        return v


class PersistenceSettings(BaseModel):
    """ドライブのマウント先とプロジェクトフォルダの基点."""

    mount_point: str = DEFAULT_MOUNT_POINT
    mount_root: str = DEFAULT_MOUNT_ROOT


def _split_selectors(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_local_env() -> None:
    load_dotenv(dotenv_path=REPO_ROOT / ".env.local", override=True)


def load_sentinel_settings() -> SentinelSettings:
    """Build the Sentinel settings from ``.env.local`` and the environment.

    Raises:
        ValueError: when a variable is present but invalid.

    """
    load_local_env()

    values: dict[str, object] = {}
    if "SENTINEL_INTERVAL_MS" in os.environ:
        values["interval_ms"] = os.environ["SENTINEL_INTERVAL_MS"]
    if "SENTINEL_TARGET_SELECTORS" in os.environ:
        values["target_selectors"] = _split_selectors(
            os.environ["SENTINEL_TARGET_SELECTORS"]
        )
    if "SENTINEL_HISTORY_SIZE" in os.environ:
        values["history_size"] = os.environ["SENTINEL_HISTORY_SIZE"]
    return SentinelSettings.model_validate(values)


def load_persistence_settings() -> PersistenceSettings:
    """ドライブ関連の設定だけを読む（SENTINEL_* は見ない）."""
    load_local_env()

    values: dict[str, object] = {}
    if "PERSISTENCE_MOUNT_POINT" in os.environ:
        values["mount_point"] = os.environ["PERSISTENCE_MOUNT_POINT"]
    if "PERSISTENCE_MOUNT_ROOT" in os.environ:
        values["mount_root"] = os.environ["PERSISTENCE_MOUNT_ROOT"]
    return PersistenceSettings.model_validate(values)


def load_settings() -> tuple[SentinelSettings, PersistenceSettings]:
    """Build both settings objects."""
    return load_sentinel_settings(), load_persistence_settings()
