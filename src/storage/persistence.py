"""Checkpoint folder setup on a mounted cloud drive."""

from collections.abc import Callable
from pathlib import Path

from src.config import load_persistence_settings
from src.watchers.logger import logger

SUBDIRECTORIES = ("checkpoints", "logs")

Mounter = Callable[[str], object]


def colab_drive_mount(mount_point: str) -> None:
    """Mount Google Drive with the notebook runtime's own helper."""
    # google.colab はノートブックのランタイムにだけ存在する
    from google.colab import drive  # pyright: ignore[reportMissingImports]

    drive.mount(mount_point)


def _validate_project_name(project_name: str) -> str:
    if not project_name or not project_name.strip():
        msg = "project_name must not be empty"
        raise ValueError(msg)
    if project_name in {".", ".."} or "/" in project_name or "\\" in project_name:
        msg = f"project_name must be a single folder name: {project_name!r}"
        raise ValueError(msg)
    return project_name


def setup_persistence(
    project_name: str,
    *,
    mount_root: str | None = None,
    mount_point: str | None = None,
    mounter: Mounter | None = None,
) -> str:
    """Mount the drive and create the project's checkpoint and log folders.

    Existing folders are left alone, so calling this again is safe.  Mount
    errors are raised as-is by the mount helper.

    Args:
        project_name: プロジェクト名（フォルダ名になる）
        mount_root: プロジェクトフォルダを作る基点
        mount_point: ドライブのマウント先
        mounter: マウント関数。None なら google.colab のものを使う

    Returns:
        str: checkpoints ディレクトリのパス

    """
    _validate_project_name(project_name)
    if mount_root is None or mount_point is None:
        settings = load_persistence_settings()
        mount_root = mount_root or settings.mount_root
        mount_point = mount_point or settings.mount_point
    (mounter or colab_drive_mount)(mount_point)

    base = Path(mount_root) / project_name
    for name in SUBDIRECTORIES:
        (base / name).mkdir(parents=True, exist_ok=True)

    logger.debug("Persistence folders ready | base=%s", base)
    print(f"Persistencia configurada en: {base}")
    return str(base / "checkpoints")
