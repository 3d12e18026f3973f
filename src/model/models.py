__all__ = ["FiringRecord", "LogEntry"]


from typing import TypedDict

LogEntry = str


class FiringRecord(TypedDict):
    """1回の発火結果."""

    timestamp: float
    activated: str | None  # クリックしたセレクタ。見つからなければ None
