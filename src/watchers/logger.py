import logging
from pathlib import Path

__all__ = ["LOG_DIR", "logger"]

LOG_DIR = Path("./log")

logger = logging.getLogger("sentinel")
if not logger.handlers:
    logger.setLevel(logging.INFO)
    # ルートロガーに流すとノートブックで二重に表示される
    logger.propagate = False
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    _fh = logging.FileHandler(LOG_DIR / "sentinel.log", encoding="utf-8")
    _fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(_fh)
    # コンソールにはメッセージだけを出す
    _sh = logging.StreamHandler()
    _sh.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_sh)
