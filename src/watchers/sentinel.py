"""Idle-prevention loop.

Every ``interval_ms`` milliseconds the Sentinel looks for a connection
related element and clicks it, so that the notebook frontend looks busy to an
idle-timeout detector.  It is a best-effort heuristic: nothing checks whether
the click had any effect on the session.
"""

from __future__ import annotations

import argparse
import threading
import time
from collections import deque
from datetime import datetime
from pathlib import Path

from playwright.sync_api import sync_playwright

from src.config import DEFAULT_INTERVAL_MS, SentinelSettings, load_settings
from src.model.models import FiringRecord, LogEntry
from src.watchers.locator import ElementLocator, PlaywrightLocator
from src.watchers.logger import logger
from src.watchers.snippet import render_console_script

CHECK_MESSAGE = "Sentinel: Verificando conexión..."
CLICK_MESSAGE = "Haciendo clic en el botón de conexión."

DEFAULT_PROFILE_DIR = Path.home() / ".colab-sentinel" / "browser_profile"
DEFAULT_URL = "https://colab.research.google.com/"


class SentinelTask:
    """A cancellable fixed-rate task; the object itself is the handle."""

    def __init__(
        self,
        locator: ElementLocator,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        target_selectors: list[str] | None = None,
        history_size: int = 100,
    ) -> None:
        """Validate the settings and prepare an idle task.

        Args:
            locator: UI要素を探すオブジェクト
            interval_ms: 発火間隔（ミリ秒）
            target_selectors: 優先順のセレクタ。None なら既定値
            history_size: 保持するログ行の最大数

        Raises:
            ValueError: 間隔が正でない、またはセレクタが空の場合

        """
        values: dict[str, object] = {
            "interval_ms": interval_ms,
            "history_size": history_size,
        }
        if target_selectors is not None:
            values["target_selectors"] = target_selectors
        settings = SentinelSettings.model_validate(values)

        self.locator = locator
        self.interval_ms = settings.interval_ms
        self.target_selectors = settings.target_selectors
        self.history: deque[LogEntry] = deque(maxlen=settings.history_size)
        self.firings = 0
        self.last_firing: FiringRecord | None = None

        self._cancelled = threading.Event()
        self._lock = threading.RLock()
        self._started = False
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._started and not self._cancelled.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _record(self, message: str) -> None:
        self.history.append(message)
        logger.info(message)

    def fire(self) -> FiringRecord:
        """Run one firing: log, then click the first target that exists.

        Selectors are tried in priority order and at most one element is
        clicked.  Finding nothing is a normal outcome.
        """
        now = time.time()
        self.firings += 1
        self._record(f"[{datetime.fromtimestamp(now).strftime('%X')}] {CHECK_MESSAGE}")

        activated: str | None = None
        for selector in self.target_selectors:
            element = self.locator.find(selector)
            if element is None:
                continue
            element.click()
            self._record(CLICK_MESSAGE)
            activated = selector
            break

        record: FiringRecord = {"timestamp": now, "activated": activated}
        self.last_firing = record
        return record

    def fire_safely(self) -> FiringRecord | None:
        """Fire unless cancelled; a failing firing is logged, not raised."""
        with self._lock:
            if self._cancelled.is_set():
                return None
            try:
                return self.fire()
            except Exception as e:  # noqa: BLE001
                # 1回の失敗でループは止めない
                logger.warning("Sentinel firing failed: %s", e)
                return None

    def _loop(self) -> None:
        interval = self.interval_ms / 1000
        started = time.monotonic()
        due = 0
        while True:
            due += 1
            delay = started + due * interval - time.monotonic()
            if self._cancelled.wait(max(0.0, delay)):
                return
            self.fire_safely()
            # 遅れた発火の後は取りこぼした枠を飛ばし、まとめて発火しない
            due = max(due, int((time.monotonic() - started) // interval))

    def _mark_started(self) -> None:
        if self._started:
            msg = "Sentinel task has already been started"
            raise RuntimeError(msg)
        self._started = True
        logger.info(
            "Sentinel started | interval_ms=%s selectors=%s",
            self.interval_ms,
            self.target_selectors,
        )

    def start(self) -> SentinelTask:
        """Start firing on a daemon thread and return ``self``."""
        self._mark_started()
        self._thread = threading.Thread(
            target=self._loop, name="sentinel", daemon=True
        )
        self._thread.start()
        return self

    def run(self) -> None:
        """Run the loop on the calling thread until cancelled or Ctrl+C."""
        self._mark_started()
        try:
            self._loop()
        except KeyboardInterrupt:
            self.cancel()

    def cancel(self) -> None:
        """Stop further firings.  Calling it again does nothing."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
        logger.info("Sentinel cancelled | firings=%s", self.firings)

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


def start(
    interval_ms: int = DEFAULT_INTERVAL_MS,
    *,
    locator: ElementLocator,
    target_selectors: list[str] | None = None,
    history_size: int = 100,
) -> SentinelTask:
    """Start a Sentinel on a background thread and return its handle.

    Every call creates a new, independent task.
    """
    task = SentinelTask(
        locator,
        interval_ms=interval_ms,
        target_selectors=target_selectors,
        history_size=history_size,
    )
    return task.start()


def cancel(handle: object) -> None:
    """ハンドルを停止する。未知のハンドルや停止済みなら何もしない."""
    if isinstance(handle, SentinelTask):
        handle.cancel()


def run_in_browser(
    url: str,
    settings: SentinelSettings,
    *,
    profile_dir: Path = DEFAULT_PROFILE_DIR,
    headless: bool = False,
    once: bool = False,
) -> None:
    """Open ``url`` in a persistent Chromium profile and keep it busy.

    Playwright's sync API is bound to the thread that created it, so the
    loop runs on the calling thread.
    """
    profile_dir.mkdir(parents=True, exist_ok=True)
    with sync_playwright() as p:
        context = p.chromium.launch_persistent_context(
            user_data_dir=str(profile_dir),
            headless=headless,
            args=["--disable-blink-features=AutomationControlled"],
            ignore_default_args=["--enable-automation"],
        )
        try:
            page = context.pages[0] if context.pages else context.new_page()
            page.goto(url, timeout=60000)
            task = SentinelTask(
                PlaywrightLocator(page),
                interval_ms=settings.interval_ms,
                target_selectors=settings.target_selectors,
                history_size=settings.history_size,
            )
            if once:
                task.fire_safely()
            else:
                task.run()
        finally:
            context.close()
            logger.info("Browser closed.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Colab idle-prevention Sentinel")
    parser.add_argument(
        "--interval-ms", type=int, default=None, help="発火間隔（ミリ秒）"
    )
    parser.add_argument(
        "--selector",
        action="append",
        default=None,
        help="クリック対象のセレクタ（優先順に複数指定可）",
    )
    parser.add_argument(
        "--print-snippet",
        action="store_true",
        help="開発者コンソール用のJavaScriptを出力して終了",
    )
    parser.add_argument("--url", default=DEFAULT_URL, help="開くノートブックのURL")
    parser.add_argument(
        "--profile-dir",
        type=Path,
        default=DEFAULT_PROFILE_DIR,
        help="ブラウザプロファイルの保存先",
    )
    parser.add_argument("--headless", action="store_true", help="ヘッドレスで起動")
    parser.add_argument("--once", action="store_true", help="1回だけ発火して終了")
    return parser


def main(argv: list[str] | None = None) -> int:
    """メイン関数."""
    args = build_parser().parse_args(argv)

    settings, _ = load_settings()
    overrides: dict[str, object] = {}
    if args.interval_ms is not None:
        overrides["interval_ms"] = args.interval_ms
    if args.selector:
        overrides["target_selectors"] = args.selector
    try:
        settings = SentinelSettings.model_validate(
            {**settings.model_dump(), **overrides}
        )
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 2

    if args.print_snippet:
        print(render_console_script(settings.interval_ms, settings.target_selectors))
        return 0

    run_in_browser(
        args.url,
        settings,
        profile_dir=args.profile_dir,
        headless=args.headless,
        once=args.once,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
