"""UI element lookup used by the Sentinel loop.

The loop never touches a browser directly; it asks an ``ElementLocator`` for
elements by selector.  ``PlaywrightLocator`` is the real implementation,
tests use their own fakes.
"""

from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from src.watchers.logger import logger


class Element(Protocol):
    """クリック可能な要素."""

    def click(self) -> None: ...


class ElementLocator(Protocol):
    """セレクタから要素を探す."""

    def find(self, selector: str) -> Element | None: ...


class PlaywrightLocator:
    """Look elements up in a Playwright sync ``Page``."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def find(self, selector: str) -> Element | None:
        # 再描画中やナビゲーション中の失敗は「見つからない」と同じ扱い
        try:
            return self.page.query_selector(selector)
        except PlaywrightError as e:
            logger.debug("query_selector failed | selector=%s error=%s", selector, e)
            return None
