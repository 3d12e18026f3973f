import pytest


class FakeElement:
    """クリック回数を記録するだけの要素"""

    def __init__(self, name: str) -> None:
        self.name = name
        self.clicks = 0

    def click(self) -> None:
        self.clicks += 1


class FakeLocator:
    """セレクタ→要素の辞書で振る舞うロケータ"""

    def __init__(self, elements: dict[str, FakeElement] | None = None) -> None:
        self.elements = elements or {}
        self.queries: list[str] = []

    def find(self, selector: str) -> FakeElement | None:
        self.queries.append(selector)
        return self.elements.get(selector)


PRIMARY = "colab-toolbar-button#connect"
FALLBACK = "colab-connect-button"


@pytest.fixture
def primary_element():
    return FakeElement(PRIMARY)


@pytest.fixture
def fallback_element():
    return FakeElement(FALLBACK)


@pytest.fixture
def both_locator(primary_element, fallback_element):
    """両方のボタンが存在するページ"""
    return FakeLocator({PRIMARY: primary_element, FALLBACK: fallback_element})


@pytest.fixture
def fallback_only_locator(fallback_element):
    """フォールバックのボタンだけが存在するページ"""
    return FakeLocator({FALLBACK: fallback_element})


@pytest.fixture
def empty_locator():
    """どちらのボタンも存在しないページ"""
    return FakeLocator()


@pytest.fixture
def make_locator():
    """任意の要素構成のロケータを作る"""
    return FakeLocator


@pytest.fixture
def make_element():
    return FakeElement
