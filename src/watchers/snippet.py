"""Browser-console version of the Sentinel.

The operator can paste the rendered script into the developer console, or
inject it from a notebook cell with :func:`enable_in_notebook`.
"""

import json

from IPython.display import Javascript, display

from src.config import DEFAULT_INTERVAL_MS, SentinelSettings

HANDLE_NAME = "sentinelHandle"

_TEMPLATE = """\
function sentinelCheck() {
    console.log("[" + new Date().toLocaleTimeString() + "] Sentinel: Verificando conexión...");
    const selectors = %(selectors)s;
    for (const selector of selectors) {
        const button = document.querySelector(selector);
        if (button) {
            console.log("Haciendo clic en el botón de conexión.");
            button.click();
            return;
        }
    }
}
var %(handle)s = setInterval(sentinelCheck, %(interval_ms)d);
console.log("Sentinel activo. Para detenerlo: clearInterval(%(handle)s)");
"""


def render_console_script(
    interval_ms: int = DEFAULT_INTERVAL_MS,
    target_selectors: list[str] | None = None,
) -> str:
    """Return the JavaScript for the developer console.

    The ``setInterval`` id is stored in ``sentinelHandle``; running
    ``clearInterval(sentinelHandle)`` stops it.
    """
    values: dict[str, object] = {"interval_ms": interval_ms}
    if target_selectors is not None:
        values["target_selectors"] = target_selectors
    settings = SentinelSettings.model_validate(values)
    return _TEMPLATE % {
        "selectors": json.dumps(settings.target_selectors),
        "handle": HANDLE_NAME,
        "interval_ms": settings.interval_ms,
    }


def enable_in_notebook(
    interval_ms: int = DEFAULT_INTERVAL_MS,
    target_selectors: list[str] | None = None,
) -> None:
    """ノートブックのフロントエンドにスクリプトを注入する."""
    display(Javascript(render_console_script(interval_ms, target_selectors)))
    print(f"Sentinel enabled (every {interval_ms} ms)")
    print(f"Stop it from the browser console with clearInterval({HANDLE_NAME})")
