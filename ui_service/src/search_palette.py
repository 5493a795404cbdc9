"""
Search palette helpers used by the Streamlit UI.

Kept free of Streamlit calls so they can be unit tested.
"""

import html
import re
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from shared_utils.constants import APIEndpoints, Defaults, LogScope
from shared_utils.logging_utils import ContextualLogger


logger = ContextualLogger(scope=LogScope.UI)


class SearchDebouncer:
    """Fires a query only once the user has paused typing.

    ``push()`` records a keystroke; ``due()`` returns the latest query when
    at least ``interval_ms`` passed since the last keystroke and that query
    has not been fired yet.
    """

    def __init__(
        self,
        interval_ms: int = Defaults.SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_ms < Defaults.MIN_SEARCH_DEBOUNCE_MS:
            raise ValueError(
                f"interval_ms must be >= {Defaults.MIN_SEARCH_DEBOUNCE_MS}, got {interval_ms}"
            )
        self.interval_ms = interval_ms
        self._clock = clock
        self._pending: Optional[str] = None
        self._last_keystroke = 0.0
        self._last_fired: Optional[str] = None

    def push(self, query: str) -> None:
        if query != self._pending:
            self._pending = query
            self._last_keystroke = self._clock()

    def remaining_s(self) -> float:
        """Seconds left before the pending query may fire."""
        elapsed = self._clock() - self._last_keystroke
        return max(0.0, self.interval_ms / 1000.0 - elapsed)

    def due(self) -> Optional[str]:
        if self._pending is None or self._pending == self._last_fired:
            return None
        if self.remaining_s() > 0:
            return None
        self._last_fired = self._pending
        return self._pending


def highlight_snippet(text: str, query: str) -> str:
    """HTML-escape ``text`` and wrap case-insensitive matches of ``query`` in <mark>."""
    raw = str(text or "")
    q = (query or "").strip()
    if not q:
        return html.escape(raw, quote=False)
    # Odd indices of the split are the matches.
    pieces = re.split(f"({re.escape(q)})", raw, flags=re.IGNORECASE)
    return "".join(
        f'<mark class="lsrch">{html.escape(piece, quote=False)}</mark>'
        if i % 2
        else html.escape(piece, quote=False)
        for i, piece in enumerate(pieces)
    )


def snippet_of(hit: Dict[str, Any]) -> str:
    """Secondary line shown under the title."""
    return hit.get("excerpt") or hit.get("description") or hit.get("category") or ""


def result_anchor(hit: Dict[str, Any]) -> str:
    """In-page link that opens the hit's section and focuses the record."""
    return f"#/{quote(str(hit.get('type', '')))}?docid={quote(str(hit.get('id', '')), safe='')}"


def format_score(hit: Dict[str, Any]) -> str:
    line = f"Score: {float(hit.get('similarity', 0.0)):.3f}"
    if hit.get("period"):
        line += f" · {html.escape(str(hit['period']), quote=False)}"
    return line


def fetch_results(
    api_base: str,
    query: str,
    client: Optional[httpx.Client] = None,
    timeout: float = Defaults.REQUEST_TIMEOUT,
) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Call ``GET /api/search``.

    Returns:
        (hits, error). ``error`` is None on success; an empty ``hits`` list
        with no error means "no matches".
    """
    q = (query or "").strip()
    if not q:
        return [], None

    http = client or httpx.Client(timeout=timeout)
    try:
        resp = http.get(f"{api_base}{APIEndpoints.SEARCH}", params={"q": q})
    except httpx.RequestError as e:
        logger.error("search_request_failed", error=str(e))
        return [], "Search service unreachable."
    finally:
        if client is None:
            http.close()

    if resp.status_code == 200:
        return resp.json(), None

    try:
        body = resp.json()
    except ValueError:
        body = None
    message = body.get("error", resp.text) if isinstance(body, dict) else resp.text
    logger.warning("search_api_error", status=resp.status_code, error=message)
    return [], message
