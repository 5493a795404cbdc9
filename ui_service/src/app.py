"""
Streamlit search palette for the portfolio API.

Type a query; once typing pauses for the debounce interval the palette
calls /api/search and renders each hit with its section, highlighted
title and snippet, score and an in-page link.
"""

import html
import time

import streamlit as st

from shared_utils.config_loader import get_settings
from shared_utils.logging_utils import ContextualLogger
from shared_utils.constants import LogScope
from ui_service.src.search_palette import (
    SearchDebouncer,
    fetch_results,
    format_score,
    highlight_snippet,
    result_anchor,
    snippet_of,
)


# ---------------------------------------------------------------------------
# Configuration & logging
# ---------------------------------------------------------------------------

settings = get_settings()
logger = ContextualLogger(scope=LogScope.UI)

API_BASE = settings.get_api_base_url()

CSS = """
<style>
.lsrch-sec{color:#c8a743;font-weight:800;font-size:.9rem}
.lsrch-title{font-weight:800}
.lsrch-desc{color:#9aa3b2}
.lsrch-score{color:#9aa3b2;font-size:.85rem}
mark.lsrch{background:rgba(240,185,11,.22);border-radius:.25em;padding:0 .2em}
</style>
"""


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

st.set_page_config(page_title=settings.app_name, layout="wide")
st.markdown(CSS, unsafe_allow_html=True)
st.title(f"🔎 {settings.app_name}")

if "debouncer" not in st.session_state:
    st.session_state.debouncer = SearchDebouncer(settings.search_debounce_ms)
    st.session_state.hits = []
    st.session_state.error = None
    st.session_state.query = ""

query = st.text_input("Search", placeholder="Search the site", label_visibility="collapsed")

debouncer: SearchDebouncer = st.session_state.debouncer
debouncer.push(query.strip())
# A newer keystroke reruns the script and abandons this wait.
time.sleep(debouncer.remaining_s())

due = debouncer.due()
if due is not None:
    logger.info("palette_search", query_len=len(due))
    with st.spinner("Searching…"):
        hits, error = fetch_results(API_BASE, due)
    st.session_state.hits = hits
    st.session_state.error = error
    st.session_state.query = due

if not query.strip():
    st.caption("Start typing to search blog posts and portfolio projects.")
elif st.session_state.error:
    st.warning(st.session_state.error)
elif not st.session_state.hits:
    st.info("No matches")
else:
    shown_query = st.session_state.query
    for hit in st.session_state.hits:
        with st.container(border=True):
            col_sec, col_body = st.columns([1, 5])
            col_sec.markdown(
                f"<div class='lsrch-sec'>{html.escape(str(hit.get('type', '')))}</div>",
                unsafe_allow_html=True,
            )
            snippet = snippet_of(hit)
            body = (
                f"<a href='{result_anchor(hit)}' class='lsrch-title'>"
                f"{highlight_snippet(hit.get('title', ''), shown_query)}</a>"
            )
            if snippet:
                body += f"<div class='lsrch-desc'>{highlight_snippet(snippet, shown_query)}</div>"
            body += f"<div class='lsrch-score'>{format_score(hit)}</div>"
            col_body.markdown(body, unsafe_allow_html=True)
