#!/usr/bin/env python3
from __future__ import annotations

import html
import sys
import tempfile
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bulletin_finder.loader import ALL_FORMATS  # noqa: E402
from bulletin_finder.models import EnrichedRow, cell_text  # noqa: E402
from bulletin_finder.report import MAIN_CELL_COUNT, MISSING, REPORT_COLUMNS, other_data  # noqa: E402
from bulletin_finder.session import Session  # noqa: E402

UPLOAD_EXTS = sorted(ext.lstrip(".") for ext in ALL_FORMATS)
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def ensure_state() -> None:
    st.session_state.setdefault("session", Session())
    st.session_state.setdefault("upload_token", None)
    st.session_state.setdefault("selection_version", 0)
    st.session_state.setdefault("term_input", "")


def current_session() -> Session:
    return st.session_state["session"]


def bump_selection_version() -> None:
    st.session_state["selection_version"] += 1


def sync_upload(uploaded) -> None:
    """Load a newly uploaded file; the same upload across reruns is a no-op."""
    if uploaded is None:
        if st.session_state["upload_token"] is not None:
            st.session_state["upload_token"] = None
            st.session_state["session"] = Session()
        return
    token = (uploaded.name, uploaded.size)
    if st.session_state["upload_token"] == token:
        return
    st.session_state["upload_token"] = token
    current_session().load(uploaded.getvalue(), uploaded.name)
    st.session_state["term_input"] = ""
    bump_selection_version()


def run_search() -> None:
    current_session().search(st.session_state.get("term_input", ""))
    bump_selection_version()


def select_all_visible() -> None:
    current_session().select_all_visible()
    bump_selection_version()


def clear_selection() -> None:
    current_session().clear_selection()
    bump_selection_version()


def report_bytes(session: Session) -> bytes | None:
    with tempfile.TemporaryDirectory() as tmpdir:
        written = session.export(Path(tmpdir) / "report.xlsx", "xlsx")
        if written is None:
            return None
        return written.read_bytes()


def render_result(session: Session, row: EnrichedRow) -> None:
    version = st.session_state["selection_version"]
    with st.container(border=True):
        head, pick = st.columns([5, 1])
        head.markdown(f"**{html.escape(row.sheet_name)}** · row {row.row_number}")
        pick.checkbox(
            "Select",
            value=session.is_selected(row),
            key=f"pick_{row.key}_{version}",
            on_change=session.toggle,
            args=(row,),
        )
        st.markdown(
            f"""
            <div class="finder-context">
              <span class="finder-badge">{html.escape(row.organization or MISSING)}</span>
              <span class="finder-badge finder-badge-state">{html.escape(row.state or MISSING)}</span>
            </div>
            """,
            unsafe_allow_html=True,
        )
        labels = REPORT_COLUMNS[2 : 2 + MAIN_CELL_COUNT]
        cols = st.columns(MAIN_CELL_COUNT)
        for index, (col, label) in enumerate(zip(cols, labels)):
            col.caption(label)
            col.write(cell_text(row.cell(index)) or MISSING)
        extras = other_data(row)
        if extras:
            st.caption(f"Other data: {extras}")


def render_selection_bar(session: Session) -> None:
    count = len(session.selection)
    if not count:
        return
    st.markdown(
        f'<div class="selection-bar">Selected rows: <strong>{count}</strong></div>',
        unsafe_allow_html=True,
    )
    left, right = st.columns(2)
    left.button("Clear selection", width="stretch", on_click=clear_selection)
    payload = report_bytes(session)
    if payload is not None:
        right.download_button(
            "Download report",
            data=payload,
            file_name="selected-cases.xlsx",
            mime=XLSX_MIME,
            type="primary",
            width="stretch",
        )


def render_results(session: Session) -> None:
    if not session.has_searched:
        return
    results = session.results
    if not results:
        st.info(f'No results for "{session.term}".')
        return

    metrics = st.columns(3)
    metrics[0].metric("Results", len(results))
    metrics[1].metric("Selected", len(session.selection))
    metrics[2].metric("Sheets", len({row.sheet_name for row in results}))

    label = "Deselect all visible" if session.all_visible_selected else "Select all visible"
    st.button(label, on_click=select_all_visible)
    for row in results:
        render_result(session, row)


def set_visuals() -> None:
    st.set_page_config(page_title="bulletin-finder", page_icon="⚖️", layout="wide", initial_sidebar_state="collapsed")
    st.markdown(
        """
        <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
            max-width: 1100px;
        }
        .finder-context {
            display: flex;
            flex-wrap: wrap;
            gap: 0.4rem;
            margin-bottom: 0.5rem;
        }
        .finder-badge {
            background: #dbeafe;
            color: #1e3a8a;
            border-radius: 999px;
            padding: 0.15rem 0.7rem;
            font-size: 0.85rem;
            font-weight: 600;
        }
        .finder-badge-state {
            background: #fef3c7;
            color: #78350f;
        }
        .selection-bar {
            position: sticky;
            top: 0;
            z-index: 10;
            background: #2563eb;
            color: #ffffff;
            border-radius: 0.6rem;
            padding: 0.6rem 1rem;
            margin-bottom: 0.5rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def main() -> None:
    set_visuals()
    ensure_state()

    st.title("bulletin-finder")
    st.caption("Upload a court bulletin, search for a party or case, and export the rows you pick with their court and state.")

    uploaded = st.file_uploader("Upload bulletin", type=UPLOAD_EXTS, key="upload_input")
    sync_upload(uploaded)
    session = current_session()

    if session.error:
        st.error(session.error)
        return
    if not session.is_ready:
        st.info("Supported here: " + " ".join(f".{ext}" for ext in UPLOAD_EXTS))
        return
    for warning in session.warnings:
        st.warning(warning)

    with st.form("search_form"):
        left, right = st.columns([4, 1])
        left.text_input("Search term", key="term_input", placeholder="Name, case number, ...")
        right.form_submit_button("Search", type="primary", width="stretch", on_click=run_search)

    render_selection_bar(session)
    render_results(session)


if __name__ == "__main__":
    main()
