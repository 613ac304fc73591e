import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from programs.columns import TARGET_CAMPUS
from programs.export import EXPORT_FILENAME, export_csv_bytes
from programs.filters import ProgramFilters, is_default
from programs.metrics_overview import compute_breakdowns, compute_charts, compute_kpis
from programs.state import EMPTY_STATE, DashboardState, current_context, load_upload, reset_filters, update_filters

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("programs.app")

alt.data_transformers.disable_max_rows()

STATE_KEY = "dashboard"
UPLOAD_KEY = "upload"
FILTER_WIDGETS: Dict[str, str] = {
    "colleges": "filter_colleges",
    "levels": "filter_levels",
    "copc_statuses": "filter_copc_statuses",
    "accreditations": "filter_accreditations",
    "deans": "filter_deans",
    "search": "filter_search",
    "hide_blank_major": "filter_hide_blank_major",
}
FILTER_LABELS: Dict[str, str] = {
    "colleges": "College",
    "levels": "Level",
    "copc_statuses": "COPC Status",
    "accreditations": "Accreditation (normalized)",
    "deans": "Dean",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .page-head {display: flex;align-items: baseline;gap: 10px;padding: 4px 0 6px;border-bottom: 1px solid #e5e7eb;}
        .page-head .page-title {font-size: 1.35rem;font-weight: 700;color: #1f2937;}
        .page-head .campus-tag {background: #ede9fe;color: #5b21b6;border-radius: 10px;padding: 2px 8px;font-size: 0.8rem;}
        .page-head .source {color: #6b7280;font-size: 0.85rem;}
        .panel {border: 1px solid #e5e7eb;border-radius: 10px;padding: 12px 14px;background: #ffffff;margin-bottom: 12px;}
        .panel-head {display: flex;justify-content: space-between;align-items: baseline;margin-bottom: 6px;}
        .panel-title {font-weight: 600;font-size: 0.95rem;color: #1f2937;}
        .panel-note {font-size: 0.85rem;color: #6b7280;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin: 8px 0 4px;}
        .chip {background: #f3f4f6;border-radius: 12px;padding: 3px 10px;font-size: 0.8rem;color: #4b5563;}
        .chip.on {background: #7c5cff;color: #ffffff;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, note: str = ""):
    container = st.container()
    container.markdown(
        f"<div class='panel'><div class='panel-head'><span class='panel-title'>{title}</span>"
        f"<span class='panel-note'>{note}</span></div>",
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(filters: ProgramFilters) -> str:
    # (text, narrows) per chip; narrowing chips are highlighted.
    chips: List[tuple] = []
    for name, label in FILTER_LABELS.items():
        selected = getattr(filters, name)
        chips.append((f"{label}: {len(selected)} selected", True) if selected else (f"{label}: All", False))
    if filters.search:
        chips.append((f"Search: “{filters.search}”", True))
    if filters.hide_blank_major:
        chips.append(("Blank Major hidden", True))
    return "".join(f"<span class='chip{' on' if on else ''}'>{txt}</span>" for txt, on in chips)


def render_page_header(title: str, source: Optional[str], filter_summary_html: str, export_df: Optional[pd.DataFrame] = None):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='page-head'><span class='page-title'>{title}</span>"
            f"<span class='campus-tag'>{TARGET_CAMPUS}</span>"
            f"<span class='source'>{source or ''}</span></div>",
            unsafe_allow_html=True,
        )
    with c2:
        st.download_button(
            "Download CSV",
            data=export_csv_bytes(export_df if export_df is not None else pd.DataFrame()),
            file_name=EXPORT_FILENAME,
            mime="text/csv",
            disabled=export_df is None,
        )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


# ---------- Session state ----------
def get_state() -> DashboardState:
    return st.session_state.get(STATE_KEY, EMPTY_STATE)


def clear_filter_widgets():
    for key in FILTER_WIDGETS.values():
        st.session_state.pop(key, None)


def on_upload():
    uploaded = st.session_state.get(UPLOAD_KEY)
    if uploaded is None:
        return
    try:
        state = load_upload(uploaded, file_name=uploaded.name)
    except Exception as exc:
        logger.exception("loading %s failed", uploaded.name)
        state = DashboardState(error=f"Failed to load {uploaded.name}: {exc}")
    st.session_state[STATE_KEY] = state
    clear_filter_widgets()


def on_reset():
    clear_filter_widgets()
    st.session_state[STATE_KEY] = reset_filters(get_state())


def filters_from_widgets() -> dict:
    return {name: st.session_state.get(key) for name, key in FILTER_WIDGETS.items()}


# ---------- UI setup ----------
st.set_page_config(page_title=f"{TARGET_CAMPUS} Programs Dashboard", layout="wide")
inject_base_styles()
st.title(f"{TARGET_CAMPUS} Programs Dashboard")
st.caption("COPC status, offerings and accreditation for the programs of one campus.")

with st.sidebar:
    st.markdown("### Data")
    st.file_uploader("Upload Database.xlsx", type=["xlsx"], key=UPLOAD_KEY, on_change=on_upload)
    state = get_state()
    if state.error:
        st.error(state.error)

if not state.loaded:
    st.info(f"Upload your `Database.xlsx`. Once loaded, you’ll get KPIs, charts, and a table for {TARGET_CAMPUS}.")
    st.stop()

data_ctx = state.data_ctx
raw_rows = data_ctx["raw"]
programs = data_ctx["programs"]
removed_count = int(data_ctx.get("removed_count", 0) or 0)

# ----- Sidebar: load summary + filters -----
options = current_context(state)["options"]
with st.sidebar:
    summary = f"Loaded: **{len(raw_rows)}** rows • {TARGET_CAMPUS}: **{len(programs)}** rows"
    if removed_count:
        summary += f" • Removed non-{TARGET_CAMPUS}: **{removed_count}**"
    st.markdown(summary)

    st.markdown("---")
    st.markdown("### Filters")
    st.text_input("Search", key=FILTER_WIDGETS["search"], placeholder="Program, Major, COPC No., CMO/PSG, BOR...")
    st.checkbox("Hide blank Major", key=FILTER_WIDGETS["hide_blank_major"])
    for name, label in FILTER_LABELS.items():
        st.multiselect(label, options=options[name], key=FILTER_WIDGETS[name], placeholder="All")
    st.button("Reset", on_click=on_reset, disabled=is_default(update_filters(state, filters_from_widgets()).filters))

state = update_filters(state, filters_from_widgets())
st.session_state[STATE_KEY] = state
ctx = current_context(state)
filters: ProgramFilters = ctx["filters"]
filtered_programs: pd.DataFrame = ctx["filtered_programs"]


def render_kpi_tiles(df: pd.DataFrame):
    kpis = compute_kpis(df)
    cols = st.columns(5)
    cols[0].metric("Programs", f"{kpis.total:,}", help="Rows after the current filters.")
    cols[1].metric("COPC Issued", f"{kpis.issued:,}", help="COPC Status equal to “Issued”.")
    cols[2].metric("Under Application", f"{kpis.under_application:,}", help="COPC Status equal to “Under Application”.")
    cols[3].metric("Phase-out", f"{kpis.phase_out:,}", help="COPC Status containing “phase-out”.")
    cols[4].metric("Colleges", f"{kpis.colleges:,}", help="Distinct non-empty colleges.")


def render_overview_page():
    render_page_header("Programs Overview", data_ctx.get("file_name"), format_filter_summary(filters), export_df=filtered_programs)
    with card("KPI Tiles"):
        render_kpi_tiles(filtered_programs)

    if filtered_programs.empty:
        st.info("No programs match the selected filters.")
    else:
        charts = compute_charts(compute_breakdowns(filtered_programs))
        chart_cols = st.columns(2)
        with chart_cols[0]:
            with card("COPC Status by College"):
                st.altair_chart(charts["status_by_college"], use_container_width=True)
        with chart_cols[1]:
            with card("Offerings by College and Level"):
                st.altair_chart(charts["level_by_college"], use_container_width=True)
        chart_cols = st.columns(2)
        with chart_cols[0]:
            with card("Accreditation Distribution"):
                st.altair_chart(charts["accreditation"], use_container_width=True)
        with chart_cols[1]:
            with card("Accreditation by College"):
                st.altair_chart(charts["accreditation_by_college"], use_container_width=True)

    with card("Programs", note=f"Showing {len(filtered_programs)} rows"):
        st.dataframe(filtered_programs, use_container_width=True, hide_index=True)


render_overview_page()
