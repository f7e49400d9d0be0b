from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from core.config import APP_NAME, get_data_path
from core.data import load_dashboard_data, prepare_context
from core.errors import DashboardError, InvalidRangeError, InvalidSelectionError
from core.metrics_country import compute_average_indicator, compute_country_trend
from core.metrics_table import compute_raw_table
from core.metrics_trends import compute_global_trend, compute_insights, compute_top_trends


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(country: str, year_range, show_raw: bool) -> str:
    chips = [f"Country: {country}", f"Years: {year_range[0]}–{year_range[1]}", "Raw data: on" if show_raw else "Raw data: off"]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_empty_state(message: Optional[str] = None):
    st.info(message or "No observations for this country and year range.")


# ---------- UI setup ----------
st.set_page_config(page_title=APP_NAME, layout="wide")
inject_base_styles()
st.title(APP_NAME)
st.caption("How does average obesity (BMI ≥ 30) prevalence change by country?")

try:
    data = load_dashboard_data()
except FileNotFoundError:
    st.error(f"No dataset found. Place bmi.csv at {get_data_path()} or set OBESITY_DATA_PATH.")
    st.stop()
except DashboardError as exc:
    st.error(f"Could not load the dataset: {exc}")
    st.stop()

if data.empty:
    st.error("The dataset has no valid obesity observations after cleaning.")
    st.stop()

# ----- Sidebar: filters -----
min_year, max_year = data.year_bounds
countries = list(data.countries)
with st.sidebar:
    st.markdown("### Filters")
    default_idx = countries.index(data.default_country) if data.default_country in countries else 0
    country = st.selectbox("Select a country:", options=countries, index=default_idx)
    if min_year < max_year:
        year_range = st.slider("Select Year Range:", min_value=min_year, max_value=max_year, value=(min_year, max_year))
    else:
        year_range = (min_year, max_year)
        st.caption(f"Only {min_year} is available.")
    show_raw = st.checkbox("Show raw data table", value=False)
    page = 1
    if show_raw:
        page = int(st.number_input("Raw data page", min_value=1, value=1, step=1))

filters = {
    "country": country,
    "year_range": list(year_range),
    "show_raw": show_raw,
    "page": page,
}

try:
    ctx = prepare_context(filters, data)
except (InvalidSelectionError, InvalidRangeError) as exc:
    st.warning(str(exc))
    ctx = None

st.markdown(f"<div class='chip-row'>{format_filter_summary(country, year_range, show_raw)}</div>", unsafe_allow_html=True)

tab_trend, tab_avg, tab_top, tab_global, tab_insights, tab_raw = st.tabs(
    ["Country Trend", "Avg Obesity", f"Top {data.top_n} Trends", "Global Trend", "Insights", "Raw Data"]
)

with tab_trend:
    if ctx is None:
        render_empty_state("Pick a valid country and year range.")
    else:
        trend = compute_country_trend(ctx["filters"], ctx)
        with card(f"{country} obesity trend"):
            if trend["empty"]:
                render_empty_state()
            else:
                st.vega_lite_chart(trend["chart"], use_container_width=True)

with tab_avg:
    if ctx is None:
        render_empty_state("Pick a valid country and year range.")
    else:
        avg = compute_average_indicator(ctx["filters"], ctx)
        with card(f"Average obesity in {country}"):
            if avg["empty"]:
                render_empty_state()
            st.vega_lite_chart(avg["chart"], use_container_width=False)

with tab_top:
    top = compute_top_trends(data)
    with card(f"Top {data.top_n} countries by average obesity"):
        st.vega_lite_chart(top["chart"], use_container_width=True)
        st.caption(", ".join(top["countries"]))

with tab_global:
    global_trend = compute_global_trend(data)
    with card("Global average obesity over time"):
        st.vega_lite_chart(global_trend["chart"], use_container_width=True)

with tab_insights:
    insights = compute_insights(data)
    st.markdown("#### Key Insights")
    for line in insights["lines"]:
        st.markdown(line)

with tab_raw:
    if ctx is None:
        render_empty_state("Pick a valid country and year range.")
    else:
        table = compute_raw_table(ctx["filters"], ctx)
        if not table["visible"]:
            st.caption("Enable 'Show raw data table' in the sidebar to inspect rows.")
        else:
            with card(f"Raw observations ({table['total_rows']} rows)"):
                st.dataframe(pd.DataFrame(table["rows"], columns=table["columns"]), use_container_width=True, hide_index=True)
                st.caption(f"Page {table['page']} of {table['total_pages']}")
                st.download_button(
                    "Export CSV",
                    data=ctx["country_data"].to_csv(index=False).encode("utf-8"),
                    file_name=f"{country.replace(' ', '_')}_obesity.csv",
                    mime="text/csv",
                )
