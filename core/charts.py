from __future__ import annotations

import math
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

GAUGE_BANDS = [(0, 20), (20, 40), (40, 60), (60, 80), (80, 100)]
GAUGE_BAND_COLORS = ["#f3f4f6", "#e5e7eb", "#d1d5db", "#9ca3af", "#6b7280"]
GAUGE_BAR_COLOR = "darkorange"


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def line_chart(
    df: pd.DataFrame,
    *,
    x: str,
    y: str,
    title: str,
    y_title: str = "Obesity Rate (%)",
    color: Optional[str] = None,
    line_color: str = "darkblue",
) -> alt.Chart:
    encodings = {
        "x": alt.X(f"{x}:O", title="Year"),
        "y": alt.Y(f"{y}:Q", title=y_title),
        "tooltip": [alt.Tooltip(f"{x}:O", title="Year"), alt.Tooltip(f"{y}:Q", format=".2f")],
    }
    if color:
        encodings["color"] = alt.Color(f"{color}:N", title=color.title())
        encodings["tooltip"] = [alt.Tooltip(f"{color}:N")] + encodings["tooltip"]
        mark = alt.Chart(df).mark_line(point=True, strokeWidth=2)
    else:
        mark = alt.Chart(df).mark_line(point=True, color=line_color)
    return mark.encode(**encodings).properties(title=title)


def gauge_chart(value: Optional[float], *, title: str) -> alt.LayerChart:
    """Half-circle gauge on a 0-100 scale; ``None`` renders an empty dial."""
    theta_scale = alt.Scale(domain=[0, 100], range=[-math.pi / 2, math.pi / 2])
    bands = pd.DataFrame(
        {
            "start": [b[0] for b in GAUGE_BANDS],
            "end": [b[1] for b in GAUGE_BANDS],
            "band": [f"{b[0]}-{b[1]}" for b in GAUGE_BANDS],
        }
    )
    shown = 0.0 if value is None else max(0.0, min(100.0, float(value)))
    needle = pd.DataFrame({"start": [0.0], "end": [shown]})
    label = pd.DataFrame({"label": ["N/A" if value is None else f"{float(value):.1f}%"]})

    background = (
        alt.Chart(bands)
        .mark_arc(innerRadius=70, outerRadius=110)
        .encode(
            theta=alt.Theta("start:Q", scale=theta_scale),
            theta2="end:Q",
            color=alt.Color("band:N", scale=alt.Scale(range=GAUGE_BAND_COLORS), legend=None),
        )
    )
    bar = (
        alt.Chart(needle)
        .mark_arc(innerRadius=80, outerRadius=100, color=GAUGE_BAR_COLOR)
        .encode(theta=alt.Theta("start:Q", scale=theta_scale), theta2="end:Q")
    )
    text = alt.Chart(label).mark_text(fontSize=28, fontWeight="bold", dy=-10).encode(text="label:N")
    return alt.layer(background, bar, text).properties(title=title, width=300, height=220)


def ranked_bar_chart(df: pd.DataFrame, *, category: str, value: str, title: str, x_title: str) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_bar(color="darkorange")
        .encode(
            x=alt.X(f"{value}:Q", title=x_title),
            y=alt.Y(f"{category}:N", sort="-x", title=category.title()),
            tooltip=[alt.Tooltip(f"{category}:N"), alt.Tooltip(f"{value}:Q", format=".2f")],
        )
        .properties(title=title)
    )
